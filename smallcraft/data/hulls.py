"""Static hull tables for small craft: tech levels, tonnage codes and hull cost.

Small craft hulls run from 10 to 100 tons.  Most downstream tables (drive
performance, weapon limits) are keyed by the tonnage *bracket*: the hull
tonnage rounded up to the next multiple of 10.

Tech level codes:
  A..H map to TL 10..17 and gate armor and electronics availability.

Costs:
  All money is stored as whole credits.  Tables that are easier to read in
  megacredits (MCr) are converted with mcr_to_credits().
"""

from __future__ import annotations

import math
from dataclasses import dataclass

CREDITS_PER_MCR = 1_000_000

MIN_HULL_TONNAGE = 10
MAX_HULL_TONNAGE = 100

TECH_LEVELS: dict[str, int] = {
    "A": 10,
    "B": 11,
    "C": 12,
    "D": 13,
    "E": 14,
    "F": 15,
    "G": 16,
    "H": 17,
}

TONNAGE_CODES: dict[str, int] = {
    "s1": 10,
    "s2": 20,
    "s3": 30,
    "s4": 40,
    "s5": 50,
    "s6": 60,
    "s7": 70,
    "s8": 80,
    "s9": 90,
    "s10": 100,
}

# Base hull cost in MCr, indexed by tonnage code.
_HULL_COST_MCR: dict[str, float] = {
    "s1": 1.0,
    "s2": 1.2,
    "s3": 1.3,
    "s4": 1.4,
    "s5": 1.5,
    "s6": 1.6,
    "s7": 1.7,
    "s8": 1.8,
    "s9": 1.9,
    "s10": 2.0,
}


@dataclass(frozen=True)
class HullResolution:
    """Tonnage code and base cost (credits) for a hull tonnage."""
    tonnage_code: str
    cost: int


# ---------------------------------------------------------------------------
# Money helpers
# ---------------------------------------------------------------------------

def mcr_to_credits(mcr: float) -> int:
    """Convert megacredits to whole credits."""
    return int(round(mcr * CREDITS_PER_MCR))


def credits_to_mcr(credits: float) -> float:
    return credits / CREDITS_PER_MCR


# ---------------------------------------------------------------------------
# Tech level helpers
# ---------------------------------------------------------------------------

def tech_level_value(tech_level: str) -> int | None:
    """Return the numeric TL for a code ('D' -> 13), or None if unknown."""
    return TECH_LEVELS.get(tech_level)


def is_tech_level_at_least(current: str, required: str) -> bool:
    current_value = tech_level_value(current)
    required_value = tech_level_value(required)
    if current_value is None or required_value is None:
        return False
    return current_value >= required_value


# ---------------------------------------------------------------------------
# Tonnage brackets
# ---------------------------------------------------------------------------

def tonnage_bracket(tonnage: float) -> int | None:
    """Round tonnage up to the nearest 10-ton bracket.

    Returns None when the rounded value falls outside 10..100, which callers
    treat as "no table entry".
    """
    rounded = int(math.ceil(tonnage / 10) * 10)
    if rounded < MIN_HULL_TONNAGE or rounded > MAX_HULL_TONNAGE:
        return None
    return rounded


def clamped_bracket(tonnage: float) -> int:
    """Round tonnage up to the nearest 10-ton bracket, clamped to 10..100."""
    rounded = int(math.ceil(tonnage / 10) * 10)
    return max(MIN_HULL_TONNAGE, min(MAX_HULL_TONNAGE, rounded))


# ---------------------------------------------------------------------------
# Hull resolution
# ---------------------------------------------------------------------------

def get_hull_code(tonnage: float) -> str:
    """Return the tonnage code (s1..s10); tonnage above 100 clamps to s10."""
    bracket = clamped_bracket(tonnage)
    return f"s{bracket // 10}"


def get_hull_cost_mcr(tonnage: float) -> float:
    """Return the base hull cost in MCr (1.0 at <=10 tons up to 2.0 at <=100)."""
    return _HULL_COST_MCR[get_hull_code(tonnage)]


def get_hull_cost(tonnage: float) -> int:
    """Return the base hull cost in credits."""
    return mcr_to_credits(get_hull_cost_mcr(tonnage))


def resolve_hull(tonnage: float) -> HullResolution:
    """Map a hull tonnage to its tonnage code and base cost.

    Never fails: tonnage outside 10..100 clamps to the nearest table entry.
    """
    return HullResolution(tonnage_code=get_hull_code(tonnage), cost=get_hull_cost(tonnage))
