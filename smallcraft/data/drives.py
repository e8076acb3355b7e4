"""Static drive tables and the drive/fuel formulas for small craft.

Drive types:
  gravitic_m  - gravitic maneuver drive, burns no fuel
  reaction_m  - reaction maneuver drive, burns 2.5% of hull tonnage per
                point of performance per hour of thrust
  fusion_p    - fusion power plant
  chemical_p  - chemical power plant

Models:
  24 model codes sA..sZ (no sI or sO).  Each drive type has its own
  tonnage/cost per model.  Performance depends only on the model and the hull
  tonnage bracket; a None entry means the model cannot be fitted to a hull of
  that size.

Reaction drive rule:
  A reaction model is only offered when one hour of thrust burns less than
  90% of the hull tonnage.

Energy weapons:
  Each power plant supports a number of energy weapons determined by the
  position of its model in the model list (sA-sF: 0, sG-sL: 1, sM-sT: 2,
  sU-sZ: 3).  Installed power plants add up.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Protocol

from smallcraft.data.hulls import mcr_to_credits, tonnage_bracket

REACTION_FUEL_PER_PERFORMANCE_HOUR = 0.025
REACTION_MAX_HULL_FRACTION_PER_HOUR = 0.9
HOURS_PER_WEEK = 7 * 24


class DriveCategory(str, enum.Enum):
    power_plant = "powerPlant"
    maneuver = "maneuver"


class DriveType(str, enum.Enum):
    gravitic_m = "gravitic_m"
    reaction_m = "reaction_m"
    fusion_p = "fusion_p"
    chemical_p = "chemical_p"


DRIVE_TYPE_NAMES: dict[DriveType, str] = {
    DriveType.gravitic_m: "Gravitic M-Drive",
    DriveType.reaction_m: "Reaction M-Drive",
    DriveType.fusion_p: "Fusion P-Plant",
    DriveType.chemical_p: "Chemical P-Plant",
}

_CATEGORY_DRIVE_TYPES: dict[DriveCategory, list[DriveType]] = {
    DriveCategory.maneuver: [DriveType.gravitic_m, DriveType.reaction_m],
    DriveCategory.power_plant: [DriveType.fusion_p, DriveType.chemical_p],
}

DRIVE_MODELS: tuple[str, ...] = (
    "sA", "sB", "sC", "sD", "sE", "sF", "sG", "sH", "sJ", "sK",
    "sL", "sM", "sN", "sP", "sQ", "sR", "sS", "sT", "sU", "sV",
    "sW", "sX", "sY", "sZ",
)


@dataclass(frozen=True)
class DriveSpec:
    """Tonnage and cost of one drive model."""
    tonnage: float
    cost_mcr: float

    @property
    def cost(self) -> int:
        """Cost in credits."""
        return mcr_to_credits(self.cost_mcr)


@dataclass(frozen=True)
class FuelRequirement:
    """Fuel tons needed by installed drives, split by drive category."""
    total: float
    power_plant: float
    maneuver: float


class DriveLike(Protocol):
    type: DriveCategory
    drive_type: DriveType | None
    model: str
    quantity: int


def _spec_table(rows: list[tuple[float, float]]) -> dict[str, DriveSpec]:
    return {model: DriveSpec(tonnage=t, cost_mcr=c) for model, (t, c) in zip(DRIVE_MODELS, rows)}


# ---------------------------------------------------------------------------
# Per-model tonnage / cost (MCr)
# ---------------------------------------------------------------------------

DRIVE_SPECS: dict[DriveType, dict[str, DriveSpec]] = {
    DriveType.gravitic_m: _spec_table([
        (0.5, 1), (1, 2), (1.5, 3), (2, 3.5), (2.5, 4), (3, 6),
        (3.5, 8), (4, 9), (4.5, 10), (5, 11), (6, 12), (7, 14),
        (8, 16), (9, 18), (10, 20), (11, 22), (12, 24), (13, 26),
        (14, 28), (15, 30), (16, 32), (17, 34), (18, 36), (19, 38),
    ]),
    DriveType.reaction_m: _spec_table([
        (0.25, 0.5), (0.5, 1), (0.75, 1.5), (1, 2), (1.25, 2.5), (1.5, 3),
        (1.75, 3.5), (2, 4), (2.25, 4.5), (2.5, 5), (2.75, 5.5), (3, 6),
        (3.25, 6.5), (3.5, 7), (3.75, 7.5), (4, 8), (4.5, 9), (5, 10),
        (5.5, 11), (6, 12), (6.5, 13), (7, 14), (7.5, 15), (8, 16),
    ]),
    DriveType.fusion_p: _spec_table([
        (1.2, 3), (1.5, 3.5), (1.8, 4), (2.1, 4.5), (2.4, 5), (2.7, 5.5),
        (3, 6), (3.3, 6.5), (3.6, 7), (3.9, 7.5), (4.5, 8), (5.1, 9),
        (5.7, 10), (6.3, 12), (6.9, 14), (7.5, 16), (8.1, 18), (8.7, 20),
        (9.3, 22), (9.9, 24), (10.5, 26), (11.1, 28), (11.7, 30), (12.3, 32),
    ]),
    DriveType.chemical_p: _spec_table([
        (2, 1), (2.5, 1.25), (3, 1.5), (3.5, 1.75), (4, 2), (4.5, 2.25),
        (5, 2.5), (5.5, 2.75), (6, 3), (6.5, 3.25), (7, 3.5), (7.5, 3.75),
        (8, 4), (8.5, 4.25), (9, 4.5), (10, 5), (11, 5.5), (12, 6),
        (13, 6.5), (14, 7), (15, 7.5), (16, 8), (17, 8.5), (18, 9),
    ]),
}

# ---------------------------------------------------------------------------
# Performance by hull bracket (10, 20, ... 100); None = not installable
# ---------------------------------------------------------------------------

_BRACKETS = (10, 20, 30, 40, 50, 60, 70, 80, 90, 100)

_PERFORMANCE_ROWS: dict[str, tuple[int | None, ...]] = {
    "sA": (2, 1, None, None, None, None, None, None, None, None),
    "sB": (4, 2, 1, 1, None, None, None, None, None, None),
    "sC": (6, 3, 2, 1, 1, 1, None, None, None, None),
    "sD": (8, 4, 2, 2, 1, 1, 1, 1, None, None),
    "sE": (10, 5, 3, 2, 2, 1, 1, 1, 1, 1),
    "sF": (12, 6, 4, 3, 2, 2, 1, 1, 1, 1),
    "sG": (None, 7, 4, 3, 2, 2, 2, 2, 1, 1),
    "sH": (None, 8, 5, 4, 3, 2, 2, 2, 2, 2),
    "sJ": (None, 9, 6, 4, 3, 3, 2, 2, 2, 2),
    "sK": (None, 10, 6, 5, 4, 3, 3, 3, 2, 2),
    "sL": (None, 11, 7, 5, 4, 3, 3, 3, 3, 3),
    "sM": (None, 12, 8, 6, 4, 4, 3, 3, 3, 3),
    "sN": (None, 13, 8, 6, 5, 4, 4, 4, 3, 3),
    "sP": (None, 14, 9, 7, 5, 4, 4, 4, 4, 4),
    "sQ": (None, None, 10, 7, 6, 5, 4, 4, 4, 4),
    "sR": (None, None, 10, 8, 6, 5, 5, 5, 4, 4),
    "sS": (None, None, 11, 8, 6, 5, 5, 5, 5, 5),
    "sT": (None, None, 12, 9, 7, 6, 5, 5, 5, 5),
    "sU": (None, None, 12, 9, 7, 6, 6, 5, 5, 5),
    "sV": (None, None, 13, 10, 8, 6, 6, 6, 5, 5),
    "sW": (None, None, 14, 10, 8, 7, 6, 6, 6, 5),
    "sX": (None, None, 14, 11, 8, 7, 6, 6, 6, 6),
    "sY": (None, None, 15, 11, 9, 7, 6, 6, 6, 6),
    "sZ": (None, None, 16, 12, 9, 8, 6, 6, 6, 6),
}

DRIVE_PERFORMANCE: dict[str, dict[int, int | None]] = {
    model: dict(zip(_BRACKETS, row)) for model, row in _PERFORMANCE_ROWS.items()
}

# ---------------------------------------------------------------------------
# Power plant fuel, tons per 2 weeks of operation
# ---------------------------------------------------------------------------

FUSION_FUEL_REQUIREMENTS: dict[str, float] = dict(zip(DRIVE_MODELS, [
    1, 1, 1, 1, 1.5, 1.5, 1.5, 1.5, 2, 2, 2, 2,
    2.5, 2.5, 2.5, 2.5, 3, 3, 3, 3, 3.5, 3.5, 3.5, 3.5,
]))

CHEMICAL_FUEL_REQUIREMENTS: dict[str, float] = {
    model: 5.0 * (i + 1) for i, model in enumerate(DRIVE_MODELS)
}

_POWER_PLANT_FUEL: dict[DriveType, dict[str, float]] = {
    DriveType.fusion_p: FUSION_FUEL_REQUIREMENTS,
    DriveType.chemical_p: CHEMICAL_FUEL_REQUIREMENTS,
}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def is_drive_model(model: str) -> bool:
    return model in DRIVE_PERFORMANCE


def get_drive_spec(drive_type: DriveType | str, model: str) -> DriveSpec:
    """Return the tonnage/cost of a model for a drive type or raise KeyError."""
    try:
        return DRIVE_SPECS[DriveType(drive_type)][model]
    except (KeyError, ValueError) as exc:
        raise KeyError(f"Unknown drive: '{drive_type}' model '{model}'") from exc


def get_drive_type_name(drive_type: DriveType | str) -> str:
    return DRIVE_TYPE_NAMES[DriveType(drive_type)]


def drive_types_for_category(category: DriveCategory | str) -> list[DriveType]:
    """Maneuver -> gravitic/reaction; power plant -> fusion/chemical."""
    return list(_CATEGORY_DRIVE_TYPES[DriveCategory(category)])


def category_for_drive_type(drive_type: DriveType | str) -> DriveCategory:
    drive_type = DriveType(drive_type)
    for category, types in _CATEGORY_DRIVE_TYPES.items():
        if drive_type in types:
            return category
    raise KeyError(f"Drive type '{drive_type}' has no category")


def get_drive_performance(model: str, hull_tonnage: float) -> int | None:
    """Performance rating of a model on a hull, or None if not installable."""
    bracket = tonnage_bracket(hull_tonnage)
    if bracket is None:
        return None
    row = DRIVE_PERFORMANCE.get(model)
    if row is None:
        return None
    return row[bracket]


def get_available_drive_models(hull_tonnage: float) -> list[str]:
    """Models with a performance entry for this hull's bracket."""
    return [m for m in DRIVE_MODELS if get_drive_performance(m, hull_tonnage) is not None]


def is_reaction_drive_valid(model: str, hull_tonnage: float) -> bool:
    """True if one hour of thrust burns less than 90% of hull tonnage."""
    performance = get_drive_performance(model, hull_tonnage)
    if performance is None:
        return False
    fuel_per_hour = calculate_maneuver_drive_fuel(
        DriveType.reaction_m, performance, hull_tonnage, 1
    )
    return fuel_per_hour < hull_tonnage * REACTION_MAX_HULL_FRACTION_PER_HOUR


def get_available_drive_models_for_type(
    hull_tonnage: float, drive_type: DriveType | str
) -> list[str]:
    """Installable models for a drive type; reaction drives are fuel-filtered."""
    models = get_available_drive_models(hull_tonnage)
    if DriveType(drive_type) == DriveType.reaction_m:
        return [m for m in models if is_reaction_drive_valid(m, hull_tonnage)]
    return models


def is_drive_installable(drive_type: DriveType | str, model: str, hull_tonnage: float) -> bool:
    return model in get_available_drive_models_for_type(hull_tonnage, drive_type)


def format_performance_rating(
    performance: int | None, category: DriveCategory | str
) -> str:
    """'M-3' for maneuver drives, 'P-2' for power plants, 'N/A' for None."""
    if performance is None:
        return "N/A"
    prefix = "M" if DriveCategory(category) == DriveCategory.maneuver else "P"
    return f"{prefix}-{performance}"


# ---------------------------------------------------------------------------
# Fuel
# ---------------------------------------------------------------------------

def calculate_power_plant_fuel(drive_type: DriveType | str, model: str, weeks: float) -> float:
    """Fuel tons for a power plant running `weeks` weeks; maneuver drives use none."""
    table = _POWER_PLANT_FUEL.get(DriveType(drive_type))
    if table is None or model not in table:
        return 0.0
    return table[model] * (weeks / 2)


def calculate_maneuver_drive_fuel(
    drive_type: DriveType | str,
    performance: float,
    hull_tonnage: float,
    hours: float,
) -> float:
    """Fuel tons for `hours` of thrust; only reaction drives burn fuel."""
    if DriveType(drive_type) == DriveType.reaction_m:
        return hull_tonnage * REACTION_FUEL_PER_PERFORMANCE_HOUR * performance * hours
    return 0.0


def power_plant_hours(weeks: float) -> float:
    """Power plant operating window in hours (gravitic drives run as long)."""
    return weeks * HOURS_PER_WEEK


def calculate_total_fuel_requirement(
    drives: Iterable[DriveLike],
    hull_tonnage: float,
    weeks: float,
    hours: float,
) -> FuelRequirement:
    """Combine power plant fuel over `weeks` and reaction drive fuel over `hours`."""
    power_plant_fuel = 0.0
    maneuver_fuel = 0.0
    for drive in drives:
        if drive.drive_type is None:
            continue
        category = DriveCategory(drive.type)
        if category == DriveCategory.power_plant:
            power_plant_fuel += (
                calculate_power_plant_fuel(drive.drive_type, drive.model, weeks) * drive.quantity
            )
        elif category == DriveCategory.maneuver:
            performance = get_drive_performance(drive.model, hull_tonnage)
            if performance is None:
                continue
            maneuver_fuel += (
                calculate_maneuver_drive_fuel(drive.drive_type, performance, hull_tonnage, hours)
                * drive.quantity
            )
    return FuelRequirement(
        total=power_plant_fuel + maneuver_fuel,
        power_plant=power_plant_fuel,
        maneuver=maneuver_fuel,
    )


# ---------------------------------------------------------------------------
# Energy weapon capacity
# ---------------------------------------------------------------------------

def get_energy_weapon_capacity(power_plant_model: str | None) -> int:
    """Energy weapons one power plant of this model can support."""
    if not power_plant_model or power_plant_model not in DRIVE_MODELS:
        return 0
    index = DRIVE_MODELS.index(power_plant_model)
    if index <= 5:
        return 0
    if index <= 10:
        return 1
    if index <= 17:
        return 2
    return 3


def calculate_total_energy_weapon_capacity(drives: Iterable[DriveLike]) -> int:
    """Sum of the energy weapon capacity of all installed power plants."""
    return sum(
        get_energy_weapon_capacity(d.model) * d.quantity
        for d in drives
        if DriveCategory(d.type) == DriveCategory.power_plant
    )
