"""Static fitting definitions and mass/cost formulas.

Fitting types:
  cockpit        - 1.5 tons per crew position
  control_cabin  - 3 tons per crew position, carries floor(crew * 0.5) passengers
  cabin          - 1.5 tons per passenger, 0.05 MCr per ton
  airlock        - 1 ton / 0.2 MCr each, at most 6
  fresher        - 1 ton / 0.1 MCr
  galley         - 0.5 ton / 0.1 MCr
  electronics    - sensor/computer suite, see ELECTRONICS

Cockpit and control cabin cost depends only on hull size:
  ceil(hull_tonnage / 20) * 0.1 MCr
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field

from smallcraft.data.hulls import mcr_to_credits, tech_level_value


class FittingType(str, enum.Enum):
    cockpit = "cockpit"
    control_cabin = "control_cabin"
    cabin = "cabin"
    airlock = "airlock"
    fresher = "fresher"
    galley = "galley"
    electronics = "electronics"
    other = "other"


@dataclass(frozen=True)
class CockpitSpec:
    name: str
    tons_per_crew: float
    # passengers = floor(crew * passenger_ratio)
    passenger_ratio: float = 0.0

    @property
    def allows_passengers(self) -> bool:
        return self.passenger_ratio > 0


COCKPIT_SPECS: dict[FittingType, CockpitSpec] = {
    FittingType.cockpit: CockpitSpec(name="Cockpit", tons_per_crew=1.5),
    FittingType.control_cabin: CockpitSpec(
        name="Control Cabin", tons_per_crew=3, passenger_ratio=0.5
    ),
}

COCKPIT_COST_PER_20_TONS = mcr_to_credits(0.1)

CABIN_TONS_PER_PASSENGER = 1.5
CABIN_COST_PER_TON = mcr_to_credits(0.05)

AIRLOCK_MASS = 1.0
AIRLOCK_COST = mcr_to_credits(0.2)
AIRLOCK_MAX_QUANTITY = 6

FRESHER_MASS = 1.0
FRESHER_COST = mcr_to_credits(0.1)

GALLEY_MASS = 0.5
GALLEY_COST = mcr_to_credits(0.1)

FITTING_NAMES: dict[FittingType, str] = {
    FittingType.cockpit: "Cockpit",
    FittingType.control_cabin: "Control Cabin",
    FittingType.cabin: "Cabin",
    FittingType.airlock: "Airlock",
    FittingType.fresher: "Fresher",
    FittingType.galley: "Galley",
    FittingType.electronics: "Electronics",
    FittingType.other: "Other",
}


# ---------------------------------------------------------------------------
# Cockpit / control cabin
# ---------------------------------------------------------------------------

def is_cockpit_type(fitting_type: FittingType | str) -> bool:
    return fitting_type in (FittingType.cockpit, FittingType.control_cabin)


def calculate_cockpit_mass(fitting_type: FittingType | str, crew: int) -> float:
    return COCKPIT_SPECS[FittingType(fitting_type)].tons_per_crew * crew


def calculate_cockpit_cost(hull_tonnage: float) -> int:
    """0.1 MCr per started 20 tons of hull, whatever the crew count or type."""
    units = math.ceil(hull_tonnage / 20)
    return units * COCKPIT_COST_PER_20_TONS


def calculate_passengers(fitting_type: FittingType | str, crew: int) -> int:
    """Passenger capacity granted by a cockpit-type fitting."""
    spec = COCKPIT_SPECS[FittingType(fitting_type)]
    return math.floor(crew * spec.passenger_ratio)


# ---------------------------------------------------------------------------
# Cabins, airlocks, fresher, galley
# ---------------------------------------------------------------------------

def calculate_cabin_mass(passengers: int) -> float:
    return passengers * CABIN_TONS_PER_PASSENGER


def calculate_cabin_cost(passengers: int) -> int:
    return int(round(calculate_cabin_mass(passengers) * CABIN_COST_PER_TON))


def clamp_airlock_quantity(quantity: int) -> int:
    return max(1, min(quantity, AIRLOCK_MAX_QUANTITY))


def calculate_airlock_mass(quantity: int) -> float:
    return quantity * AIRLOCK_MASS


def calculate_airlock_cost(quantity: int) -> int:
    return quantity * AIRLOCK_COST


# ---------------------------------------------------------------------------
# Electronics suites
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ElectronicsSpec:
    """A sensor/computer suite fitted as a single fitting."""
    key: str
    name: str
    min_tech_level: int
    die_modifier: int
    mass: float
    cost_mcr: float
    includes: list[str] = field(default_factory=list)

    @property
    def cost(self) -> int:
        return mcr_to_credits(self.cost_mcr)

    @property
    def has_jammers(self) -> bool:
        """Jammers let the craft carry a dedicated ECM operator."""
        return "Jammers" in self.includes


ELECTRONICS: dict[str, ElectronicsSpec] = {
    "standard": ElectronicsSpec(
        key="standard",
        name="Standard",
        min_tech_level=8,
        die_modifier=-4,
        mass=0,
        cost_mcr=0,
        includes=["Radar", "Lidar"],
    ),
    "basic_civilian": ElectronicsSpec(
        key="basic_civilian",
        name="Basic Civilian",
        min_tech_level=9,
        die_modifier=-2,
        mass=1,
        cost_mcr=0.05,
        includes=["Radar", "Lidar"],
    ),
    "basic_military": ElectronicsSpec(
        key="basic_military",
        name="Basic Military",
        min_tech_level=10,
        die_modifier=0,
        mass=2,
        cost_mcr=1,
        includes=["Radar", "Lidar", "Jammers"],
    ),
    "advanced": ElectronicsSpec(
        key="advanced",
        name="Advanced",
        min_tech_level=11,
        die_modifier=1,
        mass=3,
        cost_mcr=2,
        includes=["Radar", "Lidar", "Jammers", "Densitometer"],
    ),
    "very_advanced": ElectronicsSpec(
        key="very_advanced",
        name="Very Advanced",
        min_tech_level=12,
        die_modifier=2,
        mass=5,
        cost_mcr=4,
        includes=["Radar", "Lidar", "Jammers", "Densitometer", "Neural Activity Sensor"],
    ),
}


def get_electronics(key: str) -> ElectronicsSpec:
    """Return an ElectronicsSpec or raise KeyError."""
    spec = ELECTRONICS.get(key)
    if spec is None:
        raise KeyError(f"Unknown electronics suite: '{key}'")
    return spec


def get_available_electronics(tech_level: str) -> list[ElectronicsSpec]:
    """Electronics suites unlocked at a tech level code."""
    tl = tech_level_value(tech_level)
    if tl is None:
        return []
    return [e for e in ELECTRONICS.values() if tl >= e.min_tech_level]
