"""Design service: mass/cost aggregation, crew rules and advisory validation.

Responsibilities:
  - Total mass and cost breakdown of a Design
  - Overweight predicate and remaining mass budget
  - Crew rules: derived gunners, which optional positions are offered
  - Advisory validation (issues are reported, never raised)
  - A single evaluate_design() bundle used by the wizard on every edit

Everything here is pure: no I/O, no mutation of the Design passed in.
"""

from dataclasses import dataclass, field

from smallcraft.data.armor import (
    get_armor_type,
    is_armor_type_available,
    max_armor_rating,
)
from smallcraft.data.drives import (
    DriveCategory,
    DriveType,
    FuelRequirement,
    calculate_total_energy_weapon_capacity,
    calculate_total_fuel_requirement,
    get_drive_performance,
    is_drive_installable,
    is_reaction_drive_valid,
)
from smallcraft.data.fittings import AIRLOCK_MAX_QUANTITY, FittingType, get_electronics
from smallcraft.data.hulls import mcr_to_credits, tech_level_value
from smallcraft.data.weapons import (
    WeaponLimits,
    calculate_anti_personnel_count,
    calculate_energy_weapon_count,
    calculate_required_gunners,
    calculate_slots_used,
    find_ship_weapon,
    get_weapon_limits,
    is_weapon_allowed_on_hull,
)
from smallcraft.schemas.design import Cargo, Design, Staff
from smallcraft.services.parts import is_drive_category

MODULAR_CUTTER_BAY_TONS = 30
SHIPS_LOCKER_COST_PER_TON = mcr_to_credits(0.2)
# Missile reloads only take up space.
MISSILE_RELOAD_COST_PER_TON = 0

DEFAULT_POWER_PLANT_WEEKS = 2
DEFAULT_MANEUVER_HOURS = 1


@dataclass
class CostBreakdown:
    """Cost per design section, in credits."""
    hull: int = 0
    armor: int = 0
    drives: int = 0
    fittings: int = 0
    weapons: int = 0
    cargo: int = 0

    @property
    def total(self) -> int:
        return self.hull + self.armor + self.drives + self.fittings + self.weapons + self.cargo


@dataclass
class DesignIssue:
    """An advisory problem with a design; blocks wizard advancement, not edits."""
    code: str
    message: str


@dataclass
class DesignEvaluation:
    total_mass: float
    remaining_mass: float
    is_overweight: bool
    costs: CostBreakdown
    fuel_requirement: FuelRequirement
    weapon_limits: WeaponLimits
    slots_used: int
    energy_capacity: int
    energy_weapons: int
    anti_personnel_weapons: int
    staff: Staff
    total_crew: int
    engineer_available: bool
    ecm_available: bool
    can_add_modular_cutter_bay: bool
    issues: list[DesignIssue] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Mass
# ---------------------------------------------------------------------------

def calculate_cargo_mass(cargo: Cargo) -> float:
    mass = cargo.cargo_bay + cargo.ships_locker + cargo.missile_reloads
    if cargo.modular_cutter_bay:
        mass += MODULAR_CUTTER_BAY_TONS
    return mass


def calculate_total_mass(design: Design) -> float:
    """Tons used by every installed part, fuel and cargo."""
    mass = sum(d.mass * d.quantity for d in design.drives)
    mass += design.fuel.amount
    mass += sum(f.mass * f.quantity for f in design.fittings)
    mass += sum(w.mass * w.quantity for w in design.weapons)
    mass += calculate_cargo_mass(design.cargo)
    if design.armor is not None:
        mass += design.armor.mass
    return mass


def remaining_mass(design: Design) -> float:
    return design.hull.tonnage - calculate_total_mass(design)


def is_overweight(design: Design) -> bool:
    return calculate_total_mass(design) > design.hull.tonnage


def can_add_modular_cutter_bay(design: Design) -> bool:
    """True if 30 tons are free, not counting a bay that is already installed."""
    without_bay = design.model_copy(
        update={"cargo": design.cargo.model_copy(update={"modular_cutter_bay": False})}
    )
    return remaining_mass(without_bay) >= MODULAR_CUTTER_BAY_TONS


# ---------------------------------------------------------------------------
# Cost
# ---------------------------------------------------------------------------

def calculate_ships_locker_cost(tons: float) -> int:
    return int(round(tons * SHIPS_LOCKER_COST_PER_TON))


def calculate_cargo_cost(cargo: Cargo) -> int:
    return calculate_ships_locker_cost(cargo.ships_locker) + int(
        round(cargo.missile_reloads * MISSILE_RELOAD_COST_PER_TON)
    )


def calculate_cost_breakdown(design: Design) -> CostBreakdown:
    return CostBreakdown(
        hull=design.hull.cost,
        armor=design.armor.cost if design.armor is not None else 0,
        drives=sum(d.cost * d.quantity for d in design.drives),
        fittings=sum(f.cost * f.quantity for f in design.fittings),
        weapons=sum(w.cost * w.quantity for w in design.weapons),
        cargo=calculate_cargo_cost(design.cargo),
    )


def calculate_total_cost(design: Design) -> int:
    return calculate_cost_breakdown(design).total


# ---------------------------------------------------------------------------
# Crew
# ---------------------------------------------------------------------------

def count_drives(design: Design, category: DriveCategory) -> int:
    return sum(d.quantity for d in design.drives if is_drive_category(d, category))


def is_engineer_available(design: Design) -> bool:
    """An engineer is offered with 2+ power plants or 2+ maneuver drives."""
    return (
        count_drives(design, DriveCategory.power_plant) >= 2
        or count_drives(design, DriveCategory.maneuver) >= 2
    )


def is_ecm_available(design: Design) -> bool:
    """An ECM operator is offered when an electronics suite includes jammers."""
    for fitting in design.fittings:
        if fitting.type != FittingType.electronics or not fitting.electronics_type:
            continue
        try:
            if get_electronics(fitting.electronics_type).has_jammers:
                return True
        except KeyError:
            continue
    return False


def derive_staff(design: Design) -> Staff:
    """Staff with gunners recomputed and positions no longer offered cleared."""
    staff = design.staff
    return staff.model_copy(
        update={
            "gunner": calculate_required_gunners(design.weapons),
            "engineer": staff.engineer and is_engineer_available(design),
            "ecm": staff.ecm and is_ecm_available(design),
        }
    )


def with_derived_staff(design: Design) -> Design:
    return design.model_copy(update={"staff": derive_staff(design)})


def total_crew(staff: Staff) -> int:
    return (
        staff.pilot
        + staff.gunner
        + int(staff.engineer)
        + int(staff.comms)
        + int(staff.sensors)
        + int(staff.ecm)
        + staff.other
    )


# ---------------------------------------------------------------------------
# Fuel
# ---------------------------------------------------------------------------

def calculate_fuel_requirement(
    design: Design,
    weeks: float = DEFAULT_POWER_PLANT_WEEKS,
    hours: float = DEFAULT_MANEUVER_HOURS,
) -> FuelRequirement:
    return calculate_total_fuel_requirement(design.drives, design.hull.tonnage, weeks, hours)


def is_fuel_sufficient(
    design: Design,
    weeks: float = DEFAULT_POWER_PLANT_WEEKS,
    hours: float = DEFAULT_MANEUVER_HOURS,
) -> bool:
    return design.fuel.amount >= calculate_fuel_requirement(design, weeks, hours).total


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _armor_issues(design: Design) -> list[DesignIssue]:
    armor = design.armor
    if armor is None:
        return []
    try:
        armor_type = get_armor_type(armor.type)
    except KeyError:
        return [DesignIssue("armor_unknown", f"Unknown armor type '{armor.type}'")]
    if not is_armor_type_available(armor.type, design.hull.tech_level):
        return [
            DesignIssue(
                "armor_locked",
                f"{armor_type.name} requires TL {armor_type.min_tech_level}",
            )
        ]
    max_rating = max_armor_rating(armor_type, design.hull.tech_level)
    if armor.rating > max_rating:
        return [
            DesignIssue(
                "armor_rating",
                f"{armor_type.name} rating {armor.rating} exceeds maximum {max_rating}",
            )
        ]
    return []


def _drive_issues(design: Design) -> list[DesignIssue]:
    issues = []
    tonnage = design.hull.tonnage
    for drive in design.drives:
        if drive.drive_type is None:
            continue
        if get_drive_performance(drive.model, tonnage) is None:
            issues.append(
                DesignIssue(
                    "drive_unavailable",
                    f"Drive model {drive.model} cannot be fitted to a {tonnage}-ton hull",
                )
            )
        elif drive.drive_type == DriveType.reaction_m and not is_reaction_drive_valid(
            drive.model, tonnage
        ):
            issues.append(
                DesignIssue(
                    "reaction_fuel",
                    f"Reaction drive {drive.model} burns 90% or more of hull tonnage per hour",
                )
            )
        elif not is_drive_installable(drive.drive_type, drive.model, tonnage):
            issues.append(
                DesignIssue("drive_unavailable", f"Drive model {drive.model} is not installable")
            )
    return issues


def _weapon_issues(design: Design) -> list[DesignIssue]:
    issues = []
    tonnage = design.hull.tonnage
    limits = get_weapon_limits(tonnage)

    slots = calculate_slots_used(design.weapons)
    if slots > limits.ship_weapons:
        issues.append(
            DesignIssue(
                "weapon_slots",
                f"Ship weapons use {slots} slots; hull allows {limits.ship_weapons}",
            )
        )

    capacity = calculate_total_energy_weapon_capacity(design.drives)
    energy = calculate_energy_weapon_count(design.weapons)
    if energy > capacity:
        issues.append(
            DesignIssue(
                "energy_capacity",
                f"{energy} energy weapons installed; power plants support {capacity}",
            )
        )

    anti_personnel = calculate_anti_personnel_count(design.weapons)
    if anti_personnel > limits.anti_personnel_weapons:
        issues.append(
            DesignIssue(
                "anti_personnel_limit",
                f"{anti_personnel} anti-personnel weapons; hull allows "
                f"{limits.anti_personnel_weapons}",
            )
        )

    for weapon in design.weapons:
        spec = find_ship_weapon(weapon.type)
        if spec is not None and not is_weapon_allowed_on_hull(spec, tonnage):
            issues.append(
                DesignIssue(
                    "weapon_min_tonnage",
                    f"{spec.name} requires a hull of at least {spec.min_tonnage} tons",
                )
            )
    return issues


def validate_design(
    design: Design,
    weeks: float = DEFAULT_POWER_PLANT_WEEKS,
    hours: float = DEFAULT_MANEUVER_HOURS,
) -> list[DesignIssue]:
    """Return every advisory issue with the design (empty list = clean)."""
    issues: list[DesignIssue] = []

    if not design.name.strip():
        issues.append(DesignIssue("name_missing", "Design name is required"))
    if tech_level_value(design.hull.tech_level) is None or design.hull.tonnage <= 0:
        issues.append(DesignIssue("hull_incomplete", "Choose a tech level and hull tonnage"))
    if is_overweight(design):
        issues.append(
            DesignIssue(
                "overweight",
                f"Design uses {calculate_total_mass(design):.2f} of "
                f"{design.hull.tonnage} tons",
            )
        )

    issues.extend(_armor_issues(design))
    issues.extend(_drive_issues(design))
    issues.extend(_weapon_issues(design))

    for fitting in design.fittings:
        if fitting.type == FittingType.airlock and fitting.quantity > AIRLOCK_MAX_QUANTITY:
            issues.append(
                DesignIssue("airlock_limit", f"At most {AIRLOCK_MAX_QUANTITY} airlocks")
            )

    if design.cargo.modular_cutter_bay and not can_add_modular_cutter_bay(design):
        issues.append(
            DesignIssue(
                "cutter_bay_space",
                f"A modular cutter bay needs {MODULAR_CUTTER_BAY_TONS} free tons",
            )
        )

    requirement = calculate_fuel_requirement(design, weeks, hours)
    if design.fuel.amount < requirement.total:
        issues.append(
            DesignIssue(
                "fuel_low",
                f"Fuel {design.fuel.amount:g} tons is below the "
                f"{requirement.total:g} tons recommended",
            )
        )

    if design.staff.pilot < 1:
        issues.append(DesignIssue("no_pilot", "At least one pilot is required"))
    return issues


def evaluate_design(
    design: Design,
    weeks: float = DEFAULT_POWER_PLANT_WEEKS,
    hours: float = DEFAULT_MANEUVER_HOURS,
) -> DesignEvaluation:
    """Everything the wizard shows alongside a design, recomputed from scratch."""
    staff = derive_staff(design)
    total_mass = calculate_total_mass(design)
    return DesignEvaluation(
        total_mass=total_mass,
        remaining_mass=design.hull.tonnage - total_mass,
        is_overweight=total_mass > design.hull.tonnage,
        costs=calculate_cost_breakdown(design),
        fuel_requirement=calculate_fuel_requirement(design, weeks, hours),
        weapon_limits=get_weapon_limits(design.hull.tonnage),
        slots_used=calculate_slots_used(design.weapons),
        energy_capacity=calculate_total_energy_weapon_capacity(design.drives),
        energy_weapons=calculate_energy_weapon_count(design.weapons),
        anti_personnel_weapons=calculate_anti_personnel_count(design.weapons),
        staff=staff,
        total_crew=total_crew(staff),
        engineer_available=is_engineer_available(design),
        ecm_available=is_ecm_available(design),
        can_add_modular_cutter_bay=can_add_modular_cutter_bay(design),
        issues=validate_design(design, weeks, hours),
    )
