"""Part builders: turn a rules-table selection into a priced Design record.

Each builder looks up the static tables in smallcraft.data, fills in mass and
cost, and returns a fresh schema object.  Selections that are not legal for
the hull (locked armor, drive model too small/large for the hull) return None
so callers can offer only the legal choices.
"""

import uuid

from smallcraft.data.armor import (
    calculate_armor_cost,
    calculate_armor_mass,
    clamp_armor_rating,
    get_armor_type,
    is_armor_type_available,
)
from smallcraft.data.drives import (
    DriveCategory,
    DriveType,
    category_for_drive_type,
    get_drive_performance,
    get_drive_spec,
    is_drive_installable,
)
from smallcraft.data.fittings import (
    COCKPIT_SPECS,
    FITTING_NAMES,
    FRESHER_COST,
    FRESHER_MASS,
    GALLEY_COST,
    GALLEY_MASS,
    FittingType,
    calculate_airlock_cost,
    calculate_airlock_mass,
    calculate_cabin_cost,
    calculate_cabin_mass,
    calculate_cockpit_cost,
    calculate_cockpit_mass,
    calculate_passengers,
    clamp_airlock_quantity,
    get_electronics,
    is_cockpit_type,
)
from smallcraft.data.hulls import tech_level_value
from smallcraft.data.weapons import WeaponCategory, WeaponType, get_ship_weapon
from smallcraft.schemas.design import Armor, Drive, Fitting, Hull, Weapon


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


# ---------------------------------------------------------------------------
# Armor
# ---------------------------------------------------------------------------

def build_armor(type_key: str, rating: int, hull: Hull) -> Armor | None:
    """Return priced armor for the hull, or None if the type is locked.

    The rating is clamped into [1, max rating at the hull's tech level].
    """
    if not is_armor_type_available(type_key, hull.tech_level):
        return None
    armor_type = get_armor_type(type_key)
    rating = clamp_armor_rating(rating, armor_type, hull.tech_level)
    return Armor(
        type=type_key,
        rating=rating,
        mass=calculate_armor_mass(rating, armor_type, hull.tonnage),
        cost=calculate_armor_cost(rating, armor_type, hull.cost),
    )


def change_armor_type(armor: Armor, type_key: str, hull: Hull) -> Armor | None:
    """Switch armor material, clamping the current rating to the new maximum."""
    return build_armor(type_key, armor.rating, hull)


def reprice_armor(armor: Armor, hull: Hull) -> Armor | None:
    """Recompute armor after a hull change; None if no longer available."""
    return build_armor(armor.type, armor.rating, hull)


# ---------------------------------------------------------------------------
# Drives
# ---------------------------------------------------------------------------

def build_drive(
    drive_type: DriveType | str,
    model: str,
    hull_tonnage: float,
    quantity: int = 1,
    drive_id: str | None = None,
) -> Drive | None:
    """Return a priced drive, or None if the model is not installable on the hull."""
    drive_type = DriveType(drive_type)
    if not is_drive_installable(drive_type, model, hull_tonnage):
        return None
    spec = get_drive_spec(drive_type, model)
    return Drive(
        id=drive_id or _new_id("drive"),
        type=category_for_drive_type(drive_type),
        drive_type=drive_type,
        model=model,
        rating=get_drive_performance(model, hull_tonnage) or 0,
        mass=spec.tonnage,
        cost=spec.cost,
        quantity=quantity,
    )


def is_drive_category(drive: Drive, category: DriveCategory) -> bool:
    return DriveCategory(drive.type) == category


# ---------------------------------------------------------------------------
# Fittings
# ---------------------------------------------------------------------------

def build_cockpit(
    fitting_type: FittingType | str,
    crew: int,
    hull_tonnage: float,
    fitting_id: str | None = None,
) -> Fitting:
    """Cockpit or control cabin; mass scales with crew, cost with hull size."""
    fitting_type = FittingType(fitting_type)
    if not is_cockpit_type(fitting_type):
        raise ValueError(f"'{fitting_type.value}' is not a cockpit or control cabin")
    crew = max(1, crew)
    spec = COCKPIT_SPECS[fitting_type]
    return Fitting(
        id=fitting_id or _new_id("fitting"),
        type=fitting_type,
        name=spec.name,
        mass=calculate_cockpit_mass(fitting_type, crew),
        cost=calculate_cockpit_cost(hull_tonnage),
        quantity=1,
        crew=crew,
        passengers=calculate_passengers(fitting_type, crew) if spec.allows_passengers else None,
    )


def build_cabin(passengers: int, fitting_id: str | None = None) -> Fitting:
    passengers = max(1, passengers)
    return Fitting(
        id=fitting_id or _new_id("fitting"),
        type=FittingType.cabin,
        name=FITTING_NAMES[FittingType.cabin],
        mass=calculate_cabin_mass(passengers),
        cost=calculate_cabin_cost(passengers),
        quantity=1,
        passengers=passengers,
    )


def build_airlock(quantity: int = 1, fitting_id: str | None = None) -> Fitting:
    """Airlocks; quantity is clamped to 1..6.

    Mass and cost are per unit so the aggregator's mass * quantity holds.
    """
    quantity = clamp_airlock_quantity(quantity)
    return Fitting(
        id=fitting_id or _new_id("fitting"),
        type=FittingType.airlock,
        name=FITTING_NAMES[FittingType.airlock],
        mass=calculate_airlock_mass(1),
        cost=calculate_airlock_cost(1),
        quantity=quantity,
    )


def build_fresher(fitting_id: str | None = None) -> Fitting:
    return Fitting(
        id=fitting_id or _new_id("fitting"),
        type=FittingType.fresher,
        name=FITTING_NAMES[FittingType.fresher],
        mass=FRESHER_MASS,
        cost=FRESHER_COST,
        quantity=1,
    )


def build_galley(fitting_id: str | None = None) -> Fitting:
    return Fitting(
        id=fitting_id or _new_id("fitting"),
        type=FittingType.galley,
        name=FITTING_NAMES[FittingType.galley],
        mass=GALLEY_MASS,
        cost=GALLEY_COST,
        quantity=1,
    )


def build_electronics(
    electronics_key: str, tech_level: str, fitting_id: str | None = None
) -> Fitting | None:
    """Electronics suite fitting, or None if not available at the tech level."""
    spec = get_electronics(electronics_key)
    tl = tech_level_value(tech_level)
    if tl is None or tl < spec.min_tech_level:
        return None
    return Fitting(
        id=fitting_id or _new_id("fitting"),
        type=FittingType.electronics,
        name=f"{spec.name} Electronics",
        mass=spec.mass,
        cost=spec.cost,
        quantity=1,
        electronics_type=spec.key,
        die_modifier=spec.die_modifier,
        includes=", ".join(spec.includes),
    )


def reprice_fitting(fitting: Fitting, hull_tonnage: float) -> Fitting:
    """Recompute a fitting whose price depends on hull size (cockpits)."""
    if is_cockpit_type(fitting.type):
        return fitting.model_copy(update={"cost": calculate_cockpit_cost(hull_tonnage)})
    return fitting


# ---------------------------------------------------------------------------
# Weapons
# ---------------------------------------------------------------------------

def build_ship_weapon(
    weapon_type: WeaponType | str,
    quantity: int = 1,
    mount_type: str = "turret",
    weapon_id: str | None = None,
) -> Weapon:
    """Ship weapon record from the weapon table; raises KeyError for unknown types."""
    spec = get_ship_weapon(weapon_type)
    if spec.weapon_type == WeaponType.particle_beam_barbette:
        mount_type = "barbette"
    return Weapon(
        id=weapon_id or _new_id("weapon"),
        type=spec.weapon_type.value,
        name=spec.name,
        category=WeaponCategory.ship,
        mass=spec.mass,
        cost=spec.cost,
        quantity=quantity,
        slots_used=spec.slots_used,
        energy_weapons=spec.energy_weapons,
        mount_type=mount_type,
    )


def build_anti_personnel_weapon(
    name: str,
    mass: float,
    cost: int,
    quantity: int = 1,
    weapon_id: str | None = None,
) -> Weapon:
    """Free-form anti-personnel mount; counted against the anti-personnel limit."""
    return Weapon(
        id=weapon_id or _new_id("weapon"),
        type="anti_personnel",
        name=name,
        category=WeaponCategory.anti_personnel,
        mass=mass,
        cost=cost,
        quantity=quantity,
        slots_used=0,
        energy_weapons=0,
        mount_type="fixed",
    )
