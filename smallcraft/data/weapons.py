"""Static weapon definitions, weapon limits and the gunner rules.

Weapon categories:
  ship            - turrets, barbettes and torpedoes; consume weapon slots
  anti-personnel  - small arms mounts; counted against a separate limit

Slot rule:
  Sum of slots_used over installed ship weapons <= hull slot limit.

Energy rule:
  Lasers and particle beams count as energy weapons.  The total installed
  energy weapon count must not exceed the capacity of the power plants.

Gunner rule (a pure function of the installed weapons):
  +1 per particle beam barbette
  +1 in total when any torpedo is installed
  +1 per turret family present (pulse laser, beam laser, missile rack),
     however many turrets of that family are fitted
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Protocol

from smallcraft.data.drives import DriveLike, calculate_total_energy_weapon_capacity
from smallcraft.data.hulls import clamped_bracket, mcr_to_credits


class WeaponCategory(str, enum.Enum):
    ship = "ship"
    anti_personnel = "anti-personnel"


class WeaponFamily(str, enum.Enum):
    pulse_laser = "pulse_laser"
    beam_laser = "beam_laser"
    missile_rack = "missile_rack"
    particle_beam = "particle_beam"
    torpedo = "torpedo"


class WeaponType(str, enum.Enum):
    pulse_laser_single = "pulse_laser_single"
    pulse_laser_double = "pulse_laser_double"
    pulse_laser_triple = "pulse_laser_triple"
    beam_laser_single = "beam_laser_single"
    beam_laser_double = "beam_laser_double"
    beam_laser_triple = "beam_laser_triple"
    missile_rack_single = "missile_rack_single"
    missile_rack_double = "missile_rack_double"
    missile_rack_triple = "missile_rack_triple"
    particle_beam_barbette = "particle_beam_barbette"
    torpedo = "torpedo"


# Families that need one gunner per family, not per turret.
TURRET_FAMILIES = frozenset(
    {WeaponFamily.pulse_laser, WeaponFamily.beam_laser, WeaponFamily.missile_rack}
)


@dataclass(frozen=True)
class ShipWeaponSpec:
    """Definition of a ship weapon mount."""
    weapon_type: WeaponType
    name: str
    family: WeaponFamily
    mass: float
    cost_mcr: float
    slots_used: int
    energy_weapons: int
    min_tonnage: int | None = None

    @property
    def cost(self) -> int:
        return mcr_to_credits(self.cost_mcr)

    @property
    def is_energy_weapon(self) -> bool:
        return self.energy_weapons > 0


@dataclass(frozen=True)
class WeaponLimits:
    ship_weapons: int
    anti_personnel_weapons: int


class WeaponLike(Protocol):
    type: str
    category: WeaponCategory | None
    quantity: int


_SHIP_WEAPON_LIST: list[ShipWeaponSpec] = [
    ShipWeaponSpec(
        weapon_type=WeaponType.pulse_laser_single,
        name="Single Pulse Laser Turret",
        family=WeaponFamily.pulse_laser,
        mass=1,
        cost_mcr=1.7,
        slots_used=1,
        energy_weapons=1,
    ),
    ShipWeaponSpec(
        weapon_type=WeaponType.pulse_laser_double,
        name="Double Pulse Laser Turret",
        family=WeaponFamily.pulse_laser,
        mass=1,
        cost_mcr=2.5,
        slots_used=1,
        energy_weapons=2,
    ),
    ShipWeaponSpec(
        weapon_type=WeaponType.pulse_laser_triple,
        name="Triple Pulse Laser Turret",
        family=WeaponFamily.pulse_laser,
        mass=1,
        cost_mcr=3.5,
        slots_used=1,
        energy_weapons=3,
    ),
    ShipWeaponSpec(
        weapon_type=WeaponType.beam_laser_single,
        name="Single Beam Laser Turret",
        family=WeaponFamily.beam_laser,
        mass=1,
        cost_mcr=2.2,
        slots_used=1,
        energy_weapons=1,
    ),
    ShipWeaponSpec(
        weapon_type=WeaponType.beam_laser_double,
        name="Double Beam Laser Turret",
        family=WeaponFamily.beam_laser,
        mass=1,
        cost_mcr=3.5,
        slots_used=1,
        energy_weapons=2,
    ),
    ShipWeaponSpec(
        weapon_type=WeaponType.beam_laser_triple,
        name="Triple Beam Laser Turret",
        family=WeaponFamily.beam_laser,
        mass=1,
        cost_mcr=5,
        slots_used=1,
        energy_weapons=3,
    ),
    ShipWeaponSpec(
        weapon_type=WeaponType.missile_rack_single,
        name="Single Missile Rack Turret",
        family=WeaponFamily.missile_rack,
        mass=1,
        cost_mcr=1,
        slots_used=1,
        energy_weapons=0,
    ),
    ShipWeaponSpec(
        weapon_type=WeaponType.missile_rack_double,
        name="Double Missile Rack Turret",
        family=WeaponFamily.missile_rack,
        mass=1,
        cost_mcr=1.75,
        slots_used=1,
        energy_weapons=0,
    ),
    ShipWeaponSpec(
        weapon_type=WeaponType.missile_rack_triple,
        name="Triple Missile Rack Turret",
        family=WeaponFamily.missile_rack,
        mass=1,
        cost_mcr=2.5,
        slots_used=1,
        energy_weapons=0,
    ),
    ShipWeaponSpec(
        weapon_type=WeaponType.particle_beam_barbette,
        name="Particle Beam Barbette",
        family=WeaponFamily.particle_beam,
        mass=10,
        cost_mcr=5.5,
        slots_used=2,
        energy_weapons=2,
        min_tonnage=40,
    ),
    ShipWeaponSpec(
        weapon_type=WeaponType.torpedo,
        name="Torpedo",
        family=WeaponFamily.torpedo,
        mass=2.5,
        cost_mcr=2,
        slots_used=1,
        energy_weapons=0,
    ),
]

SHIP_WEAPONS: dict[WeaponType, ShipWeaponSpec] = {w.weapon_type: w for w in _SHIP_WEAPON_LIST}

WEAPON_LIMITS: dict[int, WeaponLimits] = {
    10: WeaponLimits(ship_weapons=1, anti_personnel_weapons=1),
    20: WeaponLimits(ship_weapons=1, anti_personnel_weapons=2),
    30: WeaponLimits(ship_weapons=1, anti_personnel_weapons=3),
    40: WeaponLimits(ship_weapons=2, anti_personnel_weapons=4),
    50: WeaponLimits(ship_weapons=2, anti_personnel_weapons=5),
    60: WeaponLimits(ship_weapons=2, anti_personnel_weapons=6),
    70: WeaponLimits(ship_weapons=3, anti_personnel_weapons=7),
    80: WeaponLimits(ship_weapons=3, anti_personnel_weapons=8),
    90: WeaponLimits(ship_weapons=4, anti_personnel_weapons=9),
    100: WeaponLimits(ship_weapons=5, anti_personnel_weapons=10),
}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def get_ship_weapon(weapon_type: WeaponType | str) -> ShipWeaponSpec:
    """Return a ShipWeaponSpec or raise KeyError."""
    try:
        return SHIP_WEAPONS[WeaponType(weapon_type)]
    except ValueError as exc:
        raise KeyError(f"Unknown ship weapon: '{weapon_type}'") from exc


def find_ship_weapon(weapon_type: str) -> ShipWeaponSpec | None:
    """Like get_ship_weapon() but returns None for unknown types."""
    try:
        return get_ship_weapon(weapon_type)
    except KeyError:
        return None


def list_ship_weapons() -> list[ShipWeaponSpec]:
    return list(SHIP_WEAPONS.values())


def get_weapon_limits(hull_tonnage: float) -> WeaponLimits:
    """Slot and anti-personnel limits for the hull's (clamped) tonnage bracket."""
    return WEAPON_LIMITS[clamped_bracket(hull_tonnage)]


def is_weapon_allowed_on_hull(spec: ShipWeaponSpec, hull_tonnage: float) -> bool:
    return spec.min_tonnage is None or hull_tonnage >= spec.min_tonnage


def get_available_ship_weapons(hull_tonnage: float) -> dict[WeaponType, ShipWeaponSpec]:
    """Ship weapons whose minimum hull tonnage (if any) is met."""
    return {
        key: spec
        for key, spec in SHIP_WEAPONS.items()
        if is_weapon_allowed_on_hull(spec, hull_tonnage)
    }


# ---------------------------------------------------------------------------
# Installed weapon accounting
# ---------------------------------------------------------------------------

def _ship_weapons(weapons: Iterable[WeaponLike]) -> list[tuple[WeaponLike, ShipWeaponSpec]]:
    """Installed ship weapons paired with their specs; unknown types are skipped."""
    result = []
    for weapon in weapons:
        if weapon.category != WeaponCategory.ship:
            continue
        spec = find_ship_weapon(weapon.type)
        if spec is not None:
            result.append((weapon, spec))
    return result


def calculate_slots_used(weapons: Iterable[WeaponLike]) -> int:
    return sum(spec.slots_used * w.quantity for w, spec in _ship_weapons(weapons))


def calculate_energy_weapon_count(weapons: Iterable[WeaponLike]) -> int:
    """Individual lasers and beams: a triple turret counts 3, a barbette 2."""
    return sum(spec.energy_weapons * w.quantity for w, spec in _ship_weapons(weapons))


def calculate_anti_personnel_count(weapons: Iterable[WeaponLike]) -> int:
    return sum(w.quantity for w in weapons if w.category == WeaponCategory.anti_personnel)


def calculate_required_gunners(weapons: Iterable[WeaponLike]) -> int:
    """Gunners needed to crew the installed ship weapons.

    Family-level, not unit-level: two pulse laser turrets need the same single
    gunner as one.  Order of the weapons list does not matter.
    """
    gunners = 0
    has_torpedo = False
    turret_families: set[WeaponFamily] = set()

    for weapon, spec in _ship_weapons(weapons):
        if weapon.quantity <= 0:
            continue
        if spec.family == WeaponFamily.particle_beam:
            gunners += weapon.quantity
        elif spec.family == WeaponFamily.torpedo:
            has_torpedo = True
        elif spec.family in TURRET_FAMILIES:
            turret_families.add(spec.family)

    if has_torpedo:
        gunners += 1
    return gunners + len(turret_families)


def can_add_ship_weapon(
    weapon_type: WeaponType | str,
    weapons: Iterable[WeaponLike],
    drives: Iterable[DriveLike],
    hull_tonnage: float,
) -> bool:
    """True if one more mount of this type fits the hull's slots and power."""
    spec = find_ship_weapon(weapon_type)
    if spec is None or not is_weapon_allowed_on_hull(spec, hull_tonnage):
        return False

    weapons = list(weapons)
    limits = get_weapon_limits(hull_tonnage)
    if calculate_slots_used(weapons) + spec.slots_used > limits.ship_weapons:
        return False

    if spec.is_energy_weapon:
        capacity = calculate_total_energy_weapon_capacity(drives)
        if calculate_energy_weapon_count(weapons) + spec.energy_weapons > capacity:
            return False
    return True
