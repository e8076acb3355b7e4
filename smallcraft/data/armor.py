"""Static armor definitions and the armor mass/cost formulas.

Each armor type has:
  min_tech_level          - numeric TL required to fit it
  protection_per_5_percent - armor points gained per 5% of hull tonnage
  cost_percent_of_hull    - cost of each 5% increment, as a percentage of the
                            base hull cost
  max_rating_cap          - highest rating allowed regardless of TL
                            (None = rating may go as high as the TL)

Mass rule:
  tons = hull_tonnage * rating * (5 / protection_per_5_percent) / 100,
  never less than 1 ton.

Cost rule:
  cost = rating * cost_percent_of_hull * hull_cost / (100 * protection_per_5_percent)
"""

from __future__ import annotations

from dataclasses import dataclass

from smallcraft.data.hulls import tech_level_value

MIN_ARMOR_MASS = 1.0


@dataclass(frozen=True)
class ArmorType:
    """Definition of one armor material."""
    key: str
    name: str
    min_tech_level: int
    protection_per_5_percent: int
    cost_percent_of_hull: int
    max_rating_cap: int | None = None

    def max_rating(self, tech_level: int) -> int:
        """Highest armor rating allowed at the given numeric TL."""
        if self.max_rating_cap is None:
            return tech_level
        return min(tech_level, self.max_rating_cap)


ARMOR_TYPES: dict[str, ArmorType] = {
    "titanium_steel": ArmorType(
        key="titanium_steel",
        name="Titanium Steel",
        min_tech_level=7,
        protection_per_5_percent=2,
        cost_percent_of_hull=5,
        max_rating_cap=9,
    ),
    "crystaliron": ArmorType(
        key="crystaliron",
        name="Crystaliron",
        min_tech_level=10,
        protection_per_5_percent=4,
        cost_percent_of_hull=20,
        max_rating_cap=13,
    ),
    "bonded_superdense": ArmorType(
        key="bonded_superdense",
        name="Bonded Superdense",
        min_tech_level=14,
        protection_per_5_percent=6,
        cost_percent_of_hull=50,
        max_rating_cap=None,
    ),
}


def get_armor_type(key: str) -> ArmorType:
    """Return an ArmorType definition or raise KeyError."""
    armor_type = ARMOR_TYPES.get(key)
    if armor_type is None:
        raise KeyError(f"Unknown armor type: '{key}'")
    return armor_type


def list_armor_types() -> list[ArmorType]:
    return list(ARMOR_TYPES.values())


def get_available_armor_types(tech_level: str) -> list[ArmorType]:
    """Return the armor types unlocked at a tech level code ('A'..'H').

    Unknown or empty tech level codes unlock nothing.
    """
    tl = tech_level_value(tech_level)
    if tl is None:
        return []
    return [a for a in ARMOR_TYPES.values() if tl >= a.min_tech_level]


def is_armor_type_available(key: str, tech_level: str) -> bool:
    return any(a.key == key for a in get_available_armor_types(tech_level))


def max_armor_rating(armor_type: ArmorType, tech_level: str) -> int:
    """Max rating for an armor type at a tech level code; 0 if the code is unknown."""
    tl = tech_level_value(tech_level)
    if tl is None:
        return 0
    return armor_type.max_rating(tl)


def clamp_armor_rating(rating: int, armor_type: ArmorType, tech_level: str) -> int:
    """Clamp a requested rating into [1, max rating]."""
    return max(1, min(rating, max_armor_rating(armor_type, tech_level)))


def calculate_armor_mass(rating: int, armor_type: ArmorType, hull_tonnage: float) -> float:
    """Armor mass in tons, with a floor of 1 ton."""
    percent_per_point = 5 / armor_type.protection_per_5_percent
    tons = hull_tonnage * rating * percent_per_point / 100
    return max(tons, MIN_ARMOR_MASS)


def calculate_armor_cost(rating: int, armor_type: ArmorType, hull_cost: int) -> int:
    """Armor cost in credits."""
    cost_per_point = (armor_type.cost_percent_of_hull * hull_cost) / (
        100 * armor_type.protection_per_5_percent
    )
    return int(round(cost_per_point * rating))
