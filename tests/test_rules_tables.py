"""Tests for the static rules tables and the pure calculators over them.

Covers:
- Hull: tech levels, tonnage brackets, tonnage codes and hull cost
- Armor: availability by tech level, max rating caps, mass floor, cost
- Drives: performance matrix, availability, reaction-drive fuel filter, fuel, energy capacity
- Fittings: cockpit/control cabin, cabins, airlocks, electronics suites
- Weapons: limits, tonnage gates, slots, energy weapons, gunner derivation
"""

import itertools

import pytest

from smallcraft.data.armor import (
    calculate_armor_cost,
    calculate_armor_mass,
    clamp_armor_rating,
    get_armor_type,
    get_available_armor_types,
    list_armor_types,
    max_armor_rating,
)
from smallcraft.data.drives import (
    DRIVE_MODELS,
    DriveCategory,
    DriveType,
    calculate_maneuver_drive_fuel,
    calculate_power_plant_fuel,
    calculate_total_energy_weapon_capacity,
    calculate_total_fuel_requirement,
    drive_types_for_category,
    format_performance_rating,
    get_available_drive_models,
    get_available_drive_models_for_type,
    get_drive_performance,
    get_drive_spec,
    get_energy_weapon_capacity,
    is_reaction_drive_valid,
    power_plant_hours,
)
from smallcraft.data.fittings import (
    FittingType,
    calculate_cabin_cost,
    calculate_cabin_mass,
    calculate_cockpit_cost,
    calculate_cockpit_mass,
    calculate_passengers,
    clamp_airlock_quantity,
    get_available_electronics,
    get_electronics,
)
from smallcraft.data.hulls import (
    get_hull_code,
    get_hull_cost,
    is_tech_level_at_least,
    resolve_hull,
    tech_level_value,
    tonnage_bracket,
)
from smallcraft.data.weapons import (
    WeaponType,
    calculate_energy_weapon_count,
    calculate_required_gunners,
    calculate_slots_used,
    can_add_ship_weapon,
    get_available_ship_weapons,
    get_ship_weapon,
    get_weapon_limits,
)
from smallcraft.services.parts import (
    build_airlock,
    build_anti_personnel_weapon,
    build_armor,
    build_cabin,
    build_cockpit,
    build_drive,
    build_electronics,
    build_ship_weapon,
    change_armor_type,
)
from smallcraft.schemas.design import Hull


def weapons_of(*weapon_types: str, quantity: int = 1):
    return [build_ship_weapon(t, quantity=quantity) for t in weapon_types]


# ---------------------------------------------------------------------------
# Hull
# ---------------------------------------------------------------------------

class TestHullTables:
    def test_tech_level_values(self):
        assert tech_level_value("A") == 10
        assert tech_level_value("D") == 13
        assert tech_level_value("H") == 17
        assert tech_level_value("") is None
        assert tech_level_value("Z") is None

    def test_tech_level_comparison(self):
        assert is_tech_level_at_least("E", "D") is True
        assert is_tech_level_at_least("D", "D") is True
        assert is_tech_level_at_least("C", "D") is False
        assert is_tech_level_at_least("", "A") is False

    def test_tonnage_bracket_rounds_up(self):
        assert tonnage_bracket(10) == 10
        assert tonnage_bracket(11) == 20
        assert tonnage_bracket(95) == 100

    def test_tonnage_bracket_out_of_range(self):
        assert tonnage_bracket(0) is None
        assert tonnage_bracket(101) is None

    def test_hull_code(self):
        assert get_hull_code(10) == "s1"
        assert get_hull_code(35) == "s4"
        assert get_hull_code(100) == "s10"

    def test_hull_code_clamps(self):
        assert get_hull_code(5) == "s1"
        assert get_hull_code(150) == "s10"

    def test_hull_cost_100_tons_is_exactly_two_mcr(self):
        assert get_hull_cost(100) == 2_000_000

    def test_hull_cost_steps(self):
        assert get_hull_cost(10) == 1_000_000
        assert get_hull_cost(20) == 1_200_000
        assert get_hull_cost(50) == 1_500_000

    def test_resolve_hull(self):
        resolution = resolve_hull(40)
        assert resolution.tonnage_code == "s4"
        assert resolution.cost == 1_400_000


# ---------------------------------------------------------------------------
# Armor
# ---------------------------------------------------------------------------

class TestArmor:
    def test_available_types_at_tl_d(self):
        keys = [a.key for a in get_available_armor_types("D")]
        assert "titanium_steel" in keys
        assert "crystaliron" in keys
        assert "bonded_superdense" not in keys

    def test_bonded_superdense_unlocks_at_tl_14(self):
        keys = [a.key for a in get_available_armor_types("E")]
        assert "bonded_superdense" in keys

    def test_unknown_tech_level_unlocks_nothing(self):
        assert get_available_armor_types("") == []

    def test_titanium_steel_mass_at_40_tons(self):
        titanium = get_armor_type("titanium_steel")
        assert calculate_armor_mass(2, titanium, 40) == pytest.approx(2.0)

    def test_mass_floor_for_every_type_and_rating(self):
        for armor_type in list_armor_types():
            for rating in range(1, max_armor_rating(armor_type, "H") + 1):
                for tonnage in (1, 5, 10, 20, 100):
                    assert calculate_armor_mass(rating, armor_type, tonnage) >= 1.0

    def test_max_rating_caps(self):
        assert max_armor_rating(get_armor_type("titanium_steel"), "H") == 9
        assert max_armor_rating(get_armor_type("crystaliron"), "H") == 13
        assert max_armor_rating(get_armor_type("crystaliron"), "C") == 12
        assert max_armor_rating(get_armor_type("bonded_superdense"), "G") == 16

    def test_clamp_rating(self):
        crystaliron = get_armor_type("crystaliron")
        assert clamp_armor_rating(20, crystaliron, "A") == 10
        assert clamp_armor_rating(0, crystaliron, "A") == 1

    def test_armor_cost(self):
        # 20% of a 1.4 MCr hull per 4 points of protection -> 70,000 per point
        crystaliron = get_armor_type("crystaliron")
        assert calculate_armor_cost(3, crystaliron, 1_400_000) == 210_000

    def test_get_armor_type_unknown_raises(self):
        with pytest.raises(KeyError):
            get_armor_type("adamantium")

    def test_build_armor_locked_type_returns_none(self):
        hull = Hull(tech_level="D", tonnage=40, cost=1_400_000)
        assert build_armor("bonded_superdense", 2, hull) is None

    def test_build_armor_clamps_and_prices(self):
        hull = Hull(tech_level="D", tonnage=40, cost=1_400_000)
        armor = build_armor("titanium_steel", 15, hull)
        assert armor.rating == 9
        assert armor.mass == pytest.approx(9.0)
        assert armor.cost == 315_000

    def test_change_armor_type_clamps_down(self):
        hull = Hull(tech_level="H", tonnage=40, cost=1_400_000)
        armor = build_armor("crystaliron", 13, hull)
        changed = change_armor_type(armor, "titanium_steel", hull)
        assert changed.type == "titanium_steel"
        assert changed.rating == 9


# ---------------------------------------------------------------------------
# Drives
# ---------------------------------------------------------------------------

class TestDrives:
    def test_24_models(self):
        assert len(DRIVE_MODELS) == 24

    def test_performance_lookup(self):
        assert get_drive_performance("sQ", 30) == 10
        assert get_drive_performance("sA", 10) == 2
        assert get_drive_performance("sA", 30) is None
        assert get_drive_performance("sZ", 10) is None

    def test_performance_out_of_range_tonnage(self):
        assert get_drive_performance("sE", 0) is None
        assert get_drive_performance("sE", 120) is None

    def test_null_performance_never_available(self):
        for tonnage in range(10, 101):
            available = get_available_drive_models(tonnage)
            for model in DRIVE_MODELS:
                if get_drive_performance(model, tonnage) is None:
                    assert model not in available

    def test_available_models_at_extremes(self):
        assert get_available_drive_models(10) == ["sA", "sB", "sC", "sD", "sE", "sF"]
        assert len(get_available_drive_models(100)) == 20

    def test_reaction_sq_on_30_tons_is_valid(self):
        assert calculate_maneuver_drive_fuel(DriveType.reaction_m, 10, 30, 1) == pytest.approx(7.5)
        assert is_reaction_drive_valid("sQ", 30) is True
        assert "sQ" in get_available_drive_models_for_type(30, DriveType.reaction_m)

    def test_reaction_exclusion_rule(self):
        for tonnage in (10, 20, 30, 50, 100):
            reaction = get_available_drive_models_for_type(tonnage, "reaction_m")
            for model in get_available_drive_models(tonnage):
                performance = get_drive_performance(model, tonnage)
                if tonnage * 0.025 * performance >= 0.9 * tonnage:
                    assert model not in reaction
                else:
                    assert model in reaction

    def test_drive_types_for_category(self):
        assert drive_types_for_category(DriveCategory.maneuver) == [
            DriveType.gravitic_m,
            DriveType.reaction_m,
        ]
        assert drive_types_for_category("powerPlant") == [DriveType.fusion_p, DriveType.chemical_p]

    def test_drive_spec(self):
        spec = get_drive_spec("fusion_p", "sM")
        assert spec.tonnage == pytest.approx(5.1)
        assert spec.cost == 9_000_000

    def test_drive_spec_unknown_raises(self):
        with pytest.raises(KeyError):
            get_drive_spec("fusion_p", "sI")
        with pytest.raises(KeyError):
            get_drive_spec("warp", "sA")

    def test_format_performance_rating(self):
        assert format_performance_rating(3, DriveCategory.maneuver) == "M-3"
        assert format_performance_rating(2, DriveCategory.power_plant) == "P-2"
        assert format_performance_rating(None, DriveCategory.maneuver) == "N/A"

    def test_power_plant_fuel(self):
        assert calculate_power_plant_fuel("fusion_p", "sE", 2) == pytest.approx(1.5)
        assert calculate_power_plant_fuel("fusion_p", "sE", 4) == pytest.approx(3.0)
        assert calculate_power_plant_fuel("chemical_p", "sA", 2) == pytest.approx(5.0)
        assert calculate_power_plant_fuel("gravitic_m", "sA", 2) == 0.0

    def test_gravitic_drive_burns_no_fuel(self):
        assert calculate_maneuver_drive_fuel("gravitic_m", 6, 30, 10) == 0.0

    def test_power_plant_hours(self):
        assert power_plant_hours(2) == 336

    def test_total_fuel_requirement_multiplies_quantity(self):
        drives = [
            build_drive("fusion_p", "sE", 30, quantity=2),
            build_drive("reaction_m", "sB", 30),
        ]
        requirement = calculate_total_fuel_requirement(drives, 30, weeks=2, hours=2)
        assert requirement.power_plant == pytest.approx(3.0)
        # sB on 30 tons is performance 1: 30 * 0.025 * 1 * 2 hours
        assert requirement.maneuver == pytest.approx(1.5)
        assert requirement.total == pytest.approx(4.5)

    def test_energy_weapon_capacity_steps(self):
        assert get_energy_weapon_capacity("sF") == 0
        assert get_energy_weapon_capacity("sG") == 1
        assert get_energy_weapon_capacity("sL") == 1
        assert get_energy_weapon_capacity("sM") == 2
        assert get_energy_weapon_capacity("sT") == 2
        assert get_energy_weapon_capacity("sU") == 3
        assert get_energy_weapon_capacity(None) == 0

    def test_only_power_plants_supply_energy(self):
        drives = [build_drive("gravitic_m", "sZ", 40), build_drive("fusion_p", "sG", 40)]
        assert calculate_total_energy_weapon_capacity(drives) == 1

    def test_build_drive_not_installable_returns_none(self):
        assert build_drive("gravitic_m", "sZ", 10) is None

    def test_build_drive(self):
        drive = build_drive("gravitic_m", "sK", 50)
        assert drive.type == DriveCategory.maneuver
        assert drive.rating == 4
        assert drive.mass == 5
        assert drive.cost == 11_000_000


# ---------------------------------------------------------------------------
# Fittings
# ---------------------------------------------------------------------------

class TestFittings:
    def test_cockpit_mass(self):
        assert calculate_cockpit_mass(FittingType.cockpit, 2) == pytest.approx(3.0)
        assert calculate_cockpit_mass(FittingType.control_cabin, 3) == pytest.approx(9.0)

    def test_cockpit_cost_by_hull_size(self):
        assert calculate_cockpit_cost(20) == 100_000
        assert calculate_cockpit_cost(21) == 200_000
        assert calculate_cockpit_cost(50) == 300_000

    def test_control_cabin_passengers(self):
        assert calculate_passengers(FittingType.control_cabin, 3) == 1
        assert calculate_passengers(FittingType.control_cabin, 4) == 2

    def test_build_cockpit(self):
        cockpit = build_cockpit("cockpit", 2, 50)
        assert cockpit.mass == pytest.approx(3.0)
        assert cockpit.cost == 300_000
        assert cockpit.passengers is None

        cabin = build_cockpit("control_cabin", 4, 50)
        assert cabin.passengers == 2

    def test_build_cockpit_rejects_other_types(self):
        with pytest.raises(ValueError):
            build_cockpit("galley", 1, 50)

    def test_cabin(self):
        assert calculate_cabin_mass(4) == pytest.approx(6.0)
        assert calculate_cabin_cost(4) == 300_000
        assert build_cabin(4).passengers == 4

    def test_airlock_quantity_clamped(self):
        assert clamp_airlock_quantity(9) == 6
        assert clamp_airlock_quantity(0) == 1
        airlock = build_airlock(8)
        assert airlock.quantity == 6
        assert airlock.mass == 1.0
        assert airlock.cost == 200_000

    def test_electronics_by_tech_level(self):
        keys = [e.key for e in get_available_electronics("A")]
        assert keys == ["standard", "basic_civilian", "basic_military"]
        assert len(get_available_electronics("C")) == 5
        assert get_available_electronics("") == []

    def test_electronics_jammers(self):
        assert get_electronics("basic_civilian").has_jammers is False
        assert get_electronics("basic_military").has_jammers is True

    def test_build_electronics(self):
        fitting = build_electronics("advanced", "B")
        assert fitting.type == FittingType.electronics
        assert fitting.die_modifier == 1
        assert fitting.cost == 2_000_000
        assert build_electronics("very_advanced", "A") is None

    def test_get_electronics_unknown_raises(self):
        with pytest.raises(KeyError):
            get_electronics("quantum")


# ---------------------------------------------------------------------------
# Weapons
# ---------------------------------------------------------------------------

class TestWeapons:
    def test_limits_non_decreasing(self):
        previous = 0
        for tonnage in range(10, 101):
            limit = get_weapon_limits(tonnage).ship_weapons
            assert limit >= previous
            previous = limit

    def test_limits_use_rounded_bracket(self):
        assert get_weapon_limits(35).ship_weapons == 2
        assert get_weapon_limits(100).ship_weapons == 5
        assert get_weapon_limits(100).anti_personnel_weapons == 10

    def test_barbette_needs_40_tons(self):
        assert WeaponType.particle_beam_barbette not in get_available_ship_weapons(30)
        assert WeaponType.particle_beam_barbette in get_available_ship_weapons(40)

    def test_unknown_weapon_raises(self):
        with pytest.raises(KeyError):
            get_ship_weapon("plasma_gun")

    def test_slots_and_energy(self):
        weapons = weapons_of("pulse_laser_triple", "particle_beam_barbette", "torpedo")
        assert calculate_slots_used(weapons) == 4
        assert calculate_energy_weapon_count(weapons) == 5

    def test_gunners_mixed_loadout(self):
        weapons = weapons_of(
            "pulse_laser_single", "pulse_laser_double", "beam_laser_single", "torpedo", "torpedo"
        )
        assert calculate_required_gunners(weapons) == 3

    def test_gunners_order_independent(self):
        weapons = weapons_of(
            "pulse_laser_single", "missile_rack_double", "torpedo", "particle_beam_barbette"
        )
        for permutation in itertools.permutations(weapons):
            assert calculate_required_gunners(list(permutation)) == 4

    def test_two_turrets_same_family_need_one_gunner(self):
        one = weapons_of("pulse_laser_single")
        two = weapons_of("pulse_laser_single", "pulse_laser_triple")
        assert calculate_required_gunners(one) == calculate_required_gunners(two) == 1

    def test_barbette_gunner_per_unit(self):
        assert calculate_required_gunners(weapons_of("particle_beam_barbette", quantity=2)) == 2

    def test_anti_personnel_needs_no_gunner(self):
        weapons = [build_anti_personnel_weapon("Autocannon", 0.5, 100_000)]
        assert calculate_required_gunners(weapons) == 0

    def test_energy_capacity_allows_exact_fit(self):
        drives = [build_drive("fusion_p", "sG", 40), build_drive("fusion_p", "sL", 40)]
        assert can_add_ship_weapon("pulse_laser_double", [], drives, 40) is True

        installed = weapons_of("pulse_laser_double")
        assert can_add_ship_weapon("pulse_laser_single", installed, drives, 40) is False

    def test_slot_limit_blocks_addition(self):
        drives = [build_drive("fusion_p", "sQ", 30)]
        installed = weapons_of("torpedo")
        assert can_add_ship_weapon("missile_rack_single", installed, drives, 30) is False

    def test_tonnage_gate_blocks_addition(self):
        drives = [build_drive("fusion_p", "sZ", 30)]
        assert can_add_ship_weapon("particle_beam_barbette", [], drives, 30) is False
