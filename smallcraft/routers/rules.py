"""Rules router: read-only lookups over the small craft construction tables."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from smallcraft.data.armor import (
    get_armor_type,
    get_available_armor_types,
    list_armor_types,
    max_armor_rating,
)
from smallcraft.data.drives import (
    DriveCategory,
    DriveType,
    category_for_drive_type,
    drive_types_for_category,
    format_performance_rating,
    get_available_drive_models_for_type,
    get_drive_performance,
    get_drive_spec,
    get_drive_type_name,
)
from smallcraft.data.fittings import ELECTRONICS, ElectronicsSpec, get_available_electronics
from smallcraft.data.hulls import MAX_HULL_TONNAGE, MIN_HULL_TONNAGE, TECH_LEVELS, resolve_hull
from smallcraft.data.weapons import (
    ShipWeaponSpec,
    can_add_ship_weapon,
    get_available_ship_weapons,
    get_weapon_limits,
    list_ship_weapons,
)
from smallcraft.schemas.design import Armor, Design, Hull
from smallcraft.schemas.rules import (
    ArmorTypeResponse,
    DriveModelResponse,
    ElectronicsResponse,
    HullResolutionResponse,
    ShipWeaponResponse,
    TechLevelResponse,
    WeaponLimitsResponse,
)
from smallcraft.services.parts import build_armor

router = APIRouter(prefix="/rules", tags=["rules"])


def _electronics_response(spec: ElectronicsSpec) -> ElectronicsResponse:
    return ElectronicsResponse(
        key=spec.key,
        name=spec.name,
        min_tech_level=spec.min_tech_level,
        die_modifier=spec.die_modifier,
        mass=spec.mass,
        cost=spec.cost,
        includes=list(spec.includes),
        has_jammers=spec.has_jammers,
    )


def _weapon_response(spec: ShipWeaponSpec, can_add: bool | None = None) -> ShipWeaponResponse:
    return ShipWeaponResponse(
        weapon_type=spec.weapon_type.value,
        name=spec.name,
        family=spec.family.value,
        mass=spec.mass,
        cost=spec.cost,
        slots_used=spec.slots_used,
        energy_weapons=spec.energy_weapons,
        min_tonnage=spec.min_tonnage,
        can_add=can_add,
    )


# ---------------------------------------------------------------------------
# Hull
# ---------------------------------------------------------------------------

@router.get("/tech-levels", response_model=list[TechLevelResponse])
async def get_tech_levels():
    return [TechLevelResponse(code=code, value=value) for code, value in TECH_LEVELS.items()]


@router.get("/hull", response_model=HullResolutionResponse)
async def get_hull(tonnage: int = Query(..., ge=MIN_HULL_TONNAGE, le=MAX_HULL_TONNAGE)):
    """Tonnage code and base cost for a hull size."""
    resolution = resolve_hull(tonnage)
    return HullResolutionResponse(
        tonnage=tonnage, tonnage_code=resolution.tonnage_code, cost=resolution.cost
    )


# ---------------------------------------------------------------------------
# Armor
# ---------------------------------------------------------------------------

@router.get("/armor", response_model=list[ArmorTypeResponse])
async def get_armor_types(tech_level: Optional[str] = None):
    """All armor types, or only those unlocked at a tech level."""
    if tech_level is None:
        armor_types = list_armor_types()
    else:
        armor_types = get_available_armor_types(tech_level)
    return [
        ArmorTypeResponse(
            key=a.key,
            name=a.name,
            min_tech_level=a.min_tech_level,
            protection_per_5_percent=a.protection_per_5_percent,
            cost_percent_of_hull=a.cost_percent_of_hull,
            max_rating=(
                max_armor_rating(a, tech_level)
                if tech_level is not None
                else a.max_rating(max(TECH_LEVELS.values()))
            ),
        )
        for a in armor_types
    ]


@router.get("/armor/{armor_type}", response_model=Armor)
async def calculate_armor(
    armor_type: str,
    rating: int = Query(..., ge=1),
    tonnage: int = Query(..., ge=MIN_HULL_TONNAGE, le=MAX_HULL_TONNAGE),
    tech_level: str = Query(...),
):
    """Mass and cost of armor; the rating is clamped to the TL maximum."""
    try:
        get_armor_type(armor_type)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    hull = Hull(tech_level=tech_level, tonnage=tonnage, cost=resolve_hull(tonnage).cost)
    armor = build_armor(armor_type, rating, hull)
    if armor is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Armor type '{armor_type}' is not available at tech level '{tech_level}'",
        )
    return armor


# ---------------------------------------------------------------------------
# Drives
# ---------------------------------------------------------------------------

@router.get("/drives", response_model=list[DriveModelResponse])
async def get_drive_models(
    tonnage: int = Query(..., ge=MIN_HULL_TONNAGE, le=MAX_HULL_TONNAGE),
    category: Optional[DriveCategory] = None,
    drive_type: Optional[DriveType] = None,
):
    """Installable drive models for a hull, optionally narrowed by category or type."""
    if drive_type is not None:
        drive_types = [drive_type]
    elif category is not None:
        drive_types = drive_types_for_category(category)
    else:
        drive_types = list(DriveType)

    result = []
    for dt in drive_types:
        drive_category = category_for_drive_type(dt)
        for model in get_available_drive_models_for_type(tonnage, dt):
            spec = get_drive_spec(dt, model)
            performance = get_drive_performance(model, tonnage)
            result.append(
                DriveModelResponse(
                    model=model,
                    drive_type=dt,
                    name=get_drive_type_name(dt),
                    category=drive_category,
                    performance=performance,
                    rating=format_performance_rating(performance, drive_category),
                    tonnage=spec.tonnage,
                    cost=spec.cost,
                )
            )
    return result


# ---------------------------------------------------------------------------
# Electronics
# ---------------------------------------------------------------------------

@router.get("/electronics", response_model=list[ElectronicsResponse])
async def get_electronics_suites(tech_level: Optional[str] = None):
    if tech_level is None:
        suites = list(ELECTRONICS.values())
    else:
        suites = get_available_electronics(tech_level)
    return [_electronics_response(s) for s in suites]


# ---------------------------------------------------------------------------
# Weapons
# ---------------------------------------------------------------------------

@router.get("/weapons", response_model=list[ShipWeaponResponse])
async def get_ship_weapons(
    tonnage: Optional[int] = Query(None, ge=MIN_HULL_TONNAGE, le=MAX_HULL_TONNAGE),
):
    """Ship weapon catalogue; with a tonnage, only weapons that hull can mount."""
    if tonnage is None:
        specs = list_ship_weapons()
    else:
        specs = list(get_available_ship_weapons(tonnage).values())
    return [_weapon_response(s) for s in specs]


@router.get("/weapons/limits", response_model=WeaponLimitsResponse)
async def get_limits(tonnage: int = Query(..., ge=MIN_HULL_TONNAGE, le=MAX_HULL_TONNAGE)):
    limits = get_weapon_limits(tonnage)
    return WeaponLimitsResponse(
        ship_weapons=limits.ship_weapons,
        anti_personnel_weapons=limits.anti_personnel_weapons,
    )


@router.post("/weapons/available", response_model=list[ShipWeaponResponse])
async def get_addable_weapons(design: Design):
    """Weapons the design's hull can mount, flagged with whether one more fits."""
    tonnage = design.hull.tonnage
    return [
        _weapon_response(
            spec,
            can_add=can_add_ship_weapon(spec.weapon_type, design.weapons, design.drives, tonnage),
        )
        for spec in get_available_ship_weapons(tonnage).values()
    ]
