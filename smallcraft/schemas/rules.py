from typing import Optional

from pydantic import Field

from smallcraft.data.drives import DriveCategory, DriveType
from smallcraft.schemas.design import CamelModel, Design, Staff


class TechLevelResponse(CamelModel):
    code: str
    value: int


class HullResolutionResponse(CamelModel):
    tonnage: int
    tonnage_code: str
    cost: int


class ArmorTypeResponse(CamelModel):
    key: str
    name: str
    min_tech_level: int
    protection_per_5_percent: int
    cost_percent_of_hull: int
    max_rating: int


class DriveModelResponse(CamelModel):
    model: str
    drive_type: DriveType
    name: str                     # "Fusion P-Plant"
    category: DriveCategory
    performance: int
    rating: str                   # "M-3" / "P-2"
    tonnage: float
    cost: int


class ElectronicsResponse(CamelModel):
    key: str
    name: str
    min_tech_level: int
    die_modifier: int
    mass: float
    cost: int
    includes: list[str]
    has_jammers: bool


class ShipWeaponResponse(CamelModel):
    weapon_type: str
    name: str
    family: str
    mass: float
    cost: int
    slots_used: int
    energy_weapons: int
    min_tonnage: Optional[int] = None
    can_add: Optional[bool] = None


class WeaponLimitsResponse(CamelModel):
    ship_weapons: int
    anti_personnel_weapons: int


# ---------------------------------------------------------------------------
# Design evaluation
# ---------------------------------------------------------------------------

class EvaluationRequest(CamelModel):
    design: Design
    weeks: float = Field(default=2, ge=0)
    hours: float = Field(default=1, ge=0)


class CostBreakdownResponse(CamelModel):
    hull: int
    armor: int
    drives: int
    fittings: int
    weapons: int
    cargo: int
    total: int


class FuelRequirementResponse(CamelModel):
    total: float
    power_plant: float
    maneuver: float


class DesignIssueResponse(CamelModel):
    code: str
    message: str


class DesignEvaluationResponse(CamelModel):
    total_mass: float
    remaining_mass: float
    is_overweight: bool
    costs: CostBreakdownResponse
    fuel_requirement: FuelRequirementResponse
    weapon_limits: WeaponLimitsResponse
    slots_used: int
    energy_capacity: int
    energy_weapons: int
    anti_personnel_weapons: int
    staff: Staff
    total_crew: int
    engineer_available: bool
    ecm_available: bool
    can_add_modular_cutter_bay: bool
    issues: list[DesignIssueResponse] = []
