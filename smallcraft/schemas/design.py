"""Pydantic schemas for the small craft Design aggregate.

These models are the JSON interchange shape: field names serialize in
camelCase (techLevel, driveType, shipsLocker...) so exported files stay
compatible with designs produced by the browser wizard.  Either spelling is
accepted on input.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from smallcraft.data.drives import DriveCategory, DriveType
from smallcraft.data.fittings import FittingType
from smallcraft.data.weapons import WeaponCategory


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Hull(CamelModel):
    name: str = ""
    tech_level: str = ""          # "" until chosen, then A..H
    tonnage_code: str = ""        # "" until chosen, then s1..s10
    tonnage: int = Field(default=0, ge=0)
    cost: int = Field(default=0, ge=0)   # credits
    description: Optional[str] = None


class Armor(CamelModel):
    type: str
    rating: int = Field(ge=1)
    mass: float = Field(ge=0)
    cost: int = Field(ge=0)


class Drive(CamelModel):
    id: str
    type: DriveCategory
    drive_type: Optional[DriveType] = None
    model: str
    rating: int = Field(default=0, ge=0)   # performance at the hull's tonnage
    mass: float = Field(ge=0)
    cost: int = Field(ge=0)
    quantity: int = Field(default=1, ge=1)


class Fuel(CamelModel):
    amount: float = Field(default=0, ge=0)
    duration: float = Field(default=0, ge=0)   # hours
    mass: float = Field(default=0, ge=0)


class Fitting(CamelModel):
    id: str
    # Known types become FittingType; anything else keeps its original string
    type: FittingType | str = Field(union_mode="left_to_right")
    name: str
    mass: float = Field(ge=0)
    cost: int = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    crew: Optional[int] = Field(default=None, ge=0)
    passengers: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    electronics_type: Optional[str] = None
    die_modifier: Optional[int] = None
    includes: Optional[str] = None


class Weapon(CamelModel):
    id: str
    type: str
    name: str
    category: Optional[WeaponCategory] = None
    mass: float = Field(ge=0)
    cost: int = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    slots_used: int = Field(default=1, ge=0)
    energy_weapons: int = Field(default=0, ge=0)
    mount_type: Optional[str] = None


class Cargo(CamelModel):
    cargo_bay: float = Field(default=0, ge=0)
    ships_locker: float = Field(default=0, ge=0)
    missile_reloads: float = Field(default=0, ge=0)
    modular_cutter_bay: bool = False
    description: Optional[str] = None


class Staff(CamelModel):
    # 0 is accepted and reported by validation as a missing pilot
    pilot: int = Field(default=1, ge=0)
    gunner: int = Field(default=0, ge=0)   # derived from weapons; stored value is informational
    engineer: bool = False
    comms: bool = False
    sensors: bool = False
    ecm: bool = False
    other: int = Field(default=0, ge=0)


class Design(CamelModel):
    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    hull: Hull = Field(default_factory=Hull)
    armor: Optional[Armor] = None
    drives: list[Drive] = Field(default_factory=list)
    fuel: Fuel = Field(default_factory=Fuel)
    fittings: list[Fitting] = Field(default_factory=list)
    weapons: list[Weapon] = Field(default_factory=list)
    cargo: Cargo = Field(default_factory=Cargo)
    staff: Staff = Field(default_factory=Staff)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_json_dict(self) -> dict:
        """JSON-ready dict in the interchange (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True)


class NameCheckResponse(CamelModel):
    name: str
    exists: bool


class ImportResponse(CamelModel):
    imported: int
    failed: int
    errors: list[str] = Field(default_factory=list)


class CsvImportRequest(CamelModel):
    content: str
    filename: str = "imported.csv"
