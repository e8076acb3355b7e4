"""Wizard service: step order, step validity and immutable design edits.

The browser wizard walks a design through these steps:

  select -> hull -> armor -> drives -> fittings -> weapons -> cargo -> staff -> summary

A step can be left when it is valid and the design is not overweight.
Every with_*() helper returns a new Design; the input is never mutated.
"""

import enum

from smallcraft.data.hulls import TECH_LEVELS, resolve_hull
from smallcraft.schemas.design import Armor, Cargo, Design, Drive, Fitting, Fuel, Hull, Staff, Weapon
from smallcraft.services.design_service import derive_staff, is_overweight, with_derived_staff
from smallcraft.services.parts import build_drive, reprice_armor, reprice_fitting

NEW_DESIGN_NAME = "Unnamed Small Craft"


class WizardStep(str, enum.Enum):
    select = "select"
    hull = "hull"
    armor = "armor"
    drives = "drives"
    fittings = "fittings"
    weapons = "weapons"
    cargo = "cargo"
    staff = "staff"
    summary = "summary"


STEP_ORDER: list[WizardStep] = list(WizardStep)


def new_design() -> Design:
    """A fresh design: named, zeroed hull, nothing installed, one pilot."""
    return Design(name=NEW_DESIGN_NAME, hull=Hull(name=NEW_DESIGN_NAME), staff=Staff(pilot=1))


# ---------------------------------------------------------------------------
# Step navigation
# ---------------------------------------------------------------------------

def is_step_valid(design: Design, step: WizardStep | str) -> bool:
    step = WizardStep(step)
    if step == WizardStep.hull:
        return (
            bool(design.name.strip())
            and design.hull.tech_level in TECH_LEVELS
            and design.hull.tonnage > 0
        )
    if step == WizardStep.drives:
        return len(design.drives) > 0
    if step == WizardStep.fittings:
        return len(design.fittings) > 0
    if step == WizardStep.staff:
        return design.staff.pilot > 0
    return True


def can_advance(design: Design, step: WizardStep | str) -> bool:
    return is_step_valid(design, step) and not is_overweight(design)


def next_step(step: WizardStep | str) -> WizardStep | None:
    index = STEP_ORDER.index(WizardStep(step))
    if index + 1 >= len(STEP_ORDER):
        return None
    return STEP_ORDER[index + 1]


def previous_step(step: WizardStep | str) -> WizardStep | None:
    index = STEP_ORDER.index(WizardStep(step))
    if index == 0:
        return None
    return STEP_ORDER[index - 1]


# ---------------------------------------------------------------------------
# Hull edits
# ---------------------------------------------------------------------------

def _reprice_for_hull(design: Design, hull: Hull) -> Design:
    """Apply a new hull and recompute everything priced from hull size or TL."""
    armor = reprice_armor(design.armor, hull) if design.armor is not None else None

    drives: list[Drive] = []
    for drive in design.drives:
        if drive.drive_type is None:
            drives.append(drive)
            continue
        rebuilt = build_drive(
            drive.drive_type, drive.model, hull.tonnage, drive.quantity, drive_id=drive.id
        )
        # Keep a drive that no longer fits; validation reports it.
        drives.append(rebuilt if rebuilt is not None else drive.model_copy(update={"rating": 0}))

    fittings = [reprice_fitting(f, hull.tonnage) for f in design.fittings]
    return design.model_copy(
        update={"hull": hull, "armor": armor, "drives": drives, "fittings": fittings}
    )


def with_hull_tonnage(design: Design, tonnage: int) -> Design:
    resolution = resolve_hull(tonnage)
    hull = design.hull.model_copy(
        update={
            "tonnage": tonnage,
            "tonnage_code": resolution.tonnage_code,
            "cost": resolution.cost,
        }
    )
    return _reprice_for_hull(design, hull)


def with_tech_level(design: Design, tech_level: str) -> Design:
    """Change TL; armor is re-clamped or dropped if the type is now locked."""
    if tech_level not in TECH_LEVELS:
        raise ValueError(f"Unknown tech level '{tech_level}'")
    hull = design.hull.model_copy(update={"tech_level": tech_level})
    return _reprice_for_hull(design, hull)


def with_name(design: Design, name: str, description: str | None = None) -> Design:
    hull = design.hull.model_copy(update={"name": name})
    update = {"name": name, "hull": hull}
    if description is not None:
        update["description"] = description
    return design.model_copy(update=update)


# ---------------------------------------------------------------------------
# Part edits
# ---------------------------------------------------------------------------

def with_armor(design: Design, armor: Armor | None) -> Design:
    return design.model_copy(update={"armor": armor})


def with_drives(design: Design, drives: list[Drive]) -> Design:
    # Drive counts gate the engineer position.
    return with_derived_staff(design.model_copy(update={"drives": list(drives)}))


def with_fuel(design: Design, fuel: Fuel) -> Design:
    return design.model_copy(update={"fuel": fuel})


def with_fittings(design: Design, fittings: list[Fitting]) -> Design:
    # Electronics gate the ECM position.
    return with_derived_staff(design.model_copy(update={"fittings": list(fittings)}))


def with_weapons(design: Design, weapons: list[Weapon]) -> Design:
    return with_derived_staff(design.model_copy(update={"weapons": list(weapons)}))


def with_cargo(design: Design, cargo: Cargo) -> Design:
    return design.model_copy(update={"cargo": cargo})


def with_staff(design: Design, staff: Staff) -> Design:
    """Apply staff choices; gunners stay derived and pilot stays at least 1."""
    staff = staff.model_copy(update={"pilot": max(1, staff.pilot)})
    updated = design.model_copy(update={"staff": staff})
    return updated.model_copy(update={"staff": derive_staff(updated)})
