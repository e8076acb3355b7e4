"""Import/export of designs as JSON (lossless) and CSV (summary report, lossy).

JSON files hold an array of designs in the camelCase interchange shape and
round-trip exactly.

The CSV export is the printable summary:

    Name,<name>
    Description,<description>          (only when set)
    Hull,<tonnage> tons,<total cost> MCr
    Tech Level,<A..H>

    Category,Item,Tons,Cost (MCr)
    Hull,...                            hull, then armor under it
    Drives,... / Fuel,... / Fittings,... / Weapons,... / Cargo,... / Staff,...

    TOTALS,Total Mass,<mass>,
    ,Hull Capacity,<tonnage>,
    ,Total Cost,,<MCr>

CSV import reads that layout back on a best-effort basis: costs come back
rounded to 0.1 MCr, unrecognised fittings are kept as generic "other"
entries and unrecognised weapons come back as anti-personnel mounts.
"""

import csv
import io
import json
import logging
import re
from dataclasses import dataclass, field

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from smallcraft.data.drives import DriveCategory, format_performance_rating, is_drive_model
from smallcraft.data.fittings import ELECTRONICS, FITTING_NAMES, FittingType, is_cockpit_type
from smallcraft.data.hulls import (
    TECH_LEVELS,
    credits_to_mcr,
    get_hull_code,
    get_hull_cost,
    mcr_to_credits,
)
from smallcraft.data.weapons import WeaponCategory, list_ship_weapons
from smallcraft.schemas.design import Armor, Cargo, Design, Drive, Fitting, Fuel, Hull, Staff, Weapon
from smallcraft.services.design_service import (
    MODULAR_CUTTER_BAY_TONS,
    calculate_ships_locker_cost,
    calculate_total_cost,
    calculate_total_mass,
    total_crew,
)
from smallcraft.services.design_store import save_design

logger = logging.getLogger(__name__)

DEFAULT_IMPORT_TECH_LEVEL = "A"
CSV_HEADER = ["Category", "Item", "Tons", "Cost (MCr)"]


@dataclass
class ImportResult:
    imported: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def export_designs_json(designs: list[Design]) -> str:
    return json.dumps([d.to_json_dict() for d in designs], indent=2)


def parse_designs_json(text: str) -> tuple[list[Design], list[str]]:
    """Parse a JSON array (or a single object) of designs.

    Each entry is validated on its own: returns the valid designs and one
    error message per rejected entry.  Raises ValueError only if the text is
    not valid JSON or not an array of objects.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON: {exc.msg}") from exc
    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        raise ValueError("Expected a JSON array of designs")

    designs: list[Design] = []
    errors: list[str] = []
    for position, item in enumerate(payload, start=1):
        label = item.get("name") if isinstance(item, dict) else None
        try:
            designs.append(Design.model_validate(item))
        except ValidationError as exc:
            errors.append(
                f"{label or f'Entry {position}'}: invalid design data "
                f"({exc.error_count()} error(s))"
            )
    return designs, errors


async def import_designs(
    designs: list[Design], db: AsyncSession, result: ImportResult | None = None
) -> ImportResult:
    """Save each design as a new record; failures are counted, not raised.

    Pass ``result`` to add to counts already collected (e.g. parse failures).
    """
    result = result or ImportResult()
    for design in designs:
        try:
            await save_design(design.model_copy(update={"id": None}), db)
        except ValueError as exc:
            result.failed += 1
            result.errors.append(f"{design.name}: {exc}")
            logger.warning("Failed to import design %r: %s", design.name, exc)
        else:
            result.imported += 1
    logger.info("Imported %d design(s), %d failed", result.imported, result.failed)
    return result


async def import_designs_json(text: str, db: AsyncSession) -> ImportResult:
    """Parse and save a JSON file of designs, one record at a time.

    A malformed entry is counted as failed and the rest still load.  Raises
    ValueError if the text as a whole is unusable.
    """
    designs, errors = parse_designs_json(text)
    for message in errors:
        logger.warning("Skipping design: %s", message)
    return await import_designs(
        designs, db, ImportResult(failed=len(errors), errors=list(errors))
    )


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------

def _mcr(credits: float) -> str:
    return f"{credits_to_mcr(credits):.1f}"


def _num(value: float) -> str:
    return f"{value:g}"


def _fitting_label(fitting: Fitting) -> str:
    if is_cockpit_type(fitting.type):
        return f"{fitting.name} ({fitting.crew or 1} crew)"
    if fitting.type == FittingType.cabin:
        passengers = fitting.passengers or 1
        return f"{fitting.name} ({passengers} passenger{'s' if passengers > 1 else ''})"
    if fitting.type == FittingType.electronics and fitting.die_modifier is not None:
        return f"{fitting.name} (DM {fitting.die_modifier:+d})"
    if fitting.quantity > 1:
        return f"{fitting.name} x{fitting.quantity}"
    return fitting.name


def _section(rows: list[list[str]], category: str, items: list[list[str]]) -> None:
    """Append items, labelling only the first row with the category."""
    for index, item in enumerate(items):
        rows.append([category if index == 0 else "", *item])


def export_design_csv(design: Design) -> str:
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    total_cost = calculate_total_cost(design)
    hull = design.hull

    writer.writerow(["Name", design.name])
    if design.description and design.description.strip():
        writer.writerow(["Description", design.description])
    writer.writerow(["Hull", f"{hull.tonnage} tons", f"{_mcr(total_cost)} MCr"])
    if hull.tech_level:
        writer.writerow(["Tech Level", hull.tech_level])
    writer.writerow([])
    writer.writerow(CSV_HEADER)

    rows: list[list[str]] = []
    hull_items = [[
        hull.description or f"{hull.tonnage_code} ({hull.tonnage} tons)",
        str(hull.tonnage),
        _mcr(hull.cost),
    ]]
    if design.armor is not None:
        armor = design.armor
        hull_items.append(
            [f"{armor.type} Rating {armor.rating}", _num(armor.mass), _mcr(armor.cost)]
        )
    _section(rows, "Hull", hull_items)

    drive_items = []
    for drive in design.drives:
        label = (
            f"{drive.type.value} - Model {drive.model} "
            f"({format_performance_rating(drive.rating, drive.type)})"
        )
        if drive.quantity > 1:
            label += f" x{drive.quantity}"
        drive_items.append([label, _num(drive.mass), _mcr(drive.cost)])
    _section(rows, "Drives", drive_items)

    fuel = design.fuel
    _section(
        rows,
        "Fuel",
        [[f"{_num(fuel.amount)} tons ({_num(fuel.duration)} hours)", _num(fuel.mass), "0.0"]],
    )

    _section(
        rows,
        "Fittings",
        [[_fitting_label(f), _num(f.mass), _mcr(f.cost)] for f in design.fittings],
    )

    if design.weapons:
        weapon_items = [
            [f"{w.name} x{w.quantity} ({w.mount_type or 'fixed'})", _num(w.mass), _mcr(w.cost)]
            for w in design.weapons
        ]
    else:
        weapon_items = [["Unarmed", "0", "0.0"]]
    _section(rows, "Weapons", weapon_items)

    cargo = design.cargo
    cargo_items = []
    if cargo.cargo_bay > 0:
        cargo_items.append([f"Cargo Bay ({_num(cargo.cargo_bay)} tons)", _num(cargo.cargo_bay), "0.0"])
    if cargo.ships_locker > 0:
        cargo_items.append([
            f"Ship's Locker ({_num(cargo.ships_locker)} tons)",
            _num(cargo.ships_locker),
            _mcr(calculate_ships_locker_cost(cargo.ships_locker)),
        ])
    if cargo.missile_reloads > 0:
        cargo_items.append([
            f"Missile Reloads ({_num(cargo.missile_reloads)} tons)",
            _num(cargo.missile_reloads),
            "0.0",
        ])
    if cargo.modular_cutter_bay:
        cargo_items.append([
            f"Modular Cutter Bay ({MODULAR_CUTTER_BAY_TONS} tons)",
            str(MODULAR_CUTTER_BAY_TONS),
            "0.0",
        ])
    _section(rows, "Cargo", cargo_items)

    staff = design.staff
    staff_items = [f"Pilots: {staff.pilot}"]
    if staff.gunner > 0:
        staff_items.append(f"Gunners: {staff.gunner}")
    if staff.engineer:
        staff_items.append("Engineer: 1")
    if staff.comms:
        staff_items.append("Communications: 1")
    if staff.sensors:
        staff_items.append("Sensors: 1")
    if staff.ecm:
        staff_items.append("ECM: 1")
    if staff.other > 0:
        staff_items.append(f"Other: {staff.other}")
    _section(rows, "Staff", [[item, "0", "0.0"] for item in staff_items])
    rows.append(["", f"Total Crew: {total_crew(staff)}", "0", "0.0"])

    rows.append(["", "", "", ""])
    rows.append(["TOTALS", "Total Mass", f"{calculate_total_mass(design):.2f}", ""])
    rows.append(["", "Hull Capacity", str(hull.tonnage), ""])
    rows.append(["", "Total Cost", "", _mcr(total_cost)])

    writer.writerows(rows)
    return out.getvalue()


def csv_filename(design: Design) -> str:
    return re.sub(r"[^A-Za-z0-9]", "_", design.name) + ".csv"


# ---------------------------------------------------------------------------
# CSV import
# ---------------------------------------------------------------------------

_HULL_LINE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*tons?\s*$", re.I)

_QUANTITY_SUFFIX = re.compile(r"\s*x(\d+)$")
_TONS_IN_LABEL = re.compile(r"(\d+(?:\.\d+)?)\s*tons")

_DRIVE_CATEGORIES = {c.value.lower(): c for c in DriveCategory}
_FITTING_TYPES_BY_NAME = {
    name.lower(): t
    for t, name in FITTING_NAMES.items()
    if t not in (FittingType.electronics, FittingType.other)
}
_ELECTRONICS_BY_NAME = {f"{e.name} Electronics".lower(): e for e in ELECTRONICS.values()}
_SHIP_WEAPONS_BY_NAME = {w.name.lower(): w for w in list_ship_weapons()}


def _float(value: str) -> float:
    """Non-negative number from a cell; blanks and junk read as 0."""
    try:
        return max(0.0, float(value))
    except (TypeError, ValueError):
        return 0.0


def _credits(mcr: str) -> int:
    return mcr_to_credits(_float(mcr))


def _split_header(lines: list[list[str]]) -> tuple[dict, list[list[str]]]:
    """Read the Name/Description/Hull/Tech Level lines; return info and the rest."""
    info: dict = {}
    index = 0
    while index < len(lines):
        row = lines[index]
        key = row[0].strip().lower() if row else ""
        if key == "name" and len(row) > 1:
            info["name"] = row[1].strip()
        elif key == "description" and len(row) > 1:
            info["description"] = row[1].strip()
        elif key == "hull" and len(row) > 2 and _HULL_LINE.match(row[1]):
            info["tonnage"] = _float(_HULL_LINE.match(row[1]).group(1))
        elif key == "tech level" and len(row) > 1:
            info["tech_level"] = row[1].strip().upper()
        else:
            break
        index += 1
    return info, lines[index:]


def _category_rows(lines: list[list[str]]) -> list[tuple[str, str, str, str]]:
    """(category, item, tons, cost) for each item row after the column header."""
    rows = []
    found_header = False
    category = ""
    for row in lines:
        if not any(cell.strip() for cell in row):
            continue
        cells = [cell.strip() for cell in row] + ["", "", "", ""]
        if not found_header:
            found_header = cells[0].lower() == "category"
            continue
        if cells[0] == "TOTALS":
            break
        if not cells[1]:
            continue
        if cells[0]:
            category = cells[0]
        rows.append((category, cells[1], cells[2] or "0", cells[3] or "0"))
    return rows


def _parse_armor(item: str, tons: str, cost: str) -> Armor | None:
    rating = re.search(r"Rating\s+(\d+)", item)
    armor_type = re.match(r"^(\w+)", item)
    if not rating or not armor_type or int(rating.group(1)) < 1:
        return None
    return Armor(
        type=armor_type.group(1),
        rating=int(rating.group(1)),
        mass=_float(tons),
        cost=_credits(cost),
    )


def _parse_drive(index: int, item: str, tons: str, cost: str) -> Drive | None:
    category = re.match(r"^(\w+)", item)
    model = re.search(r"Model\s+(\w+)", item)
    if not category or not model or not is_drive_model(model.group(1)):
        return None
    drive_category = _DRIVE_CATEGORIES.get(category.group(1).lower())
    if drive_category is None:
        return None
    rating = re.search(r"\([^)\d]*(\d+)[^)]*\)", item)
    quantity = _QUANTITY_SUFFIX.search(item)
    return Drive(
        id=f"drive-{index}",
        type=drive_category,
        model=model.group(1),
        rating=int(rating.group(1)) if rating else 0,
        mass=_float(tons),
        cost=_credits(cost),
        quantity=max(1, int(quantity.group(1))) if quantity else 1,
    )


def _parse_fitting(index: int, item: str, tons: str, cost: str) -> Fitting:
    quantity = _QUANTITY_SUFFIX.search(item)
    label = _QUANTITY_SUFFIX.sub("", item).strip()
    name = re.sub(r"\s*\([^)]*\)$", "", label).strip()
    fitting = Fitting(
        id=f"fitting-{index}",
        type=FittingType.other,
        name=name,
        mass=_float(tons),
        cost=_credits(cost),
        quantity=max(1, int(quantity.group(1))) if quantity else 1,
    )

    electronics = _ELECTRONICS_BY_NAME.get(name.lower())
    if electronics is not None:
        return fitting.model_copy(
            update={
                "type": FittingType.electronics,
                "electronics_type": electronics.key,
                "die_modifier": electronics.die_modifier,
                "includes": ", ".join(electronics.includes),
            }
        )
    fitting_type = _FITTING_TYPES_BY_NAME.get(name.lower())
    if fitting_type is None:
        return fitting
    update: dict = {"type": fitting_type}
    count = re.search(r"\((\d+)\s+(crew|passengers?)\)", label)
    if count and count.group(2) == "crew":
        update["crew"] = int(count.group(1))
    elif count:
        update["passengers"] = int(count.group(1))
    return fitting.model_copy(update=update)


def _parse_weapon(index: int, item: str, tons: str, cost: str) -> Weapon:
    quantity = re.search(r"x(\d+)", item)
    mount = re.search(r"\(([^)]+)\)$", item)
    name = re.sub(r"\s*x\d+.*$", "", item).strip()
    spec = _SHIP_WEAPONS_BY_NAME.get(name.lower())
    # Anything that is not a ship weapon is an anti-personnel mount
    weapon = Weapon(
        id=f"weapon-{index}",
        type="anti_personnel",
        name=name,
        category=WeaponCategory.anti_personnel,
        mass=_float(tons),
        cost=_credits(cost),
        quantity=max(1, int(quantity.group(1))) if quantity else 1,
        slots_used=0,
        energy_weapons=0,
        mount_type=mount.group(1) if mount else "fixed",
    )
    if spec is None:
        return weapon
    return weapon.model_copy(
        update={
            "type": spec.weapon_type.value,
            "category": WeaponCategory.ship,
            "slots_used": spec.slots_used,
            "energy_weapons": spec.energy_weapons,
        }
    )


def _parse_cargo(rows: list[tuple[str, str, str, str]]) -> Cargo:
    cargo = Cargo()
    fields = {
        "Cargo Bay": "cargo_bay",
        "Ship's Locker": "ships_locker",
        "Missile Reloads": "missile_reloads",
    }
    for _, item, _, _ in rows:
        if "Modular Cutter Bay" in item:
            cargo.modular_cutter_bay = True
            continue
        for label, attr in fields.items():
            tons = _TONS_IN_LABEL.search(item)
            if label in item and tons:
                setattr(cargo, attr, float(tons.group(1)))
    return cargo


def _parse_staff(rows: list[tuple[str, str, str, str]]) -> Staff:
    staff = Staff(pilot=1)
    for _, item, _, _ in rows:
        match = re.match(r"(\w+):\s*(\d+)", item)
        if not match:
            continue
        role, count = match.group(1).lower(), int(match.group(2))
        if role == "pilots":
            staff.pilot = count
        elif role == "gunners":
            staff.gunner = count
        elif role == "engineer":
            staff.engineer = count > 0
        elif role == "communications":
            staff.comms = count > 0
        elif role == "sensors":
            staff.sensors = count > 0
        elif role == "ecm":
            staff.ecm = count > 0
        elif role == "other":
            staff.other = count
    return staff


def import_design_csv(text: str, filename: str) -> Design:
    """Rebuild a design from a summary CSV; the filename supplies a fallback name."""
    lines = list(csv.reader(io.StringIO(text.replace("\r\n", "\n"))))
    info, remaining = _split_header(lines)
    rows = _category_rows(remaining)

    name = info.get("name") or re.sub(r"\.csv$", "", filename, flags=re.I)
    tonnage = info.get("tonnage", 0)
    tech_level = info.get("tech_level")
    if tech_level not in TECH_LEVELS:
        tech_level = DEFAULT_IMPORT_TECH_LEVEL

    hull_cost = None
    armor = None
    for _, item, tons, cost in (r for r in rows if r[0] == "Hull"):
        if re.search(r"Rating\s+\d+", item):
            armor = _parse_armor(item, tons, cost)
        elif hull_cost is None:
            hull_cost = _credits(cost)
    if hull_cost is None:
        hull_cost = get_hull_cost(tonnage) if tonnage > 0 else 0

    hull = Hull(
        name=name,
        tech_level=tech_level,
        tonnage_code=get_hull_code(tonnage) if tonnage > 0 else "",
        tonnage=int(tonnage),
        cost=hull_cost,
        description=f"{tonnage:g} tons" if tonnage > 0 else None,
    )

    drives = []
    for index, (_, item, tons, cost) in enumerate(r for r in rows if r[0] == "Drives"):
        drive = _parse_drive(index, item, tons, cost)
        if drive is not None:
            drives.append(drive)

    fuel = Fuel()
    fuel_row = next((r for r in rows if r[0] == "Fuel"), None)
    if fuel_row is not None:
        amount = _TONS_IN_LABEL.search(fuel_row[1])
        duration = re.search(r"(\d+(?:\.\d+)?)\s*hours", fuel_row[1])
        if amount:
            fuel.amount = float(amount.group(1))
            fuel.mass = fuel.amount
        if duration:
            fuel.duration = float(duration.group(1))

    fittings = [
        _parse_fitting(index, item, tons, cost)
        for index, (_, item, tons, cost) in enumerate(r for r in rows if r[0] == "Fittings")
    ]
    weapons = [
        _parse_weapon(index, item, tons, cost)
        for index, (_, item, tons, cost) in enumerate(
            r for r in rows if r[0] == "Weapons" and r[1] != "Unarmed"
        )
    ]

    return Design(
        name=name,
        description=info.get("description") or None,
        hull=hull,
        armor=armor,
        drives=drives,
        fuel=fuel,
        fittings=fittings,
        weapons=weapons,
        cargo=_parse_cargo([r for r in rows if r[0] == "Cargo"]),
        staff=_parse_staff([r for r in rows if r[0] == "Staff"]),
    )
