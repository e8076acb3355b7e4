"""Design store: persists Design aggregates as SmallCraftDesign rows.

Responsibilities:
  - Create or update a design (id None = create) with store-managed timestamps
  - Enforce non-empty, unique design names
  - List, load and delete designs
  - Recompute derived crew (gunners) on load so stale values never surface
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smallcraft.models.design import SmallCraftDesign
from smallcraft.schemas.design import Design
from smallcraft.services.design_service import with_derived_staff

logger = logging.getLogger(__name__)

# Columns stored outside the JSON body.
_RECORD_FIELDS = {"id", "name", "description", "created_at", "updated_at"}


def _to_data(design: Design) -> dict:
    return design.model_dump(mode="json", by_alias=True, exclude=_RECORD_FIELDS)


def _to_design(record: SmallCraftDesign) -> Design:
    design = Design.model_validate(
        {
            **(record.data or {}),
            "id": record.id,
            "name": record.name,
            "description": record.description,
            "createdAt": record.created_at,
            "updatedAt": record.updated_at,
        }
    )
    return with_derived_staff(design)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

async def name_exists(name: str, db: AsyncSession, exclude_id: int | None = None) -> bool:
    """True if another design already uses this name."""
    query = select(func.count()).select_from(SmallCraftDesign).where(
        SmallCraftDesign.name == name.strip()
    )
    if exclude_id is not None:
        query = query.where(SmallCraftDesign.id != exclude_id)
    result = await db.execute(query)
    return result.scalar_one() > 0


async def count_designs(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(SmallCraftDesign))
    return result.scalar_one()


async def list_designs(db: AsyncSession) -> list[Design]:
    result = await db.execute(select(SmallCraftDesign).order_by(SmallCraftDesign.name))
    return [_to_design(r) for r in result.scalars().all()]


async def get_design(design_id: int, db: AsyncSession) -> Design | None:
    record = await db.get(SmallCraftDesign, design_id)
    if record is None:
        return None
    return _to_design(record)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def save_design(design: Design, db: AsyncSession) -> int:
    """Create (id None) or update a design and return its id.

    Raises ValueError for an empty or duplicate name, or an unknown id.
    """
    name = design.name.strip()
    if not name:
        raise ValueError("Design name is required")
    if await name_exists(name, db, exclude_id=design.id):
        raise ValueError(f"A design named '{name}' already exists")

    design = with_derived_staff(design)
    now = datetime.now(timezone.utc)

    if design.id is None:
        record = SmallCraftDesign(
            name=name,
            description=design.description,
            data=_to_data(design),
            created_at=now,
            updated_at=now,
        )
        db.add(record)
    else:
        record = await db.get(SmallCraftDesign, design.id)
        if record is None:
            raise ValueError(f"Design {design.id} not found")
        record.name = name
        record.description = design.description
        record.data = _to_data(design)
        record.updated_at = now

    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ValueError(f"A design named '{name}' already exists") from exc
    await db.refresh(record)
    logger.info("Saved design %s (%r)", record.id, record.name)
    return record.id


async def delete_design(design_id: int, db: AsyncSession) -> bool:
    """Delete a design; returns False if no such design exists."""
    record = await db.get(SmallCraftDesign, design_id)
    if record is None:
        return False
    await db.delete(record)
    await db.commit()
    logger.info("Deleted design %s (%r)", design_id, record.name)
    return True
