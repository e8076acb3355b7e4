"""Tests for the design record store (service layer, temporary SQLite DB)."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from smallcraft.models.design import SmallCraftDesign
from smallcraft.schemas.design import Staff
from smallcraft.services.design_store import (
    count_designs,
    delete_design,
    get_design,
    list_designs,
    name_exists,
    save_design,
)


class TestSaveDesign:
    async def test_create_assigns_id_and_timestamps(self, db_session: AsyncSession, gunboat):
        design_id = await save_design(gunboat, db_session)
        assert design_id is not None

        loaded = await get_design(design_id, db_session)
        assert loaded.id == design_id
        assert loaded.name == "Gunboat"
        assert loaded.created_at is not None
        assert loaded.updated_at is not None

    async def test_loaded_design_matches_saved_parts(self, db_session: AsyncSession, gunboat):
        design_id = await save_design(gunboat, db_session)
        loaded = await get_design(design_id, db_session)
        exclude = {"id", "created_at", "updated_at"}
        assert loaded.model_dump(exclude=exclude) == gunboat.model_dump(exclude=exclude)

    async def test_empty_name_rejected(self, db_session: AsyncSession, gunboat):
        with pytest.raises(ValueError, match="required"):
            await save_design(gunboat.model_copy(update={"name": "   "}), db_session)
        assert await count_designs(db_session) == 0

    async def test_duplicate_name_rejected(self, db_session: AsyncSession, gunboat):
        await save_design(gunboat, db_session)
        with pytest.raises(ValueError, match="already exists"):
            await save_design(gunboat, db_session)
        assert await count_designs(db_session) == 1

    async def test_update_keeps_created_at(self, db_session: AsyncSession, gunboat):
        design_id = await save_design(gunboat, db_session)
        first = await get_design(design_id, db_session)

        renamed = first.model_copy(update={"name": "Gunboat Mk II"})
        assert await save_design(renamed, db_session) == design_id

        second = await get_design(design_id, db_session)
        assert second.name == "Gunboat Mk II"
        assert second.created_at == first.created_at
        assert second.updated_at >= first.updated_at
        assert await count_designs(db_session) == 1

    async def test_update_may_keep_own_name(self, db_session: AsyncSession, gunboat):
        design_id = await save_design(gunboat, db_session)
        loaded = await get_design(design_id, db_session)
        updated = loaded.model_copy(update={"description": "Refit"})
        await save_design(updated, db_session)
        assert (await get_design(design_id, db_session)).description == "Refit"

    async def test_update_unknown_id_rejected(self, db_session: AsyncSession, gunboat):
        with pytest.raises(ValueError, match="not found"):
            await save_design(gunboat.model_copy(update={"id": 999}), db_session)


class TestQueries:
    async def test_name_exists(self, db_session: AsyncSession, gunboat):
        design_id = await save_design(gunboat, db_session)
        assert await name_exists("Gunboat", db_session) is True
        assert await name_exists("Gunboat", db_session, exclude_id=design_id) is False
        assert await name_exists("Cutter", db_session) is False

    async def test_list_sorted_by_name(self, db_session: AsyncSession, gunboat):
        await save_design(gunboat.model_copy(update={"name": "Zephyr"}), db_session)
        await save_design(gunboat.model_copy(update={"name": "Albatross"}), db_session)
        names = [d.name for d in await list_designs(db_session)]
        assert names == ["Albatross", "Zephyr"]

    async def test_get_unknown_returns_none(self, db_session: AsyncSession):
        assert await get_design(42, db_session) is None

    async def test_gunners_recomputed_on_load(self, db_session: AsyncSession, gunboat):
        design_id = await save_design(gunboat, db_session)
        record = await db_session.get(SmallCraftDesign, design_id)
        data = dict(record.data)
        data["staff"] = Staff(pilot=1, gunner=9).model_dump(by_alias=True)
        record.data = data
        await db_session.commit()

        loaded = await get_design(design_id, db_session)
        assert loaded.staff.gunner == 2


class TestDeleteDesign:
    async def test_delete(self, db_session: AsyncSession, gunboat):
        design_id = await save_design(gunboat, db_session)
        assert await delete_design(design_id, db_session) is True
        assert await get_design(design_id, db_session) is None
        assert await name_exists("Gunboat", db_session) is False

    async def test_delete_unknown(self, db_session: AsyncSession):
        assert await delete_design(7, db_session) is False
