"""Tests for first-run seeding of the design store."""

from sqlalchemy.ext.asyncio import AsyncSession

from smallcraft.services.bootstrap import DEFAULT_INITIAL_DATA_PATH, initialize_database
from smallcraft.services.design_service import validate_design
from smallcraft.services.design_store import count_designs, list_designs, save_design
from smallcraft.services.interchange import parse_designs_json


class TestBundledDesigns:
    def test_bundled_file_parses(self):
        designs, errors = parse_designs_json(DEFAULT_INITIAL_DATA_PATH.read_text(encoding="utf-8"))
        assert errors == []
        assert [d.name for d in designs] == ["Light Fighter", "Ship's Boat", "Patrol Gunboat"]

    def test_bundled_designs_are_clean(self):
        designs, _ = parse_designs_json(DEFAULT_INITIAL_DATA_PATH.read_text(encoding="utf-8"))
        for design in designs:
            assert validate_design(design) == [], design.name


class TestInitializeDatabase:
    async def test_loads_into_empty_store(self, db_session: AsyncSession):
        result = await initialize_database(db_session)
        assert result.imported == 3
        assert result.failed == 0
        assert await count_designs(db_session) == 3

    async def test_skips_non_empty_store(self, db_session: AsyncSession, gunboat):
        await save_design(gunboat, db_session)
        assert await initialize_database(db_session) is None
        assert [d.name for d in await list_designs(db_session)] == ["Gunboat"]

    async def test_runs_once(self, db_session: AsyncSession):
        await initialize_database(db_session)
        assert await initialize_database(db_session) is None
        assert await count_designs(db_session) == 3

    async def test_missing_file_is_not_fatal(self, db_session: AsyncSession, tmp_path):
        assert await initialize_database(db_session, tmp_path / "missing.json") is None
        assert await count_designs(db_session) == 0

    async def test_corrupt_file_is_not_fatal(self, db_session: AsyncSession, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        assert await initialize_database(db_session, path) is None
        assert await count_designs(db_session) == 0

    async def test_partial_failures_are_counted(self, db_session: AsyncSession, tmp_path):
        path = tmp_path / "dupes.json"
        path.write_text('[{"name": "Twin"}, {"name": "Twin"}, {"name": ""}]', encoding="utf-8")
        result = await initialize_database(db_session, path)
        assert result.imported == 1
        assert result.failed == 2

    async def test_malformed_entry_does_not_block_the_rest(self, db_session: AsyncSession, tmp_path):
        path = tmp_path / "legacy.json"
        path.write_text(
            '[{"name": "Good"},'
            ' {"name": "Legacy", "drives": [{"id": "d", "type": "jump", "model": "sA",'
            ' "mass": 1, "cost": 0}]}]',
            encoding="utf-8",
        )
        result = await initialize_database(db_session, path)
        assert result.imported == 1
        assert result.failed == 1
        assert await count_designs(db_session) == 1
