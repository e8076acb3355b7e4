import os
import tempfile

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from smallcraft.database import create_schema, get_db
from smallcraft.main import app
from smallcraft.models import Base
from smallcraft.schemas.design import Cargo, Design, Fuel, Hull, Staff
from smallcraft.services.parts import (
    build_armor,
    build_cockpit,
    build_drive,
    build_electronics,
    build_ship_weapon,
)


@pytest.fixture
async def db_engine():
    db_fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(db_fd)
    test_db_url = f"sqlite+aiosqlite:///{db_path}"
    engine = create_async_engine(test_db_url, connect_args={"check_same_thread": False})
    await create_schema(engine)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
async def db_session(db_engine) -> AsyncSession:
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client() -> AsyncClient:
    """HTTP client that does NOT override the DB (for endpoints that don't need DB)."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_client(db_session: AsyncSession) -> AsyncClient:
    """HTTP client with DB dependency overridden to use the test SQLite DB."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def gunboat() -> Design:
    """A clean 50-ton TL D design.

    Mass 37.1 tons, cost 28 MCr, two gunners (pulse laser family + torpedo).
    """
    hull = Hull(name="Gunboat", tech_level="D", tonnage_code="s5", tonnage=50, cost=1_500_000)
    return Design(
        name="Gunboat",
        description="Test gunboat",
        hull=hull,
        armor=build_armor("crystaliron", 4, hull),
        drives=[
            build_drive("gravitic_m", "sK", 50, drive_id="m1"),
            build_drive("fusion_p", "sM", 50, drive_id="p1"),
        ],
        fuel=Fuel(amount=4, duration=672, mass=4),
        fittings=[
            build_cockpit("cockpit", 2, 50, fitting_id="f1"),
            build_electronics("basic_military", "D", fitting_id="f2"),
        ],
        weapons=[
            build_ship_weapon("pulse_laser_double", weapon_id="w1"),
            build_ship_weapon("torpedo", weapon_id="w2"),
        ],
        cargo=Cargo(cargo_bay=10, ships_locker=2),
        staff=Staff(pilot=1, gunner=2, sensors=True, ecm=True),
    )
