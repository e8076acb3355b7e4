from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from smallcraft.config import settings
from smallcraft.models import Base


def _connect_args(url: str) -> dict:
    # aiosqlite runs the connection in a worker thread
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_async_engine(
    settings.database_url, echo=False, connect_args=_connect_args(settings.database_url)
)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def create_schema(bind: AsyncEngine = engine) -> None:
    """Create missing tables. A no-op once alembic has run."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
