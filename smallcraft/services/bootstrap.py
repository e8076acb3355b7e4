"""First-run bootstrap: seed an empty design store from a bundled JSON file."""

import logging
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from smallcraft.services.design_store import count_designs
from smallcraft.services.interchange import ImportResult, import_designs_json

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "initial_smallcraft.json"


async def initialize_database(
    db: AsyncSession, path: str | Path | None = None
) -> ImportResult | None:
    """Load the initial designs if the store is empty.

    Returns the import result, or None when nothing was loaded.  Never raises:
    the application starts even if seeding fails.
    """
    path = Path(path) if path else DEFAULT_INITIAL_DATA_PATH
    try:
        existing = await count_designs(db)
        if existing > 0:
            logger.info("Design store already holds %d design(s); skipping initial data", existing)
            return None
        if not path.is_file():
            logger.warning("Initial data file %s not found", path)
            return None

        result = await import_designs_json(path.read_text(encoding="utf-8"), db)
        logger.info(
            "Initial data loaded from %s: %d imported, %d failed",
            path,
            result.imported,
            result.failed,
        )
        return result
    except Exception:
        logger.exception("Failed to load initial data from %s", path)
        return None
