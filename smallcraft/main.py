import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smallcraft.config import settings
from smallcraft.database import AsyncSessionLocal, create_schema, engine
from smallcraft.routers import designs, rules
from smallcraft.services.bootstrap import initialize_database

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_schema()
    if settings.load_initial_data:
        async with AsyncSessionLocal() as session:
            await initialize_database(session, settings.initial_data_path)
    logger.info("Small craft designer ready")
    yield
    await engine.dispose()


app = FastAPI(
    title="Small Craft Designer",
    description="Rules engine and design store for Traveller small craft",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(rules.router)
app.include_router(designs.router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
