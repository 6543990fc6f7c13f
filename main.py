import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from config import settings
from database import engine, Base, AsyncSessionLocal
from errors import register_error_handlers
from logging_config import setup_logging
from models import User
from api.controllers import service_providers
from scripts.seed import seed_data

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create tables
    async with engine.begin() as conn:
        # In production, we might use alembic instead of create_all
        await conn.run_sync(Base.metadata.create_all)

    if settings.seed_on_startup:
        # Check if DB is empty and seed if necessary
        async with AsyncSessionLocal() as session:
            result = await session.execute(select(User).limit(1))
            user = result.scalar_one_or_none()
        if not user:
            logger.info("Database appears empty. Seeding data...")
            await seed_data(reset=False)
        else:
            logger.info("Database already contains data. Skipping seed.")

    yield
    # Shutdown
    await engine.dispose()

app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(service_providers.router, prefix=settings.api_prefix)

@app.get("/")
async def root():
    return {"message": f"{settings.project_name} is running"}
