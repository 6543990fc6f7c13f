from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker  # Async SQLAlchemy engine/session.
from sqlalchemy.orm import DeclarativeBase  # Base class for ORM models.
from sqlalchemy.pool import NullPool

from config import settings

DATABASE_URL = settings.database_url  # Connection string for the database.
if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable not set")

# Ensure we use the async driver.
if DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)

engine_options = {"echo": settings.db_echo}
if DATABASE_URL.startswith("sqlite"):
    # SQLite connections are cheap; do not pool them across event loops.
    engine_options["poolclass"] = NullPool

engine = create_async_engine(DATABASE_URL, **engine_options)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)  # Session factory.


class Base(DeclarativeBase):
    """Base class for all ORM models (collects metadata)."""
    pass


async def get_db():
    # Dependency that yields a DB session and closes it after the request.
    async with AsyncSessionLocal() as session:
        yield session
