import asyncio
import logging
import os
import sys

# Add parent directory to path so the script can be run directly
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import AsyncSessionLocal, engine, Base
from models import User, ServiceProvider

logger = logging.getLogger(__name__)

USERS = [
    {"id": "admin", "name": "Site Admin", "email": "admin@example.com", "role": "admin"},
    {"id": "alice", "name": "Alice Moreau", "email": "alice@example.com", "role": "provider"},
    {"id": "bruno", "name": "Bruno Keller", "email": "bruno@example.com", "role": "provider"},
]

SERVICE_PROVIDERS = [
    {
        "user": "alice",
        "name": "Moreau Plumbing",
        "description": "Residential plumbing and emergency repairs",
        "email": "contact@moreau-plumbing.example",
        "phone": "555-0101",
        "rating": 4.7,
        "status": "active",
        "is_verified": True,
    },
    {
        "user": "alice",
        "name": "Moreau Heating",
        "description": "Boiler servicing",
        "rating": 3.9,
        "status": "inactive",
    },
    {
        "user": "bruno",
        "name": "Keller Electric",
        "description": "Wiring, panels and lighting",
        "phone": "555-0199",
        "rating": 4.2,
        "status": "active",
    },
    {
        "user": "bruno",
        "name": "Keller Garden Care",
        "rating": 2.8,
        "status": "suspended",
    },
]

async def seed_data(reset: bool = True):
    # 1. Optionally recreate tables to ensure a clean slate
    async with engine.begin() as conn:
        if reset:
            # WARNING: This wipes existing data!
            logger.info("Dropping existing tables...")
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Creating tables...")
        await conn.run_sync(Base.metadata.create_all)

    # 2. Start a DB session to insert data
    async with AsyncSessionLocal() as session:
        logger.info("Seeding users...")
        session.add_all([User(**u) for u in USERS])
        await session.flush()

        logger.info("Seeding service providers...")
        session.add_all([ServiceProvider(**p) for p in SERVICE_PROVIDERS])
        await session.commit()

    logger.info("Seeded %d users and %d service providers", len(USERS), len(SERVICE_PROVIDERS))

if __name__ == "__main__":
    from config import settings
    from logging_config import setup_logging

    setup_logging(settings.log_level)
    asyncio.run(seed_data())
