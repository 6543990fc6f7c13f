"""
Shared test configuration.

The app reads its settings at import time, so the environment is prepared
here before any project module is imported. Tests run against a SQLite file
that is rebuilt and seeded through a synchronous engine before each API test.
"""

import os
import sys
import tempfile
from datetime import timedelta
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

DB_PATH = Path(tempfile.mkdtemp(prefix="service-provider-api-")) / "test.db"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["DEFAULT_PAGE_LIMIT"] = "10"
os.environ["MAX_PAGE_LIMIT"] = "100"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from database import Base  # noqa: E402
from main import app  # noqa: E402
from models import ServiceProvider, User  # noqa: E402
from support import ADMIN_ID, OTHER_ID, OWNER_ID, PROVIDERS, SEED_TIME, auth_headers  # noqa: E402


@pytest.fixture(scope="session")
def sync_engine():
    engine = create_engine(f"sqlite:///{DB_PATH}")
    yield engine
    engine.dispose()


@pytest.fixture
def seeded_db(sync_engine):
    Base.metadata.drop_all(sync_engine)
    Base.metadata.create_all(sync_engine)
    with Session(sync_engine) as session:
        session.add_all([
            User(id=OWNER_ID, name="Owner", email="owner@example.com", role="user"),
            User(id=OTHER_ID, name="Other", email="other@example.com", role="user"),
            User(id=ADMIN_ID, name="Admin", email="admin@example.com", role="admin"),
        ])
        session.flush()
        session.add_all([
            ServiceProvider(**p, created_at=SEED_TIME + timedelta(minutes=n), updated_at=SEED_TIME)
            for n, p in enumerate(PROVIDERS)
        ])
        session.commit()
    return sync_engine


@pytest.fixture
def client(seeded_db):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def owner_headers():
    return auth_headers(OWNER_ID)


@pytest.fixture
def other_headers():
    return auth_headers(OTHER_ID)


@pytest.fixture
def admin_headers():
    return auth_headers(ADMIN_ID)
