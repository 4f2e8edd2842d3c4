"""Shared fixtures for the test-suite."""

from __future__ import annotations

import os
import pathlib
import sys
from datetime import datetime, timezone

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# The engine in ``pfm_api.infrastructure.database`` is built at import time.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_TIMEZONE", "UTC")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pfm_api.config import reset_settings_cache
from pfm_api.infrastructure.database import Base, initialize_database
from pfm_api.utils import get_app_timezone

FIXED_NOW = datetime(2024, 3, 10, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    get_app_timezone.cache_clear()
    yield
    reset_settings_cache()
    get_app_timezone.cache_clear()


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def session():
    """Yield a session bound to a private in-memory SQLite database."""

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    initialize_database(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = factory()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
