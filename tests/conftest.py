"""Shared fixtures for the scenario backend test-suite.

The database URL is pointed at a throwaway SQLite file before any
application module is imported, because ``core.database`` builds its
engine at import time.
"""
from __future__ import annotations

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="scenario-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'scenario.db')}"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

from core.database import Base  # noqa: E402
from core.validation import (  # noqa: E402
    DEFAULT_MESSAGES_DIR,
    MessageCatalog,
    MessageResolver,
    ValidationConfig,
    ValidationContext,
    ValidationEngine,
    ValidatorRegistry,
)
import custom_validators  # noqa: E402


@pytest.fixture
def registry() -> ValidatorRegistry:
    return ValidatorRegistry()


@pytest.fixture(scope="session")
def resolver() -> MessageResolver:
    return MessageResolver(MessageCatalog.from_directories(DEFAULT_MESSAGES_DIR, custom_validators.MESSAGES_DIR))


@pytest.fixture
def make_engine(registry, resolver):
    """Build an engine over the test registry with an optional config."""

    def _make(**config) -> ValidationEngine:
        return ValidationEngine(registry, resolver=resolver, config=ValidationConfig(**config))

    return _make


@pytest.fixture
def engine(make_engine) -> ValidationEngine:
    return make_engine()


@pytest.fixture
def context() -> ValidationContext:
    return ValidationContext.create(correlation_id="test-correlation")


@pytest_asyncio.fixture
async def session(tmp_path):
    """Session over a private SQLite file with the schema created."""
    db_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'accounts.db'}")
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with async_sessionmaker(db_engine, expire_on_commit=False)() as db:
        yield db
    await db_engine.dispose()
