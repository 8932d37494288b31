"""Integration test fixtures.

These fixtures require a running PostgreSQL instance with the schema
migrated (``alembic upgrade head``). Run with ``pytest -m integration``.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_portal_engine
from infrastructure.settings import DatabaseSettings

# Child tables first; access_grants would cascade but site_checks is explicit
_TABLES = ("site_checks", "access_grants", "principals", "tenants")


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with PORTAL_DB_HOST, PORTAL_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("PORTAL_DB_HOST", "localhost"),
        port=int(os.getenv("PORTAL_DB_PORT", "5432")),
        database=os.getenv("PORTAL_DB_DATABASE", "portal"),
        username=os.getenv("PORTAL_DB_USERNAME", "portal"),
        password=SecretStr(os.getenv("PORTAL_DB_PASSWORD", "portal_dev_password")),
    )


@pytest_asyncio.fixture
async def session_factory(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_portal_engine(integration_db_settings)
    factory = async_sessionmaker(engine, expire_on_commit=False)

    yield factory

    await engine.dispose()


@pytest_asyncio.fixture
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A session on an emptied schema; tables are emptied again afterwards."""

    async def clean() -> None:
        async with session_factory() as cleaner, cleaner.begin():
            for table in _TABLES:
                await cleaner.execute(text(f"DELETE FROM {table}"))

    await clean()
    async with session_factory() as session:
        yield session
    await clean()
