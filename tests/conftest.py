"""
Configuracion de fixtures para pytest.

Remoto y local son dos archivos SQLite distintos: los ids asignados por
cada base no coinciden, igual que entre un entorno remoto y local real.
"""
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from local_sync.infrastructure.database.session import create_tables
from tests.factories import RecordingEventSink, sqlite_url


@pytest.fixture
def events() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def remote_db_url(tmp_path) -> str:
    return sqlite_url(tmp_path / "remote.db")


@pytest.fixture
def local_db_url(tmp_path) -> str:
    return sqlite_url(tmp_path / "local.db")


@pytest_asyncio.fixture
async def remote_engine(remote_db_url) -> AsyncGenerator[AsyncEngine, None]:
    """Base 'remota' con las tablas creadas."""
    engine = create_async_engine(remote_db_url, echo=False)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def local_engine(local_db_url) -> AsyncGenerator[AsyncEngine, None]:
    """Base 'local' con las tablas creadas."""
    engine = create_async_engine(local_db_url, echo=False)
    await create_tables(engine)
    yield engine
    await engine.dispose()
