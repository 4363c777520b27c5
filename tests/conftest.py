"""
Pytest configuration and fixtures for Logcord tests.
"""

import os
import sys
import tempfile
from pathlib import Path

# Keep test runs from writing session logs into the repository
os.environ.setdefault("LOGCORD_LOGS_DIR", tempfile.mkdtemp(prefix="logcord-test-logs-"))

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))
sys.path.insert(0, str(Path(__file__).parent))

import pytest
import pytest_asyncio

from logcord.database.db_connection import ConnectionManager
from logcord.database.db_schema import SchemaManager
from logcord.settings.log_channels_store import LogChannelsStore


@pytest_asyncio.fixture
async def connection_manager(tmp_path):
    """A ConnectionManager over a fresh database file with the schema applied."""
    manager = ConnectionManager()
    await manager.open(tmp_path / "logcord.db")
    await SchemaManager.initialize_schema(manager.connection)
    yield manager
    await manager.close()


@pytest.fixture
def store(connection_manager):
    return LogChannelsStore(connection_manager)
