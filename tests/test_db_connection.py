from pathlib import Path

import pytest

from logcord.database.db_connection import IN_MEMORY, ConnectionManager, path_from_database_url


@pytest.mark.parametrize(
    "url, expected",
    [
        ("sqlite:data/logcord.db", Path("data/logcord.db").resolve()),
        ("sqlite://data/logcord.db?mode=rwc", Path("data/logcord.db").resolve()),
        ("data/logcord.db", Path("data/logcord.db").resolve()),
        ("sqlite::memory:", IN_MEMORY),
    ],
)
def test_path_from_database_url(url, expected):
    assert path_from_database_url(url) == expected


@pytest.mark.parametrize("url", ["", "   ", "postgres://localhost/db", "sqlite:"])
def test_invalid_database_urls(url):
    with pytest.raises(ValueError):
        path_from_database_url(url)


def test_connection_before_open_raises():
    with pytest.raises(RuntimeError):
        ConnectionManager().connection


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(connection_manager):
    with pytest.raises(RuntimeError):
        async with connection_manager.transaction() as conn:
            await conn.execute("INSERT INTO log_channels (guild_id) VALUES ('1')")
            raise RuntimeError("boom")

    async with connection_manager.read() as conn:
        async with conn.execute("SELECT COUNT(*) FROM log_channels") as cursor:
            (count,) = await cursor.fetchone()
    assert count == 0


@pytest.mark.asyncio
async def test_schema_is_created(connection_manager):
    async with connection_manager.read() as conn:
        async with conn.execute("SELECT name FROM sqlite_master WHERE type='table'") as cursor:
            tables = {row[0] for row in await cursor.fetchall()}
        async with conn.execute("SELECT version FROM schema_version") as cursor:
            (version,) = await cursor.fetchone()
    assert {"log_channels", "schema_version"} <= tables
    assert version == 1


@pytest.mark.asyncio
async def test_close_is_idempotent(tmp_path):
    manager = ConnectionManager()
    await manager.open(tmp_path / "x.db")
    assert manager.is_open
    await manager.close()
    await manager.close()
    assert not manager.is_open
