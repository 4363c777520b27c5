"""
Per-guild log channel configuration store.

The store is the only persistent state of the bot. Rows are created lazily:
on the first ``/channels list`` or the first ``set`` for a guild, never on
guild join, and they are never deleted.

Concurrent handlers need no extra locking: row creation is
``ON CONFLICT DO NOTHING`` and field updates are last-write-wins.
"""

from __future__ import annotations

from typing import Optional

from logcord.database.db_connection import ConnectionManager, db_connection
from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.log_datatypes import GuildLogConfig, LogCategory
from logcord.settings.repositories.log_channels_repo import LogChannelsRepository
from logcord.util.logger import get_logger

logger = get_logger("log_channels_store")


class LogChannelsStore:
    """Async get/set API over the ``log_channels`` table."""

    def __init__(
        self,
        connection_manager: ConnectionManager = db_connection,
        repository: LogChannelsRepository | None = None,
    ) -> None:
        self._db = connection_manager
        self._repo = repository or LogChannelsRepository()

    async def get(self, guild_id: GuildID, category: LogCategory) -> Optional[ChannelID]:
        """Destination channel for ``category`` in ``guild_id``, or None when unset.

        Does not create a row.
        """
        async with self._db.read() as conn:
            return await self._repo.get_channel(conn, guild_id, category)

    async def ensure_row(self, guild_id: GuildID) -> None:
        async with self._db.transaction() as conn:
            await self._repo.insert_default(conn, guild_id)

    async def get_config(self, guild_id: GuildID) -> GuildLogConfig:
        """Full configuration for a guild, creating the all-unset row if absent."""
        await self.ensure_row(guild_id)
        async with self._db.read() as conn:
            config = await self._repo.get_row(conn, guild_id)
        return config or GuildLogConfig.empty(guild_id)

    async def set(self, guild_id: GuildID, category: LogCategory, channel_id: Optional[ChannelID]) -> None:
        """Point ``category`` at ``channel_id``; None unsets it."""
        async with self._db.transaction() as conn:
            await self._repo.insert_default(conn, guild_id)
            await self._repo.set_channel(conn, guild_id, category, channel_id)

        if channel_id is None:
            logger.info("[LOG CHANNELS] Unset %s for guild %s", category.display_name, guild_id)
        else:
            logger.info(
                "[LOG CHANNELS] %s for guild %s -> channel %s", category.display_name, guild_id, channel_id
            )


# Module-level singleton bound to the shared connection
log_channels_store = LogChannelsStore()
