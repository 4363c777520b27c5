"""
Repository for the log_channels table.
"""

from __future__ import annotations

from typing import Optional

import aiosqlite

from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.log_datatypes import GuildLogConfig, LogCategory
from logcord.util.logger import get_logger

logger = get_logger("log_channels_repo")


class LogChannelsRepository:
    """CRUD for the log_channels table.

    Column names are only ever taken from ``LogCategory.column_name``, never
    from user input, so formatting them into SQL is safe.
    """

    async def insert_default(self, conn: aiosqlite.Connection, guild_id: GuildID) -> None:
        """Create the all-unset row for a guild; a no-op when it already exists."""
        await conn.execute(
            "INSERT INTO log_channels (guild_id) VALUES (?) ON CONFLICT DO NOTHING",
            (str(guild_id),),
        )

    async def get_row(self, conn: aiosqlite.Connection, guild_id: GuildID) -> Optional[GuildLogConfig]:
        async with conn.execute(
            "SELECT guild_id, member_logs, chat_logs, server_logs FROM log_channels WHERE guild_id = ?",
            (str(guild_id),),
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        return GuildLogConfig(
            guild_id=GuildID(row[0]),
            member_channel=ChannelID.parse(row[1]),
            chat_channel=ChannelID.parse(row[2]),
            server_channel=ChannelID.parse(row[3]),
        )

    async def get_channel(
        self, conn: aiosqlite.Connection, guild_id: GuildID, category: LogCategory
    ) -> Optional[ChannelID]:
        async with conn.execute(
            f"SELECT {category.column_name} FROM log_channels WHERE guild_id = ?",
            (str(guild_id),),
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        channel_id = ChannelID.parse(row[0])
        if row[0] is not None and channel_id is None:
            logger.warning(
                "[LOG CHANNELS REPO] Ignoring malformed %s value %r for guild %s",
                category.column_name, row[0], guild_id,
            )
        return channel_id

    async def set_channel(
        self,
        conn: aiosqlite.Connection,
        guild_id: GuildID,
        category: LogCategory,
        channel_id: Optional[ChannelID],
    ) -> None:
        await conn.execute(
            f"UPDATE log_channels SET {category.column_name} = ? WHERE guild_id = ?",
            (str(channel_id) if channel_id is not None else None, str(guild_id)),
        )
