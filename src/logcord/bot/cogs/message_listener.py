"""Message listener Cog for Logcord.

Turns raw message delete/edit gateway events into pipeline events. The raw
variants are used so events for uncached messages still reach the classifier,
which then decides to skip them.
"""

import discord
from discord.ext import commands

from logcord.bot.bot_context import BotContext
from logcord.datatypes.discord_datatypes import ChannelID, GuildID, MessageID
from logcord.datatypes.event_datatypes import MessageDeleted, MessageSnapshot, MessageUpdated
from logcord.pipeline.dispatch import handle_event
from logcord.util.logger import get_logger

logger = get_logger("message_listener_cog")


def _snapshot(message):
    return MessageSnapshot.from_message(message) if message is not None else None


class MessageListenerCog(commands.Cog):
    """Cog forwarding message deletions and edits to the logging pipeline."""

    def __init__(self, discord_bot_instance, context: BotContext):
        self.bot = discord_bot_instance
        self.context = context
        logger.info("Message listener cog loaded")

    @commands.Cog.listener(name="on_raw_message_delete")
    async def on_raw_message_delete(self, payload: discord.RawMessageDeleteEvent):
        event = MessageDeleted(
            channel_id=ChannelID(payload.channel_id),
            message_id=MessageID(payload.message_id),
            guild_id=GuildID(payload.guild_id) if payload.guild_id else None,
            cached=_snapshot(payload.cached_message),
        )
        await handle_event(event, self.context.router)

    @commands.Cog.listener(name="on_raw_message_edit")
    async def on_raw_message_edit(self, payload: discord.RawMessageUpdateEvent):
        """Log an edit using the pre-edit copy from the payload and the updated cache entry."""
        # py-cord updates the cached message in place and hands us a copy of the old state
        current = self.bot.get_message(payload.message_id) if payload.cached_message is not None else None
        event = MessageUpdated(
            channel_id=ChannelID(payload.channel_id),
            message_id=MessageID(payload.message_id),
            guild_id=GuildID(payload.guild_id) if payload.guild_id else None,
            before=_snapshot(payload.cached_message),
            after=_snapshot(current),
        )
        await handle_event(event, self.context.router)


def setup(discord_bot_instance, context: BotContext):
    """Register the MessageListenerCog with the bot."""
    discord_bot_instance.add_cog(MessageListenerCog(discord_bot_instance, context))
