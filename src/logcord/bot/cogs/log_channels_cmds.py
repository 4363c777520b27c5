"""
Log channel commands: choose where each category of notification goes.

This cog exposes one slash command group:
- /channels list: show the destination of every log category
- /channels set <category> [channel]: point a category at a text channel, or
  unset it by leaving the channel out

Both commands are guild-only and hidden from members without the Manage
Channels permission.
"""

from typing import Optional

import aiosqlite
import discord
from discord import Option
from discord.ext import commands

from logcord.bot.bot_context import BotContext
from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.log_datatypes import LOG_CATEGORY_CHOICES, GuildLogConfig, LogCategory
from logcord.util.logger import get_logger

logger = get_logger("log_channels_cmds")

BUG_MESSAGE = "A :bug: showed up while running this command."


def format_channel(channel_id: Optional[ChannelID]) -> str:
    return channel_id.mention if channel_id is not None else "None"


def format_log_channels(guild_name: str, config: GuildLogConfig) -> str:
    """Reply body for ``/channels list``."""
    lines = [f"Log channels for {guild_name}"]
    for category in LogCategory:
        label = category.display_name.replace(" Logs", " logs")
        lines.append(f"{label}: {format_channel(config.channel_for(category))}")
    return "\n".join(lines)


class LogChannelsCog(commands.Cog):
    """Per-guild routing of log categories to channels."""

    channels = discord.SlashCommandGroup(
        "channels",
        "Configure where Logcord sends its logs.",
        contexts={discord.InteractionContextType.guild},
        default_member_permissions=discord.Permissions(manage_channels=True),
    )

    def __init__(self, discord_bot_instance, context: BotContext):
        self.discord_bot_instance = discord_bot_instance
        self.context = context
        logger.info("[LOG CHANNELS CMDS] Log channels cog loaded")

    async def _ensure_guild_context(self, ctx: discord.ApplicationContext) -> bool:
        if not ctx.guild_id:
            await ctx.respond("This command can only be used in a server.", ephemeral=True)
            return False
        return True

    @channels.command(name="list", description="Show which channel receives each category of logs.")
    async def list_channels(self, ctx: discord.ApplicationContext):
        if not await self._ensure_guild_context(ctx):
            return

        guild_id = GuildID(ctx.guild_id)
        try:
            config = await self.context.store.get_config(guild_id)
        except aiosqlite.Error:
            logger.exception("[LOG CHANNELS CMDS] Failed to read log channels for guild %s", guild_id)
            await ctx.respond(BUG_MESSAGE, ephemeral=True)
            return

        guild_name = ctx.guild.name if ctx.guild is not None else str(guild_id)
        await ctx.respond(format_log_channels(guild_name, config))

    @channels.command(name="set", description="Send a category of logs to a channel, or unset it.")
    async def set_channel(
        self,
        ctx: discord.ApplicationContext,
        category: Option(str, "Which logs to route.", choices=LOG_CATEGORY_CHOICES),  # type: ignore
        channel: Option(  # type: ignore
            discord.TextChannel, "Destination channel. Leave empty to unset.", required=False, default=None
        ),
    ):
        if not await self._ensure_guild_context(ctx):
            return

        log_category = LogCategory.from_display_name(category)
        guild_id = GuildID(ctx.guild_id)
        channel_id = ChannelID(channel.id) if channel is not None else None

        try:
            await self.context.store.set(guild_id, log_category, channel_id)
        except aiosqlite.Error:
            logger.exception(
                "[LOG CHANNELS CMDS] Failed to set %s for guild %s", log_category.display_name, guild_id
            )
            await ctx.respond(BUG_MESSAGE, ephemeral=True)
            return

        if channel_id is None:
            await ctx.respond(f"Unset {log_category.display_name}")
        else:
            await ctx.respond(f"{log_category.display_name} will now be sent to {channel_id.mention}")


def setup(discord_bot_instance, context: BotContext):
    """Register the LogChannelsCog with the bot."""
    discord_bot_instance.add_cog(LogChannelsCog(discord_bot_instance, context))
