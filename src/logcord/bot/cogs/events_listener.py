"""Event listener Cog for Logcord.

This cog handles bot lifecycle events (on_ready) and command error handling.
Loggable gateway events are handled by the message and member listener cogs.
"""

import discord
from discord.ext import commands

from logcord.bot.bot_context import BotContext
from logcord.util.logger import get_logger

logger = get_logger("events_listener_cog")


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle and command error handlers."""

    def __init__(self, discord_bot_instance, context: BotContext):
        self.bot = discord_bot_instance
        self.context = context
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        if self.bot.user:
            logger.info(f"Bot connected as {self.bot.user} (ID: {self.bot.user.id})")
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

        debug_guilds = getattr(self.bot, "debug_guilds", None)
        if debug_guilds:
            logger.info("Debug mode: slash commands registered to guild(s) %s only", debug_guilds)
        else:
            logger.info("Slash commands registered globally")

        await self.bot.change_presence(
            status=discord.Status.online,
            activity=discord.Activity(type=discord.ActivityType.watching, name="your server's logs"),
        )

    @commands.Cog.listener(name="on_application_command_error")
    async def on_application_command_error(self, application_context: discord.ApplicationContext, error: Exception):
        """Log command errors and tell the invoking user something went wrong."""
        if isinstance(error, commands.CommandNotFound):
            return

        command_name = getattr(application_context.command, "name", "<unknown>")
        logger.error(f"Error in command '{command_name}': {error}", exc_info=error)

        error_message = "A :bug: showed up while running this command."
        try:
            await application_context.respond(error_message, ephemeral=True)
        except discord.InteractionResponded:
            await application_context.followup.send(error_message, ephemeral=True)


def setup(discord_bot_instance, context: BotContext):
    """Register the EventsListenerCog with the bot."""
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance, context))
