"""
Logcord
=======

A Discord bot that logs message edits and deletions and member joins and
departures to per-guild log channels chosen with ``/channels set``.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. LOGCORD_HOME environment variable, if set.
    2. If running in a frozen/compiled context, the executable's directory.
    3. Otherwise the repository root (three levels above this file).
    """
    if env_home := os.getenv("LOGCORD_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()

import asyncio
import aiosqlite
import discord
from dotenv import load_dotenv

from logcord.bot.bot_context import BotContext
from logcord.configuration.app_configuration import AppConfig
from logcord.database.db_connection import db_connection, path_from_database_url
from logcord.database.db_schema import SchemaManager
from logcord.settings.log_channels_store import log_channels_store
from logcord.util.logger import get_logger, handle_exception


logger = get_logger("main")


class StartupError(Exception):
    """Required runtime configuration is missing or invalid."""


@dataclass(frozen=True, slots=True)
class Environment:
    token: str
    database_url: str
    debug_guild_id: Optional[int] = None


def load_environment(debug: bool) -> Environment:
    """Load ``.env`` and read the runtime settings the bot cannot start without.

    Parameters
    ----------
    debug:
        When True, ``DEBUG_GUILD`` is required so commands can be registered
        to that guild instead of globally.

    Raises
    ------
    StartupError
        If a required variable is missing or ``DEBUG_GUILD`` is not an id.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")

    token = os.getenv("DISCORD_API_TOKEN")
    if not token:
        raise StartupError(
            "Discord API token not present in environment. Double-check that DISCORD_API_TOKEN is set and restart."
        )

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise StartupError("'DATABASE_URL' environment variable not set.")

    debug_guild_id = None
    if debug:
        raw_guild = os.getenv("DEBUG_GUILD")
        if not raw_guild:
            raise StartupError("Bot started in debug mode, but DEBUG_GUILD not set.")
        try:
            debug_guild_id = int(raw_guild.strip())
        except ValueError:
            raise StartupError(f"DEBUG_GUILD exists, but value was not a valid ID: {raw_guild}.") from None

    return Environment(token=token, database_url=database_url, debug_guild_id=debug_guild_id)


def build_intents() -> discord.Intents:
    """Intents for guild, member and message events, including message content."""
    intents = discord.Intents.default()
    intents.guilds = True
    intents.members = True
    intents.messages = True
    intents.message_content = True
    return intents


def create_bot(config: AppConfig, environment: Environment) -> discord.Bot:
    """Instantiate the bot; in debug mode commands only sync to the debug guild."""
    debug_guilds = [environment.debug_guild_id] if environment.debug_guild_id is not None else None
    return discord.Bot(
        intents=build_intents(),
        max_messages=config.message_cache_size,
        debug_guilds=debug_guilds,
    )


def load_cogs(discord_bot_instance: discord.Bot, context: BotContext) -> None:
    """Register all cogs with the bot."""
    from logcord.bot.cogs import events_listener, log_channels_cmds, member_listener, message_listener

    events_listener.setup(discord_bot_instance, context)
    message_listener.setup(discord_bot_instance, context)
    member_listener.setup(discord_bot_instance, context)
    log_channels_cmds.setup(discord_bot_instance, context)

    logger.info("All cogs loaded successfully.")


async def initialize_database(database_url: str) -> None:
    await db_connection.open(path_from_database_url(database_url))
    await SchemaManager.initialize_schema(db_connection.connection)


async def shutdown_runtime(bot: discord.Bot | None, context: BotContext | None) -> None:
    """Close the bot, the attachment HTTP session and the database connection."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception as exc:
            logger.exception("Error while closing the Discord client: %s", exc)

    if context is not None:
        await context.close()

    await db_connection.close()
    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap configuration, database and bot, returning an exit code."""
    config = AppConfig(BASE_DIR / "config" / "app_config.yml")

    try:
        environment = load_environment(config.debug)
    except StartupError as exc:
        logger.critical("%s", exc)
        return 1

    try:
        logger.info("Initializing database...")
        await initialize_database(environment.database_url)
    except (ValueError, OSError, aiosqlite.Error) as exc:
        logger.critical("Failed to initialize database: %s", exc)
        await db_connection.close()
        return 1

    bot = create_bot(config, environment)
    context = BotContext.create(bot, log_channels_store, config)
    load_cogs(bot, context)

    exit_code = 0
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(environment.token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    except discord.LoginFailure as exc:
        logger.critical("Discord rejected the API token: %s", exc)
        exit_code = 1
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot, context)

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    sys.excepthook = handle_exception
    logger.info("Starting Logcord…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
