"""Member listener Cog for Logcord: joins, departures and profile updates."""

import discord
from discord.ext import commands

from logcord.bot.bot_context import BotContext
from logcord.datatypes.discord_datatypes import GuildID
from logcord.datatypes.event_datatypes import (
    AuthorSnapshot,
    MemberJoined,
    MemberLeft,
    MemberSnapshot,
    MemberUpdated,
)
from logcord.pipeline.dispatch import handle_event
from logcord.util.logger import get_logger

logger = get_logger("member_listener_cog")


class MemberListenerCog(commands.Cog):
    """Cog forwarding member lifecycle events to the logging pipeline."""

    def __init__(self, discord_bot_instance, context: BotContext):
        self.bot = discord_bot_instance
        self.context = context
        logger.info("Member listener cog loaded")

    @commands.Cog.listener(name="on_member_join")
    async def on_member_join(self, member: discord.Member):
        await handle_event(MemberJoined(member=MemberSnapshot.from_member(member)), self.context.router)

    @commands.Cog.listener(name="on_member_remove")
    async def on_member_remove(self, member: discord.Member):
        event = MemberLeft(
            guild_id=GuildID(member.guild.id),
            user=AuthorSnapshot.from_user(member),
            member=MemberSnapshot.from_member(member),
        )
        await handle_event(event, self.context.router)

    @commands.Cog.listener(name="on_member_update")
    async def on_member_update(self, before: discord.Member, after: discord.Member):
        event = MemberUpdated(
            guild_id=GuildID(after.guild.id),
            before=MemberSnapshot.from_member(before),
            after=MemberSnapshot.from_member(after),
        )
        await handle_event(event, self.context.router)


def setup(discord_bot_instance, context: BotContext):
    """Register the MemberListenerCog with the bot."""
    discord_bot_instance.add_cog(MemberListenerCog(discord_bot_instance, context))
