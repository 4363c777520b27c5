"""
Delivery router.

Resolves a draft's category to the guild's configured channel, sends the
primary message, then sends each follow-up as a reply to it, in order.
Nothing is retried: the first failure propagates and abandons the remaining
follow-ups.
"""

from __future__ import annotations

from typing import Optional, Protocol

import discord

from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.log_datatypes import LogCategory, NotificationDraft
from logcord.pipeline.attachments import AttachmentFetcher
from logcord.pipeline.errors import DeliveryFailed, NoDestinationConfigured
from logcord.pipeline.renderer import render_followup, render_primary
from logcord.util.logger import get_logger

logger = get_logger("delivery_router")


class DestinationLookup(Protocol):
    async def get(self, guild_id: GuildID, category: LogCategory) -> Optional[ChannelID]: ...


class DeliveryRouter:
    """Sends rendered notifications to their per-guild destination channels."""

    def __init__(self, bot: discord.Client, store: DestinationLookup, fetcher: AttachmentFetcher) -> None:
        self.bot = bot
        self.store = store
        self.fetcher = fetcher

    async def resolve_destination(self, draft: NotificationDraft) -> ChannelID:
        channel_id = await self.store.get(draft.guild_id, draft.category)
        if channel_id is None:
            raise NoDestinationConfigured(draft.category, draft.guild_id)
        return channel_id

    async def _resolve_channel(self, channel_id: ChannelID) -> discord.abc.Messageable:
        channel = self.bot.get_channel(channel_id.to_int())
        if channel is None:
            try:
                channel = await self.bot.fetch_channel(channel_id.to_int())
            except (discord.HTTPException, discord.InvalidData) as exc:
                raise DeliveryFailed(channel_id, "channel is unavailable", exc) from exc
        # categories and forums resolve fine but cannot take messages
        if not isinstance(channel, discord.abc.Messageable):
            raise DeliveryFailed(channel_id, f"{type(channel).__name__} cannot receive messages")
        return channel

    async def deliver(self, draft: NotificationDraft) -> discord.Message:
        """Send ``draft`` and its follow-ups; return the primary message.

        Raises:
            NoDestinationConfigured: the category has no channel in this guild.
            DeliveryFailed: the channel is gone or a send was rejected.
            AttachmentFetchFailed: a follow-up's files could not be refetched.
        """
        channel_id = await self.resolve_destination(draft)
        channel = await self._resolve_channel(channel_id)

        try:
            primary = await channel.send(**render_primary(draft).as_send_kwargs())
        except discord.HTTPException as exc:
            raise DeliveryFailed(channel_id, f"primary message rejected ({exc.status})", exc) from exc

        for index, followup in enumerate(draft.followups, start=1):
            payload = await render_followup(followup, self.fetcher)
            try:
                await channel.send(**payload.as_send_kwargs(reference=primary))
            except discord.HTTPException as exc:
                raise DeliveryFailed(
                    channel_id, f"follow-up {index}/{len(draft.followups)} rejected ({exc.status})", exc
                ) from exc

        logger.debug(
            "[ROUTER] Delivered %s notification for guild %s to %s (%d follow-ups)",
            draft.category.display_name,
            draft.guild_id,
            channel_id,
            len(draft.followups),
        )
        return primary
