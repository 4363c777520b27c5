"""
Shared runtime context.

The bot, the config store, the attachment fetcher and the delivery router are
created once at startup and handed to the cogs explicitly instead of being
looked up through module globals.
"""

from __future__ import annotations

from dataclasses import dataclass

import discord

from logcord.configuration.app_configuration import AppConfig
from logcord.pipeline.attachments import HttpAttachmentFetcher
from logcord.pipeline.router import DeliveryRouter
from logcord.settings.log_channels_store import LogChannelsStore


@dataclass(slots=True)
class BotContext:
    bot: discord.Bot
    store: LogChannelsStore
    fetcher: HttpAttachmentFetcher
    router: DeliveryRouter
    config: AppConfig

    @classmethod
    def create(cls, bot: discord.Bot, store: LogChannelsStore, config: AppConfig) -> "BotContext":
        fetcher = HttpAttachmentFetcher(total_timeout=config.attachment_fetch_timeout)
        return cls(
            bot=bot,
            store=store,
            fetcher=fetcher,
            router=DeliveryRouter(bot, store, fetcher),
            config=config,
        )

    async def close(self) -> None:
        await self.fetcher.close()
