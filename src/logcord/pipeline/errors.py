"""Failures raised while delivering a notification."""

from __future__ import annotations

from typing import Optional

from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.log_datatypes import LogCategory


class PipelineError(Exception):
    """Base class for errors local to one pipeline invocation."""


class DeliveryError(PipelineError):
    """A classified notification could not be delivered."""


class NoDestinationConfigured(DeliveryError):
    """No channel is set for ``category`` in ``guild_id``."""

    def __init__(self, category: LogCategory, guild_id: GuildID) -> None:
        self.category = category
        self.guild_id = guild_id
        super().__init__(f"No channel configured for {category.display_name} in guild {guild_id}")


class DeliveryFailed(DeliveryError):
    """The platform rejected a send or the destination channel is unusable."""

    def __init__(self, channel_id: ChannelID, reason: str, original: Optional[BaseException] = None) -> None:
        self.channel_id = channel_id
        self.original = original
        super().__init__(f"Delivery to channel {channel_id} failed: {reason}")


class AttachmentFetchFailed(DeliveryError):
    """Refetching an attachment's bytes for a follow-up failed."""

    def __init__(self, url: str, reason: str, original: Optional[BaseException] = None) -> None:
        self.url = url
        self.original = original
        super().__init__(f"Could not fetch attachment {url}: {reason}")
