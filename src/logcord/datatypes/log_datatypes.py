"""
Log categories, per-guild routing configuration and notification drafts.

Database schema:
- log_channels table with columns: guild_id, member_logs, chat_logs, server_logs
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

import discord

from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.event_datatypes import AuthorSnapshot


class LogCategory(Enum):
    """Destination bucket a notification is routed to."""

    MEMBER = "member"
    CHAT = "chat"
    SERVER = "server"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def column_name(self) -> str:
        """Name of the ``log_channels`` column holding this category's channel."""
        return f"{self.value}_logs"

    @classmethod
    def from_display_name(cls, name: str) -> "LogCategory":
        for category, display in _DISPLAY_NAMES.items():
            if display.lower() == name.strip().lower():
                return category
        raise ValueError(f"Unknown log category: {name!r}")

    def __str__(self) -> str:
        return self.display_name


_DISPLAY_NAMES = {
    LogCategory.MEMBER: "Member Logs",
    LogCategory.CHAT: "Chat Logs",
    LogCategory.SERVER: "Server Logs",
}

LOG_CATEGORY_CHOICES: List[str] = [category.display_name for category in LogCategory]


class Accent(Enum):
    """Embed colour of a notification, one per kind of event."""

    DELETE = "delete"
    EDIT = "edit"
    JOIN = "join"
    LEAVE = "leave"

    @property
    def colour(self) -> discord.Colour:
        if self is Accent.DELETE:
            return discord.Colour.red()
        if self is Accent.EDIT:
            # serenity's FADED_PURPLE
            return discord.Colour(0x8882C4)
        if self is Accent.JOIN:
            return discord.Colour.dark_green()
        return discord.Colour.dark_red()


@dataclass(slots=True)
class GuildLogConfig:
    """One ``log_channels`` row. A missing row behaves like every field unset."""

    guild_id: GuildID
    member_channel: Optional[ChannelID] = None
    chat_channel: Optional[ChannelID] = None
    server_channel: Optional[ChannelID] = None

    @classmethod
    def empty(cls, guild_id: GuildID) -> "GuildLogConfig":
        return cls(guild_id=guild_id)

    def channel_for(self, category: LogCategory) -> Optional[ChannelID]:
        if category is LogCategory.MEMBER:
            return self.member_channel
        if category is LogCategory.CHAT:
            return self.chat_channel
        return self.server_channel


@dataclass(frozen=True, slots=True)
class AttachmentDiff:
    """Attachment URLs added and removed between two versions of a message."""

    added: FrozenSet[str] = frozenset()
    removed: FrozenSet[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed


@dataclass(frozen=True, slots=True)
class EmbedField:
    name: str
    value: str
    inline: bool = False


@dataclass(frozen=True, slots=True)
class FollowUpDraft:
    """A secondary message carrying files, sent as a reply to the primary one."""

    content: Optional[str] = None
    attachment_urls: Tuple[str, ...] = ()


@dataclass(slots=True)
class NotificationDraft:
    """
    A not-yet-rendered notification produced by the classifier.

    Owned by a single pipeline invocation; discarded after delivery or
    failure.
    """

    category: LogCategory
    guild_id: GuildID
    author: AuthorSnapshot
    accent: Accent
    description: str
    fields: List[EmbedField] = field(default_factory=list)
    followups: List[FollowUpDraft] = field(default_factory=list)

    def field_named(self, name: str) -> Optional[EmbedField]:
        return next((f for f in self.fields if f.name == name), None)
