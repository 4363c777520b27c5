"""
Gateway events understood by the logging pipeline.

The listener cog converts py-cord objects into these immutable snapshots so
the classifier works on plain data: it never touches the client cache or the
network, and tests can build events without a live connection.

Every gateway event maps to exactly one of the variants in ``GatewayEvent``.
A snapshot that the client could not recover from its cache (for example a
deleted message that was never cached) is represented as ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union

import discord

from logcord.datatypes.discord_datatypes import ChannelID, GuildID, MessageID, UserID


@dataclass(frozen=True, slots=True)
class AuthorSnapshot:
    id: UserID
    username: str
    avatar_url: str
    default_avatar_url: str
    created_at: datetime
    bot: bool = False
    global_name: Optional[str] = None
    nickname: Optional[str] = None

    @classmethod
    def from_user(cls, user: Union[discord.Member, discord.User]) -> "AuthorSnapshot":
        """Capture the identity fields of a user or member."""
        default_avatar_url = user.default_avatar.url
        avatar = getattr(user, "avatar", None)
        return cls(
            id=UserID(user.id),
            username=user.name,
            avatar_url=avatar.url if avatar is not None else default_avatar_url,
            default_avatar_url=default_avatar_url,
            created_at=user.created_at,
            bot=user.bot,
            global_name=getattr(user, "global_name", None),
            nickname=getattr(user, "nick", None),
        )


@dataclass(frozen=True, slots=True)
class AttachmentSnapshot:
    url: str
    filename: str

    @classmethod
    def from_attachment(cls, attachment: discord.Attachment) -> "AttachmentSnapshot":
        return cls(url=attachment.url, filename=attachment.filename)


@dataclass(frozen=True, slots=True)
class MessageSnapshot:
    id: MessageID
    guild_id: Optional[GuildID]
    channel_id: ChannelID
    author: AuthorSnapshot
    content: str = ""
    attachments: Tuple[AttachmentSnapshot, ...] = ()
    jump_url: str = ""

    @property
    def attachment_urls(self) -> Tuple[str, ...]:
        return tuple(attachment.url for attachment in self.attachments)

    @classmethod
    def from_message(cls, message: discord.Message) -> "MessageSnapshot":
        guild = message.guild
        return cls(
            id=MessageID(message.id),
            guild_id=GuildID(guild.id) if guild is not None else None,
            channel_id=ChannelID(message.channel.id),
            author=AuthorSnapshot.from_user(message.author),
            content=message.content or "",
            attachments=tuple(AttachmentSnapshot.from_attachment(a) for a in message.attachments),
            jump_url=message.jump_url,
        )


@dataclass(frozen=True, slots=True)
class MemberSnapshot:
    guild_id: GuildID
    user: AuthorSnapshot
    joined_at: Optional[datetime] = None

    @classmethod
    def from_member(cls, member: discord.Member) -> "MemberSnapshot":
        return cls(
            guild_id=GuildID(member.guild.id),
            user=AuthorSnapshot.from_user(member),
            joined_at=member.joined_at,
        )


# ---------------------------------------------------------------------------
# Event variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MessageDeleted:
    channel_id: ChannelID
    message_id: MessageID
    guild_id: Optional[GuildID]
    cached: Optional[MessageSnapshot] = None


@dataclass(frozen=True, slots=True)
class MessageUpdated:
    channel_id: ChannelID
    message_id: MessageID
    guild_id: Optional[GuildID]
    before: Optional[MessageSnapshot] = None
    after: Optional[MessageSnapshot] = None


@dataclass(frozen=True, slots=True)
class MemberJoined:
    member: MemberSnapshot


@dataclass(frozen=True, slots=True)
class MemberLeft:
    guild_id: GuildID
    user: AuthorSnapshot
    member: Optional[MemberSnapshot] = None


@dataclass(frozen=True, slots=True)
class MemberUpdated:
    guild_id: GuildID
    before: Optional[MemberSnapshot] = None
    after: Optional[MemberSnapshot] = None


@dataclass(frozen=True, slots=True)
class UnhandledEvent:
    name: str


GatewayEvent = Union[
    MessageDeleted,
    MessageUpdated,
    MemberJoined,
    MemberLeft,
    MemberUpdated,
    UnhandledEvent,
]
