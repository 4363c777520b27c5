"""
Event classifier.

Decides whether a gateway event is worth logging and, if so, describes the
notification as a ``NotificationDraft``. The classifier is synchronous and
does no I/O: attachment bytes are only fetched later, when the router renders
follow-ups.

Decision table (first match per event kind):

    MessageDeleted  -> Chat,   unless uncached, bot-authored or outside a guild
    MessageUpdated  -> Chat,   unless either snapshot is missing, bot-authored,
                               outside a guild, or nothing observable changed
    MemberJoined    -> Member, unless the join time is unknown
    MemberLeft      -> Member, unless the member snapshot or join time is missing
    MemberUpdated   -> never logged
    UnhandledEvent  -> never logged
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, assert_never

import discord

from logcord.datatypes.event_datatypes import (
    AuthorSnapshot,
    GatewayEvent,
    MemberJoined,
    MemberLeft,
    MemberUpdated,
    MessageDeleted,
    MessageUpdated,
    UnhandledEvent,
)
from logcord.datatypes.log_datatypes import (
    Accent,
    EmbedField,
    FollowUpDraft,
    LogCategory,
    NotificationDraft,
)
from logcord.pipeline.differencer import asymmetric_diff, count_noun
from logcord.util.format_utils import (
    EMBED_DESCRIPTION_LIMIT,
    EMBED_FIELD_VALUE_LIMIT,
    discord_timestamp,
    or_placeholder,
    truncate,
)
from logcord.util.logger import get_logger

logger = get_logger("classifier")

UNCHANGED_CONTENT_NOTE = (
    "Message content hasn't changed. Check followup message(s) for attachment changes."
)


def _field(name: str, value: str, inline: bool = False) -> EmbedField:
    return EmbedField(name=name, value=truncate(value, EMBED_FIELD_VALUE_LIMIT), inline=inline)


def _who(author: AuthorSnapshot) -> str:
    return f"{author.id.mention} (**{author.username}**)"


def classify(event: GatewayEvent, *, now: Optional[datetime] = None) -> Optional[NotificationDraft]:
    """Turn ``event`` into a notification draft, or None when it is not loggable.

    Args:
        event: snapshot-based gateway event built by the listener cog.
        now: processing time used for "Timestamp"/"Left At" fields; defaults
            to the current UTC time.

    Returns:
        The draft, carrying its log category and guild id, or None.
    """
    now = now or discord.utils.utcnow()

    match event:
        case MessageDeleted():
            return _classify_message_deleted(event, now)
        case MessageUpdated():
            return _classify_message_updated(event, now)
        case MemberJoined():
            return _classify_member_joined(event)
        case MemberLeft():
            return _classify_member_left(event, now)
        case MemberUpdated():
            # Profile changes are recognised but intentionally not logged.
            return None
        case UnhandledEvent():
            return None
        case _:
            assert_never(event)


def _classify_message_deleted(event: MessageDeleted, now: datetime) -> Optional[NotificationDraft]:
    message = event.cached
    if message is None:
        logger.debug("[CLASSIFIER] Deleted message %s was not cached; skipping", event.message_id)
        return None
    if message.author.bot:
        return None

    guild_id = event.guild_id or message.guild_id
    if guild_id is None:
        return None

    fields = [
        _field("Content", or_placeholder(message.content)),
        _field("Timestamp", discord_timestamp(now), inline=True),
    ]
    followups = []
    if message.attachments:
        fields.append(_field("No. Attachments", str(len(message.attachments)), inline=True))
        followups.append(FollowUpDraft(content=None, attachment_urls=message.attachment_urls))

    return NotificationDraft(
        category=LogCategory.CHAT,
        guild_id=guild_id,
        author=message.author,
        accent=Accent.DELETE,
        description=(
            f"A message by {_who(message.author)} was deleted in {message.channel_id.mention}."
        ),
        fields=fields,
        followups=followups,
    )


def _classify_message_updated(event: MessageUpdated, now: datetime) -> Optional[NotificationDraft]:
    old, new = event.before, event.after
    if old is None or new is None:
        logger.debug("[CLASSIFIER] Edit of message %s has no cached snapshot; skipping", event.message_id)
        return None
    if old.author.bot:
        return None

    guild_id = event.guild_id or old.guild_id
    if guild_id is None:
        return None

    content_changed = old.content != new.content
    difference = asymmetric_diff(old.attachment_urls, new.attachment_urls)

    if not content_changed and difference.is_empty:
        # embed unfurls and pin changes also arrive as edits
        return None

    description = (
        f"{_who(new.author)} updated their message in {new.channel_id.mention}.\n"
        f"[Jump to message]({new.jump_url})"
    )
    fields = []
    if content_changed:
        fields.append(_field("New", or_placeholder(new.content)))
        fields.append(_field("Previous", or_placeholder(old.content)))
    else:
        description += f"\n\n{UNCHANGED_CONTENT_NOTE}"

    fields.append(_field("Timestamp", discord_timestamp(now), inline=True))

    followups = []
    if not difference.is_empty:
        fields.append(
            _field(
                "Attachments",
                f"**Removed**: {len(difference.removed)} | **Added**: {len(difference.added)}",
                inline=True,
            )
        )
        if difference.added:
            followups.append(
                FollowUpDraft(
                    content=f"Added {count_noun(len(difference.added), 'attachment')}:",
                    attachment_urls=tuple(sorted(difference.added)),
                )
            )
        if difference.removed:
            followups.append(
                FollowUpDraft(
                    content=f"Removed {count_noun(len(difference.removed), 'attachment')}:",
                    attachment_urls=tuple(sorted(difference.removed)),
                )
            )

    return NotificationDraft(
        category=LogCategory.CHAT,
        guild_id=guild_id,
        author=old.author,
        accent=Accent.EDIT,
        description=truncate(description, EMBED_DESCRIPTION_LIMIT),
        fields=fields,
        followups=followups,
    )


def _classify_member_joined(event: MemberJoined) -> Optional[NotificationDraft]:
    member = event.member
    if member.joined_at is None:
        return None

    user = member.user
    return NotificationDraft(
        category=LogCategory.MEMBER,
        guild_id=member.guild_id,
        author=user,
        accent=Accent.JOIN,
        description=f"{user.id.mention} ({user.username}) joined.",
        fields=[
            _field("Joined At", discord_timestamp(member.joined_at, "R"), inline=True),
            _field("Created At", discord_timestamp(user.created_at, "R"), inline=True),
        ],
    )


def _classify_member_left(event: MemberLeft, now: datetime) -> Optional[NotificationDraft]:
    member = event.member
    if member is None or member.joined_at is None:
        logger.debug("[CLASSIFIER] No member snapshot for departed user %s; skipping", event.user.id)
        return None

    user = event.user
    return NotificationDraft(
        category=LogCategory.MEMBER,
        guild_id=event.guild_id,
        author=user,
        accent=Accent.LEAVE,
        description=f"{user.id.mention} ({user.username}) left.",
        fields=[
            _field("Joined At", discord_timestamp(member.joined_at, "R"), inline=True),
            _field("Created At", discord_timestamp(user.created_at, "R"), inline=True),
            _field("Left At", discord_timestamp(now, "R"), inline=True),
        ],
    )
