"""
Notification renderer.

Turns a ``NotificationDraft`` into message payloads: one primary embed and, per
follow-up, a message carrying the refetched files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import discord

from logcord.datatypes.event_datatypes import AuthorSnapshot
from logcord.datatypes.log_datatypes import FollowUpDraft, NotificationDraft
from logcord.pipeline.attachments import AttachmentFetcher, filename_from_url


@dataclass(slots=True)
class MessagePayload:
    """Keyword arguments for one ``Messageable.send`` call."""

    content: Optional[str] = None
    embed: Optional[discord.Embed] = None
    files: List[discord.File] = field(default_factory=list)
    allowed_mentions: Optional[discord.AllowedMentions] = None

    def as_send_kwargs(self, reference: Optional[discord.Message] = None) -> dict:
        kwargs: dict = {}
        if self.content is not None:
            kwargs["content"] = self.content
        if self.embed is not None:
            kwargs["embed"] = self.embed
        if self.files:
            kwargs["files"] = self.files
        if self.allowed_mentions is not None:
            kwargs["allowed_mentions"] = self.allowed_mentions
        if reference is not None:
            kwargs["reference"] = reference
        return kwargs


def display_name(author: AuthorSnapshot) -> str:
    """``@username (nickname)``, falling back to the global name, then to ``@username``."""
    name = f"@{author.username}"
    alias = author.nickname or author.global_name
    return f"{name} ({alias})" if alias else name


def avatar_url(author: AuthorSnapshot) -> str:
    return author.avatar_url or author.default_avatar_url


def render_primary(draft: NotificationDraft) -> MessagePayload:
    embed = discord.Embed(description=draft.description, colour=draft.accent.colour)
    embed.set_author(name=display_name(draft.author), icon_url=avatar_url(draft.author))
    for embed_field in draft.fields:
        embed.add_field(name=embed_field.name, value=embed_field.value, inline=embed_field.inline)
    return MessagePayload(embed=embed)


async def render_followup(followup: FollowUpDraft, fetcher: AttachmentFetcher) -> MessagePayload:
    """Fetch every attachment of ``followup`` and build its payload.

    A single failed fetch raises ``AttachmentFetchFailed`` and nothing is
    returned for this follow-up; files already downloaded are closed.
    """
    files: List[discord.File] = []
    try:
        for url in followup.attachment_urls:
            files.append(await fetcher.fetch(url, filename_from_url(url)))
    except BaseException:
        for fetched in files:
            fetched.close()
        raise

    return MessagePayload(
        content=followup.content,
        files=files,
        allowed_mentions=discord.AllowedMentions.none(),
    )
