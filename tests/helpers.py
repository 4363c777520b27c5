"""Builders for snapshots, fake channels and fake fetchers shared by the tests."""

import io
import itertools
from datetime import datetime, timezone
from types import SimpleNamespace

import discord

from logcord.datatypes.discord_datatypes import ChannelID, GuildID, MessageID, UserID
from logcord.datatypes.event_datatypes import AttachmentSnapshot, AuthorSnapshot, MemberSnapshot, MessageSnapshot
from logcord.pipeline.errors import AttachmentFetchFailed

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
NOW_TS = 1704067200
CREATED_AT = datetime(2020, 6, 1, tzinfo=timezone.utc)
JOINED_AT = datetime(2023, 3, 15, tzinfo=timezone.utc)

GUILD = GuildID(1000)
CHANNEL = ChannelID(2000)


def make_author(**overrides) -> AuthorSnapshot:
    values = dict(
        id=UserID(42),
        username="alice",
        avatar_url="https://cdn.example/avatars/42.png",
        default_avatar_url="https://cdn.example/embed/avatars/0.png",
        created_at=CREATED_AT,
        bot=False,
        global_name=None,
        nickname=None,
    )
    values.update(overrides)
    return AuthorSnapshot(**values)


def make_attachment(url: str) -> AttachmentSnapshot:
    return AttachmentSnapshot(url=url, filename=url.rsplit("/", 1)[-1])


def make_message(content: str = "hello", attachments=(), **overrides) -> MessageSnapshot:
    values = dict(
        id=MessageID(3000),
        guild_id=GUILD,
        channel_id=CHANNEL,
        author=make_author(),
        content=content,
        attachments=tuple(make_attachment(url) for url in attachments),
        jump_url="https://discord.com/channels/1000/2000/3000",
    )
    values.update(overrides)
    return MessageSnapshot(**values)


def make_member(joined_at=JOINED_AT, **author_overrides) -> MemberSnapshot:
    return MemberSnapshot(guild_id=GUILD, user=make_author(**author_overrides), joined_at=joined_at)


def http_error(status: int = 403, reason: str = "Forbidden") -> discord.HTTPException:
    return discord.HTTPException(SimpleNamespace(status=status, reason=reason), "rejected")


class FakeChannel(discord.abc.Messageable):
    """Records every ``send`` call and returns fake messages with increasing ids."""

    def __init__(self, channel_id: int, fail_on_call: int | None = None):
        self.id = channel_id
        self.sent: list[dict] = []
        self._ids = itertools.count(1)
        self._fail_on_call = fail_on_call

    async def send(self, **kwargs):
        call_number = len(self.sent) + 1
        if self._fail_on_call == call_number:
            raise http_error()
        self.sent.append(kwargs)
        return SimpleNamespace(id=next(self._ids), channel=self)


class FakeBot:
    def __init__(self, *channels, fetch_error: Exception | None = None):
        self.channels = {channel.id: channel for channel in channels}
        self.fetched: list[int] = []
        self._fetch_error = fetch_error

    def get_channel(self, channel_id: int):
        return self.channels.get(channel_id)

    async def fetch_channel(self, channel_id: int):
        self.fetched.append(channel_id)
        if self._fetch_error is not None:
            raise self._fetch_error
        raise discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown Channel")


class FakeFetcher:
    """Serves a few bytes for every URL except the ones listed in ``failing``."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.requested: list[str] = []

    async def fetch(self, url: str, filename=None) -> discord.File:
        self.requested.append(url)
        if url in self.failing:
            raise AttachmentFetchFailed(url, "HTTP 404")
        return discord.File(io.BytesIO(b"bytes"), filename=filename or "file.bin")


class FakeStore:
    """In-memory stand-in for LogChannelsStore.get/set."""

    def __init__(self, mapping=None):
        self.mapping = dict(mapping or {})

    async def get(self, guild_id, category):
        return self.mapping.get((guild_id, category))

    async def set(self, guild_id, category, channel_id):
        self.mapping[(guild_id, category)] = channel_id
