"""Listener cogs turn py-cord objects into pipeline events."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from logcord.bot.cogs import member_listener, message_listener
from logcord.datatypes.discord_datatypes import ChannelID, GuildID, MessageID
from logcord.datatypes.event_datatypes import MemberJoined, MemberLeft, MemberUpdated, MessageDeleted, MessageUpdated

CREATED = datetime(2020, 1, 1, tzinfo=timezone.utc)
JOINED = datetime(2022, 1, 1, tzinfo=timezone.utc)


def fake_user(**overrides):
    values = dict(
        id=42,
        name="alice",
        global_name="Alice",
        nick=None,
        bot=False,
        created_at=CREATED,
        avatar=None,
        default_avatar=SimpleNamespace(url="https://cdn/default.png"),
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def fake_member(**overrides):
    member = fake_user(**overrides)
    member.guild = SimpleNamespace(id=1000)
    member.joined_at = overrides.get("joined_at", JOINED)
    return member


def fake_message(content="hello", attachments=()):
    return SimpleNamespace(
        id=3000,
        guild=SimpleNamespace(id=1000),
        channel=SimpleNamespace(id=2000),
        author=fake_user(),
        content=content,
        attachments=[SimpleNamespace(url=url, filename=url.rsplit("/", 1)[-1]) for url in attachments],
        jump_url="https://discord.com/channels/1000/2000/3000",
    )


@pytest.fixture
def captured(monkeypatch):
    events = []

    async def fake_handle_event(event, router, **kwargs):
        events.append((event, router))
        return True

    monkeypatch.setattr(message_listener, "handle_event", fake_handle_event)
    monkeypatch.setattr(member_listener, "handle_event", fake_handle_event)
    return events


CONTEXT = SimpleNamespace(router=object())


@pytest.mark.asyncio
async def test_raw_delete_with_cached_message(captured):
    cog = message_listener.MessageListenerCog(SimpleNamespace(), CONTEXT)
    payload = SimpleNamespace(channel_id=2000, message_id=3000, guild_id=1000, cached_message=fake_message("bye"))

    await cog.on_raw_message_delete(payload)

    (event, router), = captured
    assert isinstance(event, MessageDeleted)
    assert event.guild_id == GuildID(1000)
    assert event.cached.content == "bye"
    assert event.cached.author.avatar_url == "https://cdn/default.png"
    assert router is CONTEXT.router


@pytest.mark.asyncio
async def test_raw_delete_cache_miss(captured):
    cog = message_listener.MessageListenerCog(SimpleNamespace(), CONTEXT)
    payload = SimpleNamespace(channel_id=2000, message_id=3000, guild_id=None, cached_message=None)

    await cog.on_raw_message_delete(payload)

    (event, _), = captured
    assert event == MessageDeleted(channel_id=ChannelID(2000), message_id=MessageID(3000), guild_id=None, cached=None)


@pytest.mark.asyncio
async def test_raw_edit_pairs_cached_copy_with_current_message(captured):
    current = fake_message("after", ("https://cdn/a.png",))
    bot = SimpleNamespace(get_message=lambda message_id: current)
    cog = message_listener.MessageListenerCog(bot, CONTEXT)
    payload = SimpleNamespace(channel_id=2000, message_id=3000, guild_id=1000, cached_message=fake_message("before"))

    await cog.on_raw_message_edit(payload)

    (event, _), = captured
    assert isinstance(event, MessageUpdated)
    assert event.before.content == "before"
    assert event.after.content == "after"
    assert event.after.attachment_urls == ("https://cdn/a.png",)


@pytest.mark.asyncio
async def test_member_events(captured):
    cog = member_listener.MemberListenerCog(SimpleNamespace(), CONTEXT)

    await cog.on_member_join(fake_member())
    await cog.on_member_remove(fake_member(nick="Al"))
    await cog.on_member_update(fake_member(), fake_member(nick="new"))

    kinds = [type(event) for event, _ in captured]
    assert kinds == [MemberJoined, MemberLeft, MemberUpdated]
    left = captured[1][0]
    assert left.member.joined_at == JOINED
    assert left.user.nickname == "Al"
