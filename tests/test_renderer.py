import discord
import pytest

from helpers import GUILD, FakeFetcher, make_author
from logcord.datatypes.log_datatypes import Accent, EmbedField, FollowUpDraft, LogCategory, NotificationDraft
from logcord.pipeline.errors import AttachmentFetchFailed
from logcord.pipeline.renderer import avatar_url, display_name, render_followup, render_primary


def make_draft(**overrides):
    values = dict(
        category=LogCategory.CHAT,
        guild_id=GUILD,
        author=make_author(),
        accent=Accent.DELETE,
        description="A message was deleted.",
        fields=[EmbedField("Content", "hello"), EmbedField("Timestamp", "<t:1>", inline=True)],
    )
    values.update(overrides)
    return NotificationDraft(**values)


@pytest.mark.parametrize(
    "overrides, expected",
    [
        ({}, "@alice"),
        ({"global_name": "Alice"}, "@alice (Alice)"),
        ({"nickname": "Al", "global_name": "Alice"}, "@alice (Al)"),
        ({"nickname": "Al"}, "@alice (Al)"),
    ],
)
def test_display_name(overrides, expected):
    assert display_name(make_author(**overrides)) == expected


def test_avatar_falls_back_to_default():
    author = make_author(avatar_url="")
    assert avatar_url(author) == "https://cdn.example/embed/avatars/0.png"


def test_primary_embed_carries_author_fields_and_colour():
    payload = render_primary(make_draft())
    embed = payload.embed

    assert embed.description == "A message was deleted."
    assert embed.colour == discord.Colour.red()
    assert embed.author.name == "@alice"
    assert embed.author.icon_url == "https://cdn.example/avatars/42.png"
    assert [(f.name, f.value, f.inline) for f in embed.fields] == [
        ("Content", "hello", False),
        ("Timestamp", "<t:1>", True),
    ]
    assert payload.files == []
    assert set(payload.as_send_kwargs()) == {"embed"}


@pytest.mark.parametrize(
    "accent, colour",
    [
        (Accent.DELETE, discord.Colour.red()),
        (Accent.EDIT, discord.Colour(0x8882C4)),
        (Accent.JOIN, discord.Colour.dark_green()),
        (Accent.LEAVE, discord.Colour.dark_red()),
    ],
)
def test_accent_colours(accent, colour):
    assert render_primary(make_draft(accent=accent)).embed.colour == colour


@pytest.mark.asyncio
async def test_followup_fetches_every_attachment_and_suppresses_mentions():
    fetcher = FakeFetcher()
    followup = FollowUpDraft(content="Added 2 attachments:", attachment_urls=("https://cdn/a.png", "https://cdn/b.txt?x=1"))

    payload = await render_followup(followup, fetcher)

    assert payload.content == "Added 2 attachments:"
    assert [f.filename for f in payload.files] == ["a.png", "b.txt"]
    assert fetcher.requested == ["https://cdn/a.png", "https://cdn/b.txt?x=1"]
    assert payload.allowed_mentions.users is False
    reference = object()
    assert payload.as_send_kwargs(reference=reference)["reference"] is reference


@pytest.mark.asyncio
async def test_single_fetch_failure_aborts_the_followup():
    fetcher = FakeFetcher(failing={"https://cdn/b.png"})
    followup = FollowUpDraft(attachment_urls=("https://cdn/a.png", "https://cdn/b.png", "https://cdn/c.png"))

    with pytest.raises(AttachmentFetchFailed) as exc_info:
        await render_followup(followup, fetcher)

    assert exc_info.value.url == "https://cdn/b.png"
    assert fetcher.requested == ["https://cdn/a.png", "https://cdn/b.png"]
