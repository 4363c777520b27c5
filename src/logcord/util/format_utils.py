from datetime import datetime, timezone
from typing import Optional

# Discord embed limits
EMBED_FIELD_VALUE_LIMIT = 1024
EMBED_DESCRIPTION_LIMIT = 4096

EMPTY_PLACEHOLDER = "None"


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are assumed UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def discord_timestamp(value: datetime, style: Optional[str] = None) -> str:
    """Render Discord timestamp markup, ``<t:unix>`` or ``<t:unix:style>``.

    Args:
        value: moment to render.
        style: Discord style letter, e.g. ``"R"`` for relative time.

    Returns:
        Markup the Discord client renders in the reader's timezone.
    """
    seconds = int(ensure_utc(value).timestamp())
    if style is None:
        return f"<t:{seconds}>"
    return f"<t:{seconds}:{style}>"


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters, ending with an ellipsis when cut."""
    if len(text) <= limit:
        return text
    return text[: max(limit - 1, 0)] + "…"


def or_placeholder(text: Optional[str]) -> str:
    """Embed fields reject empty values; show ``None`` instead."""
    return text if text else EMPTY_PLACEHOLDER
