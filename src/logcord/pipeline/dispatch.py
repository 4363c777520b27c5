"""Pipeline entry point invoked once per gateway event."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import aiosqlite

from logcord.datatypes.event_datatypes import GatewayEvent
from logcord.pipeline.classifier import classify
from logcord.pipeline.errors import AttachmentFetchFailed, DeliveryFailed, NoDestinationConfigured
from logcord.pipeline.router import DeliveryRouter
from logcord.util.logger import get_logger

logger = get_logger("pipeline")


async def handle_event(event: GatewayEvent, router: DeliveryRouter, *, now: Optional[datetime] = None) -> bool:
    """Classify ``event`` and deliver its notification.

    Failures stay local to this invocation: they are logged and swallowed so
    one broken destination never affects other in-flight events.

    Returns:
        True when the primary message and every follow-up were sent.
    """
    draft = classify(event, now=now)
    if draft is None:
        return False

    try:
        await router.deliver(draft)
    except NoDestinationConfigured as exc:
        logger.warning("[PIPELINE] %s; notification dropped", exc)
        return False
    except AttachmentFetchFailed as exc:
        logger.error("[PIPELINE] %s; remaining follow-ups abandoned", exc)
        return False
    except DeliveryFailed as exc:
        logger.error("[PIPELINE] %s", exc)
        return False
    except aiosqlite.Error:
        logger.exception("[PIPELINE] Log channel lookup failed for guild %s", draft.guild_id)
        return False

    return True
