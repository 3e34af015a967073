"""
Core Event Publishing with Retry and Validation.
"""

from __future__ import annotations

import asyncio

import redis.asyncio as redis

from shared.config.settings import settings
from shared.config.logging import get_logger
from .event_types import MAX_EVENT_SIZE
from .event_schema import Event

logger = get_logger(__name__)


def _validate_event_size(event_json: str, event_type: str) -> None:
    """Raise ValueError when the serialized event is larger than MAX_EVENT_SIZE."""
    size = len(event_json.encode("utf-8"))
    if size > MAX_EVENT_SIZE:
        raise ValueError(
            f"Event {event_type} exceeds max size: {size} > {MAX_EVENT_SIZE} bytes"
        )


async def publish_event(
    redis_client: redis.Redis,
    channel: str,
    event: Event,
) -> int:
    """
    Publish an event to a Redis channel.

    Retries up to settings.redis_publish_max_retries times with a linear
    backoff of settings.redis_publish_retry_delay seconds per attempt.

    Returns:
        Number of subscribers that received the message.

    Raises:
        ValueError: If event is too large.
        Exception: The last Redis error once every retry has failed.
    """
    event_json = event.to_json()
    _validate_event_size(event_json, event.type)

    max_retries = max(1, settings.redis_publish_max_retries)
    last_error: Exception | None = None
    for attempt in range(max_retries):
        try:
            return await redis_client.publish(channel, event_json)
        except Exception as e:
            last_error = e
            if attempt < max_retries - 1:
                delay = settings.redis_publish_retry_delay * (attempt + 1)
                logger.warning(
                    "Redis publish failed, retrying",
                    channel=channel,
                    event_type=event.type,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    delay_seconds=round(delay, 2),
                    error=str(e),
                )
                await asyncio.sleep(delay)
            else:
                logger.error(
                    "Redis publish failed after all retries",
                    channel=channel,
                    event_type=event.type,
                    error=str(e),
                )

    raise last_error  # type: ignore[misc]
