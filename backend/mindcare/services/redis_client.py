# mindcare/services/redis_client.py
import json
import logging
import os
from typing import Optional

import redis

logger = logging.getLogger(__name__)

# Events are disabled when REDIS_URL is not configured; clients fall back to polling.
REDIS_URL = os.getenv("REDIS_URL")
EVENTS_CHANNEL = "mindcare:events"

r = redis.Redis.from_url(REDIS_URL, decode_responses=True) if REDIS_URL else None


def publish_event(event: str, payload: Optional[dict] = None) -> bool:
    """Publish a change event such as ``appointment.confirmed``.

    Best-effort: failures are logged and reported as False, never raised.
    """
    if r is None:
        return False
    message = json.dumps({"event": event, **(payload or {})})
    try:
        r.publish(EVENTS_CHANNEL, message)
        return True
    except redis.RedisError as e:
        logger.warning(f"⚠️ Failed to publish {event}: {e}")
        return False
