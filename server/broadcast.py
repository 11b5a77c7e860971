"""
Server-sent events (SSE) broadcasting module.

This module handles real-time updates via Server-Sent Events, managing
subscriber connections and notifying all clients whenever the render state
is recomputed.

Date: 2026-10-18
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Dict, Set

logger = logging.getLogger(__name__)

# Global set of SSE subscribers (asyncio.Queue instances)
subscribers: Set[asyncio.Queue] = set()


async def event_generator(queue: asyncio.Queue):
    """Generate SSE events from the queue.

    Args:
        queue: Async queue to read events from.

    Yields:
        SSE formatted event strings.
    """
    try:
        while True:
            data = await queue.get()
            yield f"data: {json.dumps(data)}\n\n"
    except asyncio.CancelledError:
        pass
    finally:
        subscribers.discard(queue)


def build_update_payload(summary: Dict[str, Any]) -> Dict[str, Any]:
    payload = {
        "type": "render_state_update",
        "time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    }
    payload.update(summary)
    return payload


async def broadcast(payload: Dict[str, Any]):
    """Push a payload to every SSE subscriber."""
    for queue in list(subscribers):
        await queue.put(payload)
    logger.debug("Broadcast %s to %d subscribers", payload.get("type"), len(subscribers))


async def notify_render_state_updated(summary: Dict[str, Any]):
    """Broadcast a render state update notification.

    Args:
        summary: Small summary of the new state (post and visible counts,
            display mode). Clients fetch the full state themselves.
    """
    await broadcast(build_update_payload(summary))
