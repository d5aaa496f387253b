# mindcare/endpoints/ws_updates.py
import asyncio
import json
import logging

import redis.asyncio as aioredis
from fastapi import WebSocket, WebSocketDisconnect

from mindcare.services.redis_client import EVENTS_CHANNEL, REDIS_URL

logger = logging.getLogger(__name__)


async def _forward_events(websocket: WebSocket, pubsub):
    while True:
        message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
        if message:
            await websocket.send_text(message["data"])
        await asyncio.sleep(0.1)


async def _wait_for_disconnect(websocket: WebSocket):
    # Client frames are ignored; reading is what surfaces the disconnect
    while True:
        await websocket.receive_text()


async def ws_updates(websocket: WebSocket):
    """Forward appointment/dashboard change events to one browser.

    Without Redis there is nothing to forward; the client is told to keep
    polling and the socket is closed.
    """
    await websocket.accept()
    if not REDIS_URL:
        await websocket.send_text(json.dumps({"event": "polling", "reason": "events disabled"}))
        await websocket.close()
        return

    client = aioredis.from_url(REDIS_URL, decode_responses=True)
    pubsub = client.pubsub()
    await pubsub.subscribe(EVENTS_CHANNEL)
    logger.info(f"✅ Client {id(websocket)} subscribed to {EVENTS_CHANNEL}")

    tasks = {
        asyncio.create_task(_forward_events(websocket, pubsub)),
        asyncio.create_task(_wait_for_disconnect(websocket)),
    }
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            error = task.exception()
            if isinstance(error, WebSocketDisconnect):
                logger.info(f"🔌 Client {id(websocket)} disconnected")
            elif error is not None:
                raise error
    finally:
        for task in tasks:
            task.cancel()
        await pubsub.unsubscribe(EVENTS_CHANNEL)
        await pubsub.aclose()
        await client.aclose()
