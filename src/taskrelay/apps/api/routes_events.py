from __future__ import annotations

import asyncio
import json
import logging
from contextlib import suppress

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from taskrelay.core.events.schemas import OutboundEvent

from .deps import get_router

router = APIRouter()
logger = logging.getLogger("taskrelay.api.events")


async def _pump(websocket: WebSocket, queue: asyncio.Queue[dict]) -> None:
    while True:
        message = await queue.get()
        await websocket.send_json(message)


async def _settle(task: asyncio.Task) -> None:
    task.cancel()
    with suppress(asyncio.CancelledError):
        try:
            await task
        except Exception as exc:
            logger.warning("Event socket task ended with %s", exc)


@router.websocket("/events")
async def events(websocket: WebSocket) -> None:
    message_router = get_router()
    await websocket.accept()
    queue: asyncio.Queue[dict] = asyncio.Queue()

    def listener(event: OutboundEvent) -> None:
        queue.put_nowait(event.to_message())

    message_router.subscribe(listener)
    sender = asyncio.create_task(_pump(websocket, queue))
    # Frames dispatch concurrently; a pending parse_text must not delay stop.
    pending: set[asyncio.Task] = set()
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Dropping non-JSON frame from surface")
                continue
            if isinstance(message, dict):
                task = asyncio.create_task(message_router.dispatch(message))
                pending.add(task)
                task.add_done_callback(pending.discard)
    except WebSocketDisconnect:
        pass
    finally:
        message_router.unsubscribe(listener)
        for task in list(pending):
            await _settle(task)
        await _settle(sender)
