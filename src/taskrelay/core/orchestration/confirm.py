from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable
from uuid import uuid4

from taskrelay.core.events.schemas import ConfirmRequestEvent, OutboundEvent

logger = logging.getLogger("taskrelay.confirm")


class ConfirmationBroker:
    """Turns the runtime's human-confirmation request into a broadcast plus a pending answer.

    The runtime stays suspended on ``request`` until a surface answers with a
    ``confirm`` command; nothing times out on its own.
    """

    def __init__(self, publish: Callable[[OutboundEvent], None]) -> None:
        self.publish = publish
        self._pending: dict[str, asyncio.Future[bool]] = {}

    async def request(self, prompt: str, context: Any = None) -> bool:
        confirmation_id = uuid4().hex
        future: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
        self._pending[confirmation_id] = future
        logger.info("Human confirmation requested", extra={"extra_fields": {"confirmation_id": confirmation_id}})
        self.publish(ConfirmRequestEvent(id=confirmation_id, prompt=prompt))
        try:
            return await future
        finally:
            self._pending.pop(confirmation_id, None)

    def resolve(self, confirmation_id: str, approved: bool) -> bool:
        future = self._pending.get(confirmation_id)
        if future is None or future.done():
            return False
        future.set_result(bool(approved))
        return True

    def deny_all(self) -> int:
        denied = 0
        for future in list(self._pending.values()):
            if not future.done():
                future.set_result(False)
                denied += 1
        return denied

    def pending_ids(self) -> list[str]:
        return list(self._pending.keys())
