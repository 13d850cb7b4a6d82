from __future__ import annotations

import logging
from typing import Callable

from .schemas import OutboundEvent

Listener = Callable[[OutboundEvent], None]

logger = logging.getLogger(__name__)


class EventBus:
    """Fire-and-forget broadcast to whoever is subscribed right now.

    Nothing is retained: a listener that subscribes late never sees earlier events.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Listener:
        if listener not in self._listeners:
            self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: OutboundEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener failed for %s event", event.type)
