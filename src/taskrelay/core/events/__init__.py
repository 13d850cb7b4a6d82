from .bus import EventBus, Listener
from .schemas import (
    Command,
    ConfirmRequestEvent,
    ExecutionEvent,
    LogEvent,
    OpenOptionsEvent,
    OutboundEvent,
    ParsedItemsErrorEvent,
    ParsedItemsEvent,
    StopEvent,
    parse_command,
)

__all__ = [
    "Command",
    "ConfirmRequestEvent",
    "EventBus",
    "ExecutionEvent",
    "Listener",
    "LogEvent",
    "OpenOptionsEvent",
    "OutboundEvent",
    "ParsedItemsErrorEvent",
    "ParsedItemsEvent",
    "StopEvent",
    "parse_command",
]
