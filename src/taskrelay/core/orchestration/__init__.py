from .confirm import ConfirmationBroker
from .registry import TaskRegistry
from .router import MessageRouter
from .runner import TaskRunner, to_log_event
from .schemas import SlotState, TaskHandle, TaskState

__all__ = [
    "ConfirmationBroker",
    "MessageRouter",
    "SlotState",
    "TaskHandle",
    "TaskRegistry",
    "TaskRunner",
    "TaskState",
    "to_log_event",
]
