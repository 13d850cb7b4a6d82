from .base import (
    AgentRuntime,
    ConfirmSink,
    EventSink,
    ModelSpec,
    RunHandle,
    RunResult,
    RuntimeMessage,
    TextMessage,
    ToolStreamingMessage,
    ToolUseMessage,
    WorkflowMessage,
)
from .loader import RuntimeUnavailableError, UnconfiguredRuntime, is_configured, load_runtime

__all__ = [
    "AgentRuntime",
    "ConfirmSink",
    "EventSink",
    "ModelSpec",
    "RunHandle",
    "RunResult",
    "RuntimeMessage",
    "TextMessage",
    "ToolStreamingMessage",
    "ToolUseMessage",
    "WorkflowMessage",
    "RuntimeUnavailableError",
    "UnconfiguredRuntime",
    "is_configured",
    "load_runtime",
]
