from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable
from uuid import uuid4

from pydantic import BaseModel, TypeAdapter, ValidationError

from taskrelay.core.events.schemas import LogEvent, OutboundEvent, StopEvent
from taskrelay.core.logging.context import log_context
from taskrelay.core.runtime.base import (
    AgentRuntime,
    ConfirmSink,
    ModelSpec,
    RunResult,
    RuntimeMessage,
    TextMessage,
    ToolStreamingMessage,
    ToolUseMessage,
    WorkflowMessage,
)
from taskrelay.core.settings.schemas import LLMConfig
from taskrelay.core.storage.state import RunState

from .schemas import TaskHandle, TaskState

CONFIG_MISSING_MESSAGE = (
    "Please configure apiKey, configure in the taskrelay options of the browser extension."
)
DEFAULT_AGENTS = ["browser"]

_message_adapter: TypeAdapter[RuntimeMessage] = TypeAdapter(RuntimeMessage)

logger = logging.getLogger("taskrelay.runner")


def build_model_config(config: LLMConfig) -> dict[str, ModelSpec]:
    return {
        "default": ModelSpec(
            provider=config.provider,
            model=config.model_name,
            api_key=config.api_key,
            base_url=config.base_url,
        )
    }


def to_log_event(message: Any) -> LogEvent | None:
    """Map one runtime-native stream message to a log event; unknown kinds map to None."""
    if isinstance(message, dict):
        try:
            message = _message_adapter.validate_python(message)
        except ValidationError:
            return None

    if isinstance(message, WorkflowMessage):
        return LogEvent(text="Plan\n" + message.plan_text, partial=not message.stream_done)
    if isinstance(message, TextMessage):
        return LogEvent(text=message.text, partial=not message.stream_done)
    if isinstance(message, ToolStreamingMessage):
        return LogEvent(text=f"{message.agent_name} > {message.tool_name}\n{message.params_text}", partial=True)
    if isinstance(message, ToolUseMessage):
        params = json.dumps(message.params, ensure_ascii=False, separators=(",", ":"))
        return LogEvent(text=f"{message.agent_name} > {message.tool_name}\n{params}", partial=False)
    return None


class TaskRunner:
    """One invocation of the agent runtime, from configuration check to the final ``stop``."""

    def __init__(
        self,
        runtime: AgentRuntime,
        publish: Callable[[OutboundEvent], None],
        run_state: RunState,
        confirm: ConfirmSink,
        open_settings: Callable[[], None],
        on_settled: Callable[[TaskHandle], None] | None = None,
        agents: list[str] | None = None,
    ) -> None:
        self.runtime = runtime
        self.publish = publish
        self.run_state = run_state
        self.confirm = confirm
        self.open_settings = open_settings
        self.on_settled = on_settled
        self.agents = list(agents or DEFAULT_AGENTS)

    def start(self, config: LLMConfig | None, prompt: str) -> TaskHandle | None:
        """Schedule the run and return at once; ``None`` means the configuration was unusable."""
        if config is None or not config.has_credential():
            logger.warning("Task not started: LLM credential missing")
            self.publish(LogEvent(text=CONFIG_MISSING_MESSAGE, level="error"))
            self.open_settings()
            self.run_state.set_running(False)
            self.publish(StopEvent())
            return None

        try:
            run = self.runtime.create_run(build_model_config(config), list(self.agents), self._on_message, self.confirm)
        except Exception:
            self.run_state.set_running(False)
            self.publish(StopEvent())
            raise
        handle = TaskHandle(id=uuid4().hex, prompt=prompt, run=run)
        handle.future = asyncio.ensure_future(self._drive(handle))
        logger.info(
            "Task started",
            extra={"extra_fields": {"task_id": handle.id, "provider": config.provider, "model": config.model_name}},
        )
        return handle

    async def _on_message(self, message: Any) -> None:
        event = to_log_event(message)
        if event is None:
            logger.debug("Ignoring runtime message %r", getattr(message, "type", message))
            return
        self.publish(event)

    async def _drive(self, handle: TaskHandle) -> None:
        with log_context(task_id=handle.id):
            try:
                result = RunResult.model_validate(await handle.run.run(handle.prompt))
                self.publish(LogEvent(text=result.result, level="success" if result.success else "error"))
            except asyncio.CancelledError:
                self.publish(LogEvent(text="Task aborted", level="error"))
                raise
            except Exception as exc:
                logger.warning("Task failed: %s", exc, exc_info=True)
                self.publish(LogEvent(text=str(exc) or exc.__class__.__name__, level="error"))
            finally:
                handle.state = TaskState.STOPPED
                self.run_state.set_running(False)
                self.publish(StopEvent())
                logger.info("Task stopped")
                if self.on_settled is not None:
                    self.on_settled(handle)
