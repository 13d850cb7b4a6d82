from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from taskrelay.core.events.bus import EventBus, Listener
from taskrelay.core.events.schemas import (
    CancelTaskCommand,
    Command,
    ConfirmCommand,
    ExecutionEvent,
    FollowUpTaskCommand,
    LogEvent,
    NewTaskCommand,
    NoHighlightCommand,
    OutboundEvent,
    ParsedItemsErrorEvent,
    ParsedItemsEvent,
    ParseTextCommand,
    RunCommand,
    StateCommand,
    StopCommand,
    StopEvent,
    parse_command,
)
from taskrelay.core.logging.context import log_context
from taskrelay.core.parsing.parser import OutputParser

from .confirm import ConfirmationBroker
from .registry import TaskRegistry

logger = logging.getLogger("taskrelay.router")


class MessageRouter:
    """Dispatches command messages and republishes every outcome as a broadcast.

    ``dispatch`` never raises: failures turn into error-level ``log`` events.
    """

    def __init__(
        self,
        registry: TaskRegistry,
        parser: OutputParser,
        bus: EventBus,
        confirmations: ConfirmationBroker,
    ) -> None:
        self.registry = registry
        self.parser = parser
        self.bus = bus
        self.confirmations = confirmations
        self._handlers: dict[str, Callable[[Any], Awaitable[None]]] = {
            "run": self._handle_run,
            "new_task": self._handle_new_task,
            "follow_up_task": self._handle_follow_up_task,
            "stop": self._handle_stop,
            "cancel_task": self._handle_cancel_task,
            "parse_text": self._handle_parse_text,
            "state": self._handle_state,
            "nohighlight": self._handle_nohighlight,
            "confirm": self._handle_confirm,
        }

    def subscribe(self, listener: Listener) -> Listener:
        return self.bus.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self.bus.unsubscribe(listener)

    def publish(self, event: OutboundEvent) -> None:
        self.bus.publish(event)

    def _log(self, text: str, level: str = "info") -> None:
        self.publish(LogEvent(text=text, level=level))

    async def dispatch(self, message: dict[str, Any] | Command) -> None:
        if isinstance(message, dict):
            try:
                command = parse_command(message)
            except ValidationError as exc:
                logger.warning("Rejected malformed command: %s", exc.error_count())
                self._log(f"Invalid command message: {message.get('kind', message.get('type'))!r}", "error")
                return
        else:
            command = message

        with log_context(command=command.kind):
            try:
                await self._handlers[command.kind](command)
            except Exception as exc:
                logger.exception("Command %s failed", command.kind)
                self._log(str(exc) or exc.__class__.__name__, "error")

    async def _start(self, prompt: str) -> None:
        try:
            self.registry.start(prompt)
        except Exception as exc:
            logger.exception("Task start failed")
            self._log(str(exc) or exc.__class__.__name__, "error")
            self.publish(ExecutionEvent(state="TASK_FAIL", details=str(exc)))

    async def _handle_run(self, command: RunCommand) -> None:
        self._log("Run...")
        await self._start(command.prompt)

    async def _handle_new_task(self, command: NewTaskCommand) -> None:
        self._log(f"Starting new task: {command.task}")
        self.publish(ExecutionEvent(state="TASK_START", details="Starting new task"))
        await self._start(command.task)

    async def _handle_follow_up_task(self, command: FollowUpTaskCommand) -> None:
        self._log(f"Starting follow-up task: {command.task}")
        self.publish(ExecutionEvent(state="TASK_START", details="Starting follow-up task"))
        await self._start(command.task)

    async def _handle_stop(self, command: StopCommand) -> None:
        self.confirmations.deny_all()
        self.registry.abort_all()
        self._log("Stop")

    async def _handle_cancel_task(self, command: CancelTaskCommand) -> None:
        self.confirmations.deny_all()
        self.registry.abort_all(cancel=True)
        self.publish(StopEvent())

    async def _handle_parse_text(self, command: ParseTextCommand) -> None:
        self._log("Parsing text with LLM...")
        try:
            items = await self.parser.parse(command.text)
        except Exception as exc:
            logger.warning("parse_text failed: %s", exc)
            self._log(f"Error parsing text: {exc}", "error")
            self.publish(ParsedItemsErrorEvent(error=str(exc)))
            return
        self.publish(ParsedItemsEvent(items=items))

    async def _handle_state(self, command: StateCommand) -> None:
        self._log("Current state requested")

    async def _handle_nohighlight(self, command: NoHighlightCommand) -> None:
        self._log("Remove highlight requested")

    async def _handle_confirm(self, command: ConfirmCommand) -> None:
        if not self.confirmations.resolve(command.id, command.approved):
            self._log(f"No pending confirmation with id {command.id}", "error")
