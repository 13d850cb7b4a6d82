from __future__ import annotations

import time
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from taskrelay.core.parsing.schemas import ParsedField

LogLevel = Literal["info", "success", "error"]
ExecutionState = Literal["TASK_START", "TASK_FAIL", "TASK_CANCEL"]


def now_ms() -> int:
    return int(time.time() * 1000)


# Inbound commands


class _Command(BaseModel):
    model_config = ConfigDict(frozen=True)


class RunCommand(_Command):
    kind: Literal["run"] = "run"
    prompt: str


class NewTaskCommand(_Command):
    kind: Literal["new_task"] = "new_task"
    task: str


class FollowUpTaskCommand(_Command):
    kind: Literal["follow_up_task"] = "follow_up_task"
    task: str


class StopCommand(_Command):
    kind: Literal["stop"] = "stop"


class CancelTaskCommand(_Command):
    kind: Literal["cancel_task"] = "cancel_task"


class ParseTextCommand(_Command):
    kind: Literal["parse_text"] = "parse_text"
    text: str


class StateCommand(_Command):
    kind: Literal["state"] = "state"


class NoHighlightCommand(_Command):
    kind: Literal["nohighlight"] = "nohighlight"


class ConfirmCommand(_Command):
    kind: Literal["confirm"] = "confirm"
    id: str
    approved: bool


Command = Annotated[
    Union[
        RunCommand,
        NewTaskCommand,
        FollowUpTaskCommand,
        StopCommand,
        CancelTaskCommand,
        ParseTextCommand,
        StateCommand,
        NoHighlightCommand,
        ConfirmCommand,
    ],
    Field(discriminator="kind"),
]

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(message: dict[str, Any]) -> Command:
    """Validate a raw message; the legacy ``type`` key is accepted in place of ``kind``."""
    if "kind" not in message and "type" in message:
        message = {**{k: v for k, v in message.items() if k != "type"}, "kind": message["type"]}
    return _command_adapter.validate_python(message)


# Outbound broadcasts


class OutboundEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str

    def to_message(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class LogEvent(OutboundEvent):
    type: Literal["log"] = "log"
    text: str = Field(serialization_alias="log")
    level: LogLevel = "info"
    partial: bool = Field(default=False, serialization_alias="stream")


class ExecutionEvent(OutboundEvent):
    type: Literal["execution"] = "execution"
    actor: str = "SYSTEM"
    state: ExecutionState
    details: str = ""
    timestamp: int = Field(default_factory=now_ms)

    def to_message(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "actor": self.actor,
            "state": self.state,
            "data": {"details": self.details},
            "timestamp": self.timestamp,
        }


class StopEvent(OutboundEvent):
    type: Literal["stop"] = "stop"


class ParsedItemsEvent(OutboundEvent):
    type: Literal["parsed_items"] = "parsed_items"
    items: list[ParsedField] = Field(default_factory=list)


class ParsedItemsErrorEvent(OutboundEvent):
    type: Literal["parsed_items_error"] = "parsed_items_error"
    error: str


class ConfirmRequestEvent(OutboundEvent):
    type: Literal["confirm"] = "confirm"
    id: str
    prompt: str


class OpenOptionsEvent(OutboundEvent):
    type: Literal["open_options"] = "open_options"
