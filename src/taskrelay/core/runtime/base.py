from __future__ import annotations

from typing import Any, Awaitable, Callable, Literal, Protocol, Union

from pydantic import BaseModel, Field


class ModelSpec(BaseModel):
    provider: str
    model: str
    api_key: str
    base_url: str = ""


class WorkflowMessage(BaseModel):
    type: Literal["workflow"] = "workflow"
    plan_text: str
    stream_done: bool = False


class TextMessage(BaseModel):
    type: Literal["text"] = "text"
    text: str
    stream_done: bool = False


class ToolStreamingMessage(BaseModel):
    type: Literal["tool_streaming"] = "tool_streaming"
    agent_name: str
    tool_name: str
    params_text: str = ""


class ToolUseMessage(BaseModel):
    type: Literal["tool_use"] = "tool_use"
    agent_name: str
    tool_name: str
    params: dict[str, Any] = Field(default_factory=dict)


RuntimeMessage = Union[WorkflowMessage, TextMessage, ToolStreamingMessage, ToolUseMessage]


class RunResult(BaseModel):
    success: bool
    result: str = ""


EventSink = Callable[[Any], Awaitable[None]]
ConfirmSink = Callable[[str, Any], Awaitable[bool]]


class RunHandle(Protocol):
    async def run(self, prompt: str) -> RunResult: ...

    def list_active_task_ids(self) -> list[str]: ...

    def abort(self, task_id: str) -> None: ...


class AgentRuntime(Protocol):
    def create_run(
        self,
        llms: dict[str, ModelSpec],
        agents: list[str],
        on_message: EventSink,
        on_confirm: ConfirmSink,
    ) -> RunHandle: ...
