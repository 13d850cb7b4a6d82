from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from taskrelay.core.events.bus import EventBus
from taskrelay.core.orchestration.confirm import ConfirmationBroker
from taskrelay.core.orchestration.registry import TaskRegistry
from taskrelay.core.orchestration.router import MessageRouter
from taskrelay.core.parsing.parser import OutputParser
from taskrelay.core.runtime.base import RunResult
from taskrelay.core.settings.schemas import LLMConfig, LLMOptions
from taskrelay.core.settings.store import SettingsStore
from taskrelay.core.storage.kv import KeyValueStore
from taskrelay.core.storage.state import RunState


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("TASKRELAY_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.setenv("TASKRELAY_LOG_TO_FILE", "off")
    for name in ("TASKRELAY_RUNTIME", "TASKRELAY_LLM_API_KEY", "TASKRELAY_LLM_PROVIDER", "TASKRELAY_LLM_MODEL", "TASKRELAY_LLM_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


class FakeRun:
    """Scripted runtime invocation: replays messages, then resolves, rejects, hangs or asks a human."""

    def __init__(self, outcome: str, messages: list[Any], task_id: str, on_message, on_confirm) -> None:
        self.outcome = outcome
        self.messages = messages
        self.task_id = task_id
        self.on_message = on_message
        self.on_confirm = on_confirm
        self.prompts: list[str] = []
        self.aborted: list[str] = []
        self.finished = False
        self._abort = asyncio.Event()

    async def run(self, prompt: str) -> RunResult:
        self.prompts.append(prompt)
        try:
            for message in self.messages:
                await self.on_message(message)
            if self.outcome == "reject":
                raise RuntimeError("planner exploded")
            if self.outcome == "hang":
                await self._abort.wait()
                raise RuntimeError("Task was aborted")
            if self.outcome == "confirm":
                approved = await self.on_confirm("Submit the form?", {"task_id": self.task_id})
                return RunResult(success=approved, result="submitted" if approved else "declined")
            return RunResult(success=True, result=f"done: {prompt}")
        finally:
            self.finished = True

    def list_active_task_ids(self) -> list[str]:
        return [] if self.finished else [self.task_id]

    def abort(self, task_id: str) -> None:
        self.aborted.append(task_id)
        self._abort.set()


class FakeRuntime:
    def __init__(self, outcome: str = "resolve", messages: list[Any] | None = None) -> None:
        self.outcome = outcome
        self.messages = list(messages or [])
        self.runs: list[FakeRun] = []
        self.llms: list[dict] = []
        self.agents: list[list[str]] = []

    def create_run(self, llms, agents, on_message, on_confirm) -> FakeRun:
        self.llms.append(llms)
        self.agents.append(agents)
        run = FakeRun(self.outcome, self.messages, f"task-{len(self.runs) + 1}", on_message, on_confirm)
        self.runs.append(run)
        return run


class BrokenRuntime:
    def create_run(self, llms, agents, on_message, on_confirm):
        raise RuntimeError("runtime unavailable")


@pytest.fixture
def fake_runtime_cls():
    return FakeRuntime


@pytest.fixture
def broken_runtime() -> BrokenRuntime:
    return BrokenRuntime()


@pytest.fixture
def local_store(tmp_path) -> KeyValueStore:
    return KeyValueStore(tmp_path / "local.json")


@pytest.fixture
def settings(tmp_path) -> SettingsStore:
    return SettingsStore(KeyValueStore(tmp_path / "sync.json"))


def configure(settings: SettingsStore, api_key: str = "sk-test-123456") -> LLMConfig:
    return settings.save_llm_config(
        LLMConfig(
            provider="openrouter",
            model_name="anthropic/claude-3.5-sonnet",
            api_key=api_key,
            options=LLMOptions(base_url="https://llm.example/api/v1"),
        )
    )


@pytest.fixture
def configured_settings(settings: SettingsStore) -> SettingsStore:
    configure(settings)
    return settings


def completion_client(content: str | None = None, status: int = 200, body: Any = None) -> tuple[httpx.AsyncClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if body is not None:
            return httpx.Response(status, request=request, json=body)
        if status != 200:
            return httpx.Response(status, request=request, text="upstream unhappy")
        return httpx.Response(200, request=request, json={"choices": [{"message": {"content": content}}]})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), requests


@pytest.fixture
def make_stack(local_store: KeyValueStore, configured_settings: SettingsStore):
    """Wire the background core the way the API host does, recording every broadcast."""

    def _make(runtime: Any, client: httpx.AsyncClient | None = None) -> SimpleNamespace:
        bus = EventBus()
        events: list = []
        bus.subscribe(events.append)
        run_state = RunState(local_store)
        confirmations = ConfirmationBroker(publish=bus.publish)
        opened: list[bool] = []
        registry = TaskRegistry(
            runtime=runtime,
            settings=configured_settings,
            run_state=run_state,
            publish=bus.publish,
            confirm=confirmations.request,
            open_settings=lambda: opened.append(True),
        )
        parser = OutputParser(settings=configured_settings, client=client)
        router = MessageRouter(registry=registry, parser=parser, bus=bus, confirmations=confirmations)
        return SimpleNamespace(
            bus=bus,
            events=events,
            run_state=run_state,
            confirmations=confirmations,
            registry=registry,
            parser=parser,
            router=router,
            settings=configured_settings,
            opened=opened,
        )

    return _make


@pytest.fixture
def mock_completions():
    return completion_client


@pytest.fixture
def configure_llm():
    return configure
