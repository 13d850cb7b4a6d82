from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from taskrelay.core.events.bus import EventBus
from taskrelay.core.events.schemas import OpenOptionsEvent
from taskrelay.core.orchestration.confirm import ConfirmationBroker
from taskrelay.core.orchestration.registry import TaskRegistry
from taskrelay.core.orchestration.router import MessageRouter
from taskrelay.core.parsing.parser import OutputParser
from taskrelay.core.projects.store import ProjectStore, TargetStore
from taskrelay.core.runtime.base import AgentRuntime
from taskrelay.core.runtime.loader import load_runtime
from taskrelay.core.settings.store import SettingsStore
from taskrelay.core.storage.kv import KeyValueStore, default_state_dir
from taskrelay.core.storage.state import RunState


@lru_cache(maxsize=1)
def get_state_dir() -> Path:
    state_dir = default_state_dir()
    state_dir.mkdir(parents=True, exist_ok=True)
    return state_dir


@lru_cache(maxsize=1)
def get_local_store() -> KeyValueStore:
    return KeyValueStore(get_state_dir() / "local.json")


@lru_cache(maxsize=1)
def get_sync_store() -> KeyValueStore:
    return KeyValueStore(get_state_dir() / "sync.json")


@lru_cache(maxsize=1)
def get_run_state() -> RunState:
    return RunState(get_local_store())


@lru_cache(maxsize=1)
def get_settings_store() -> SettingsStore:
    return SettingsStore(get_sync_store())


@lru_cache(maxsize=1)
def get_event_bus() -> EventBus:
    return EventBus()


@lru_cache(maxsize=1)
def get_confirmations() -> ConfirmationBroker:
    return ConfirmationBroker(publish=get_event_bus().publish)


@lru_cache(maxsize=1)
def get_runtime() -> AgentRuntime:
    return load_runtime()


@lru_cache(maxsize=1)
def get_registry() -> TaskRegistry:
    bus = get_event_bus()
    return TaskRegistry(
        runtime=get_runtime(),
        settings=get_settings_store(),
        run_state=get_run_state(),
        publish=bus.publish,
        confirm=get_confirmations().request,
        open_settings=lambda: bus.publish(OpenOptionsEvent()),
    )


@lru_cache(maxsize=1)
def get_parser() -> OutputParser:
    return OutputParser(settings=get_settings_store())


@lru_cache(maxsize=1)
def get_router() -> MessageRouter:
    return MessageRouter(
        registry=get_registry(),
        parser=get_parser(),
        bus=get_event_bus(),
        confirmations=get_confirmations(),
    )


@lru_cache(maxsize=1)
def get_project_store() -> ProjectStore:
    return ProjectStore(get_local_store())


@lru_cache(maxsize=1)
def get_target_store() -> TargetStore:
    return TargetStore(get_local_store())


def reset_dependencies() -> None:
    for getter in (
        get_state_dir,
        get_local_store,
        get_sync_store,
        get_run_state,
        get_settings_store,
        get_event_bus,
        get_confirmations,
        get_runtime,
        get_registry,
        get_parser,
        get_router,
        get_project_store,
        get_target_store,
    ):
        getter.cache_clear()
