from __future__ import annotations

import importlib
import logging
import os

from .base import AgentRuntime, ConfirmSink, EventSink, ModelSpec, RunHandle

logger = logging.getLogger(__name__)


class RuntimeUnavailableError(RuntimeError):
    pass


class UnconfiguredRuntime:
    """Stand-in used when no agent runtime is installed; every start fails loudly."""

    def create_run(
        self,
        llms: dict[str, ModelSpec],
        agents: list[str],
        on_message: EventSink,
        on_confirm: ConfirmSink,
    ) -> RunHandle:
        raise RuntimeUnavailableError("No agent runtime configured. Set TASKRELAY_RUNTIME to 'module:factory'.")


def load_runtime(target: str | None = None) -> AgentRuntime:
    target = target if target is not None else os.getenv("TASKRELAY_RUNTIME", "")
    if not target.strip():
        return UnconfiguredRuntime()

    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise RuntimeUnavailableError(f"Invalid runtime target {target!r}; expected 'module:factory'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise RuntimeUnavailableError(f"Cannot import runtime module {module_name!r}: {exc}") from exc
    factory = getattr(module, attr, None)
    if factory is None:
        raise RuntimeUnavailableError(f"Runtime module {module_name!r} has no attribute {attr!r}")

    # Accept a ready runtime instance, a runtime class, or a zero-argument factory.
    if isinstance(factory, type) or not hasattr(factory, "create_run"):
        runtime = factory()
    else:
        runtime = factory
    logger.info("Loaded agent runtime %s", target)
    return runtime


def is_configured(runtime: AgentRuntime) -> bool:
    return not isinstance(runtime, UnconfiguredRuntime)
