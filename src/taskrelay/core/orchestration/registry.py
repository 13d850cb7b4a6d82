from __future__ import annotations

import logging
from typing import Callable

from taskrelay.core.events.schemas import ExecutionEvent, LogEvent, OutboundEvent
from taskrelay.core.runtime.base import AgentRuntime, ConfirmSink
from taskrelay.core.settings.store import SettingsStore
from taskrelay.core.storage.state import RunState

from .runner import TaskRunner
from .schemas import SlotState, TaskHandle, TaskState

logger = logging.getLogger("taskrelay.registry")


class TaskRegistry:
    """Owns the single task slot of the background process.

    A new start replaces the tracked handle without aborting the previous run.
    The slot only returns to idle when the tracked run settles.
    """

    def __init__(
        self,
        runtime: AgentRuntime,
        settings: SettingsStore,
        run_state: RunState,
        publish: Callable[[OutboundEvent], None],
        confirm: ConfirmSink,
        open_settings: Callable[[], None],
    ) -> None:
        self.runtime = runtime
        self.settings = settings
        self.run_state = run_state
        self.publish = publish
        self.confirm = confirm
        self.open_settings = open_settings
        self._current: TaskHandle | None = None

    @property
    def current(self) -> TaskHandle | None:
        return self._current

    @property
    def state(self) -> SlotState:
        if self._current is None or self._current.settled:
            return SlotState.IDLE
        return SlotState.RUNNING

    def _new_runner(self) -> TaskRunner:
        return TaskRunner(
            runtime=self.runtime,
            publish=self.publish,
            run_state=self.run_state,
            confirm=self.confirm,
            open_settings=self.open_settings,
            on_settled=self._on_settled,
        )

    def start(self, prompt: str) -> TaskHandle | None:
        if self.state is SlotState.RUNNING:
            logger.info("Starting a new task while another is still tracked; the previous run is not aborted")
        self.run_state.mark_started(prompt)
        handle = self._new_runner().start(self.settings.load_llm_config(), prompt)
        self._current = handle
        return handle

    def tracked_task_ids(self) -> list[str]:
        if self._current is None:
            return []
        return list(self._current.run.list_active_task_ids())

    def abort_all(self, cancel: bool = False) -> list[str]:
        handle = self._current
        aborted: list[str] = []
        if handle is not None:
            for task_id in self.tracked_task_ids():
                try:
                    handle.run.abort(task_id)
                except Exception as exc:
                    # Aborting an id the runtime already finished is not an error.
                    logger.warning("Abort of task %s raised %s", task_id, exc)
                aborted.append(task_id)
                prefix = "Task cancelled: " if cancel else "Abort taskId: "
                self.publish(LogEvent(text=prefix + task_id))
            if handle.state is TaskState.RUNNING:
                handle.state = TaskState.STOPPING

        if cancel:
            self.publish(ExecutionEvent(state="TASK_CANCEL", details="Task cancelled by user"))
        logger.info("Abort requested", extra={"extra_fields": {"aborted": aborted, "cancel": cancel}})
        return aborted

    def reset(self) -> None:
        self._current = None
        self.run_state.set_running(False)

    def _on_settled(self, handle: TaskHandle) -> None:
        if self._current is handle:
            self._current = None
