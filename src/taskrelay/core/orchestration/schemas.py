from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum

from taskrelay.core.events.schemas import now_ms
from taskrelay.core.runtime.base import RunHandle


class TaskState(str, Enum):
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class SlotState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class TaskHandle:
    id: str
    prompt: str
    run: RunHandle
    state: TaskState = TaskState.RUNNING
    created_at: int = field(default_factory=now_ms)
    future: asyncio.Task | None = field(default=None, repr=False)

    @property
    def settled(self) -> bool:
        return self.state is TaskState.STOPPED

    async def wait(self) -> None:
        """Wait until the runtime invocation settles; never raises the run's error."""
        if self.future is not None and not self.future.done():
            await asyncio.wait({self.future})
