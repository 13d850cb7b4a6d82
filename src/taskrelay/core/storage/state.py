from __future__ import annotations

from .kv import KeyValueStore


class RunState:
    """Convenience flags the side panel restores from; never authoritative."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def is_running(self) -> bool:
        return bool(self.store.get("running", False))

    def set_running(self, running: bool) -> None:
        self.store.set(running=bool(running))

    def last_prompt(self) -> str:
        return str(self.store.get("prompt", "") or "")

    def mark_started(self, prompt: str) -> None:
        self.store.set(running=True, prompt=prompt)

    def snapshot(self) -> dict[str, object]:
        return {"running": self.is_running(), "prompt": self.last_prompt()}
