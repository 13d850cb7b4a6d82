from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

logger = logging.getLogger(__name__)


def default_state_dir() -> Path:
    configured = os.getenv("TASKRELAY_STATE_DIR")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".taskrelay"


class KeyValueStore:
    """A JSON object persisted as one file; every write replaces the whole blob."""

    def __init__(self, file_path: Path) -> None:
        self.file_path = Path(file_path)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        if not self.file_path.exists() or self.file_path.stat().st_size == 0:
            return {}
        try:
            payload = json.loads(self.file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self.file_path.name, exc)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _write(self, payload: dict[str, Any]) -> None:
        with NamedTemporaryFile("w", encoding="utf-8", delete=False, dir=self.file_path.parent) as handle:
            json.dump(payload, handle, ensure_ascii=False)
            handle.flush()
            os.fsync(handle.fileno())
            temp_name = handle.name
        Path(temp_name).replace(self.file_path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, **values: Any) -> None:
        with self._lock:
            payload = self._load()
            payload.update(values)
            self._write(payload)
