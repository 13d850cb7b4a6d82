from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .json_formatter import JSONFormatter

_LOGGER_NAME = "taskrelay"
# Host loggers that should share the JSON output of the background process.
_HOST_LOGGERS = ("uvicorn.error",)
_HANDLER_TAG = "_taskrelay_handler"


def _env_level(name: str, default: str = "INFO") -> int:
    level = logging.getLevelName(os.getenv(name, default).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _log_file(state_dir: Path) -> Path | None:
    if os.getenv("TASKRELAY_LOG_TO_FILE", "on").strip().casefold() != "on":
        return None
    log_dir = Path(os.getenv("TASKRELAY_LOG_DIR") or (state_dir / "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "taskrelay.log"


def _has_handler(logger: logging.Logger, tag: str) -> bool:
    return any(getattr(handler, _HANDLER_TAG, None) == tag for handler in logger.handlers)


def _attach(logger: logging.Logger, handler: logging.Handler, tag: str) -> None:
    setattr(handler, _HANDLER_TAG, tag)
    logger.addHandler(handler)


def configure_logging(state_dir: Path) -> logging.Logger:
    """Route the ``taskrelay`` and host loggers through one redacting JSON formatter.

    Repeated calls are harmless: handlers are tagged and only added once per
    logger and destination.
    """
    formatter = JSONFormatter()
    log_file = _log_file(state_dir)
    max_bytes = int(os.getenv("TASKRELAY_LOG_MAX_BYTES", "5000000"))
    backup_count = int(os.getenv("TASKRELAY_LOG_BACKUP_COUNT", "5"))

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(_env_level("TASKRELAY_LOG_LEVEL"))
    logger.propagate = False

    for target in (logger, *(logging.getLogger(name) for name in _HOST_LOGGERS)):
        target.propagate = False
        if not _has_handler(target, "stdout"):
            stdout_handler = logging.StreamHandler(stream=sys.stdout)
            stdout_handler.setFormatter(formatter)
            _attach(target, stdout_handler, "stdout")

        if log_file is not None and not _has_handler(target, str(log_file)):
            file_handler = RotatingFileHandler(
                filename=log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            _attach(target, file_handler, str(log_file))

    return logger
