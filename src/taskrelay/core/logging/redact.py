from __future__ import annotations

import re

_SECRET_VALUE_RE = re.compile(r"(?i)(api[_-]?key|token|secret)(\"?\s*[=:]\s*\"?)([^\s,;\"]+)")
_BEARER_RE = re.compile(r"(?i)(bearer\s+)([^\s]+)")
_SK_KEY_RE = re.compile(r"\bsk-[A-Za-z0-9_-]{6,}")


def redact_string(s: str) -> str:
    redacted = _SECRET_VALUE_RE.sub(lambda m: f"{m.group(1)}{m.group(2)}***", s)
    redacted = _BEARER_RE.sub(lambda m: f"{m.group(1)}***", redacted)
    redacted = _SK_KEY_RE.sub("sk-***", redacted)
    return redacted


def redact_secret(value: str) -> str:
    """Mask a credential, keeping the last four characters for recognition."""
    if not value:
        return ""
    if len(value) <= 8:
        return "***"
    return f"***{value[-4:]}"
