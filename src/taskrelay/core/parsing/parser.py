from __future__ import annotations

import json
import logging
import re
import time
from typing import Any

import httpx

from taskrelay.core.http.client import post_json
from taskrelay.core.http.errors import TaskRelayHTTPNetworkError, TaskRelayHTTPStatusError
from taskrelay.core.logging.redact import redact_string
from taskrelay.core.settings.schemas import LLMConfig
from taskrelay.core.settings.store import SettingsStore

from .errors import ConfigMissingError, EmptyResponseError, NetworkError, ParseError, UpstreamError
from .prompts import extraction_prompt
from .schemas import ParsedField

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "anthropic/claude-3.5-sonnet"

# Near-deterministic sampling with a short budget: the reply is a small JSON object.
TEMPERATURE = 0.1
MAX_TOKENS = 500
TOP_P = 0.9
FREQUENCY_PENALTY = 0.0
PRESENCE_PENALTY = 0.0

_FENCE_OPEN_RE = re.compile(r"^```[\w-]*[ \t]*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?[ \t]*```$")
_INLINE_OBJECT_RE = re.compile(r"\{.*?\}")

logger = logging.getLogger("taskrelay.parser")


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    cleaned = _FENCE_OPEN_RE.sub("", cleaned, count=1)
    cleaned = _FENCE_CLOSE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def _load_object(text: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def stringify_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    # Integral floats below 1e21 print without a fraction, as number-to-string does in the browser.
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return json.dumps(value, ensure_ascii=False)


def fields_from_object(obj: dict[str, Any]) -> list[ParsedField]:
    return [ParsedField(key=str(key), value=stringify_value(value)) for key, value in obj.items()]


def parse_completion(content: str) -> list[ParsedField]:
    """Turn completion text into fields.

    The whole reply (minus one surrounding code fence) is tried first; failing
    that, the first single-line ``{...}`` span in the original text. ``{}`` is a
    valid result with zero fields.
    """
    parsed = _load_object(strip_code_fence(content))
    if parsed is None:
        match = _INLINE_OBJECT_RE.search(content)
        if match is not None:
            parsed = _load_object(match.group(0))
            if parsed is not None:
                logger.info("Recovered JSON object from surrounding prose")
    if parsed is None:
        raise ParseError(content)
    return fields_from_object(parsed)


def build_request(config: LLMConfig, input_text: str) -> dict[str, Any]:
    return {
        "model": config.model_name or DEFAULT_MODEL,
        "messages": [{"role": "user", "content": extraction_prompt(input_text)}],
        "temperature": TEMPERATURE,
        "max_tokens": MAX_TOKENS,
        "top_p": TOP_P,
        "frequency_penalty": FREQUENCY_PENALTY,
        "presence_penalty": PRESENCE_PENALTY,
    }


def completion_text(data: Any) -> str:
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


class OutputParser:
    """Extracts key-value fields from free text through a chat-completions endpoint.

    Holds no state between calls; every ``parse`` makes exactly one request.
    """

    def __init__(self, settings: SettingsStore, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self.client = client

    def _require_config(self) -> LLMConfig:
        config = self.settings.load_llm_config()
        if config is None:
            raise ConfigMissingError("LLM configuration not found. Please configure API key in extension options.")
        if not config.api_key:
            raise ConfigMissingError("API Key not found in configuration. Please configure API key in extension options.")
        if not config.api_key.strip():
            raise ConfigMissingError("API Key is empty. Please configure a valid API key in extension options.")
        return config

    async def parse(self, input_text: str) -> list[ParsedField]:
        config = self._require_config()
        url = f"{(config.base_url or DEFAULT_BASE_URL).rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        }

        start = time.perf_counter()
        try:
            response = await post_json(url, build_request(config, input_text), headers=headers, client=self.client)
        except TaskRelayHTTPStatusError as exc:
            logger.warning("Completion API returned %s: %s", exc.status_code, redact_string(exc.body[:200]))
            raise UpstreamError(exc.status_code, exc.body) from exc
        except TaskRelayHTTPNetworkError as exc:
            raise NetworkError(f"Network error when calling completion API: {exc}") from exc

        try:
            content = completion_text(response.json())
        except ValueError:
            content = ""
        if not content:
            raise EmptyResponseError("Empty response from completion API")

        fields = parse_completion(content)
        logger.info(
            "parse_text",
            extra={
                "extra_fields": {
                    "model": config.model_name,
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                    "field_count": len(fields),
                    "input_len": len(input_text),
                }
            },
        )
        return fields
