from __future__ import annotations

import logging
import os

from pydantic import ValidationError

from taskrelay.core.storage.kv import KeyValueStore

from .catalog import BASE_URLS, default_model
from .schemas import LLMConfig, LLMOptions

_CONFIG_KEY = "llmConfig"


class SettingsStore:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.logger = logging.getLogger("taskrelay.settings")

    def load_llm_config(self) -> LLMConfig | None:
        raw = self.store.get(_CONFIG_KEY)
        if isinstance(raw, dict):
            if not raw.get("llm"):
                raw = {**raw, "llm": "anthropic"}
            try:
                return LLMConfig.model_validate(raw)
            except ValidationError as exc:
                self.logger.warning("Stored llmConfig is invalid: %s", exc.error_count())
                return None
        return self._from_env()

    def save_llm_config(self, config: LLMConfig) -> LLMConfig:
        self.store.set(**{_CONFIG_KEY: config.to_stored()})
        return config

    def _from_env(self) -> LLMConfig | None:
        api_key = os.getenv("TASKRELAY_LLM_API_KEY")
        if not api_key:
            return None
        provider = os.getenv("TASKRELAY_LLM_PROVIDER", "anthropic").strip().casefold() or "anthropic"
        return LLMConfig(
            provider=provider,
            model_name=os.getenv("TASKRELAY_LLM_MODEL") or default_model(provider),
            api_key=api_key,
            options=LLMOptions(base_url=os.getenv("TASKRELAY_LLM_BASE_URL") or BASE_URLS.get(provider, "")),
        )
