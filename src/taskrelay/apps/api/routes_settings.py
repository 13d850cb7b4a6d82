from __future__ import annotations

from fastapi import APIRouter, Depends

from taskrelay.core.logging.redact import redact_secret
from taskrelay.core.settings.catalog import provider_catalog
from taskrelay.core.settings.schemas import LLMConfig
from taskrelay.core.settings.store import SettingsStore

from .deps import get_settings_store

router = APIRouter()


def _public_view(config: LLMConfig | None) -> dict:
    if config is None:
        return {"configured": False, "config": None}
    stored = config.to_stored()
    stored["apiKey"] = redact_secret(config.api_key)
    return {"configured": config.has_credential(), "config": stored}


@router.get("/llm")
def get_llm_config(settings: SettingsStore = Depends(get_settings_store)) -> dict:
    return _public_view(settings.load_llm_config())


@router.put("/llm")
def put_llm_config(config: LLMConfig, settings: SettingsStore = Depends(get_settings_store)) -> dict:
    return _public_view(settings.save_llm_config(config))


@router.get("/providers")
def get_providers() -> dict:
    return {"providers": provider_catalog()}
