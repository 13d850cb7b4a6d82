from __future__ import annotations

PROVIDERS: list[dict[str, str]] = [
    {"value": "anthropic", "label": "Claude (default)"},
    {"value": "openai", "label": "OpenAI"},
    {"value": "openrouter", "label": "OpenRouter"},
    {"value": "gemini", "label": "Gemini"},
]

MODELS: dict[str, list[str]] = {
    "anthropic": ["claude-3-7-sonnet-20250219", "claude-3-5-sonnet-20241022"],
    "openai": ["gpt-4o", "gpt-4.1", "gpt-4.1-mini", "gpt-4o-mini"],
    "openrouter": [
        "anthropic/claude-3.7-sonnet",
        "anthropic/claude-3.5-sonnet",
        "openai/gpt-4.1",
        "openai/gpt-4.1-mini",
        "openai/gpt-4o",
        "google/gemini-2.5-flash-preview-05-20",
        "google/gemini-2.5-pro-preview",
    ],
    "gemini": ["gemini-2.5-flash-preview-05-20", "gemini-2.5-pro-preview", "gemini-2.0-flash"],
}

BASE_URLS: dict[str, str] = {
    "anthropic": "https://api.anthropic.com/v1",
    "openai": "https://api.openai.com/v1",
    "openrouter": "https://openrouter.ai/api/v1",
    "gemini": "https://generativelanguage.googleapis.com/v1beta",
}


def default_model(provider: str) -> str:
    models = MODELS.get(provider) or MODELS["anthropic"]
    return models[0]


def provider_catalog() -> list[dict[str, object]]:
    return [
        {
            **provider,
            "models": list(MODELS[provider["value"]]),
            "default_model": default_model(provider["value"]),
            "base_url": BASE_URLS[provider["value"]],
        }
        for provider in PROVIDERS
    ]
