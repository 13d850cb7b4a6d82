from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LLMOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(default="", alias="baseURL")


class LLMConfig(BaseModel):
    """The stored ``llmConfig`` record; aliases keep the options page's key names."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    provider: str = Field(default="anthropic", alias="llm")
    model_name: str = Field(default="claude-3-7-sonnet-20250219", alias="modelName")
    api_key: str = Field(default="", alias="apiKey")
    options: LLMOptions = Field(default_factory=LLMOptions)

    @property
    def base_url(self) -> str:
        return self.options.base_url

    def has_credential(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def to_stored(self) -> dict:
        return self.model_dump(by_alias=True)
