from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from taskrelay.core.events.schemas import now_ms


class ProjectItem(BaseModel):
    key: str
    value: str = ""


class Project(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    project_name: str = Field(alias="projectName")
    items: list[ProjectItem] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms, alias="createdAt")
    updated_at: int = Field(default_factory=now_ms, alias="updatedAt")
