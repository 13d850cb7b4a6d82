from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from taskrelay.core.parsing.schemas import ParsedField
from taskrelay.core.projects.schemas import Project, ProjectItem
from taskrelay.core.projects.store import ProjectNotFoundError, ProjectStore, TargetStore, submission_prompt

from .deps import get_project_store, get_target_store

router = APIRouter()
targets_router = APIRouter()


class ProjectIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_name: str = Field(alias="projectName", min_length=1)
    items: list[ProjectItem] = Field(default_factory=list)


class ProjectFromItemsIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: list[ParsedField] = Field(default_factory=list)
    project_name: str | None = Field(default=None, alias="projectName")


class TargetsIn(BaseModel):
    urls: list[str] = Field(default_factory=list)


def _dump(project: Project) -> dict:
    return project.model_dump(by_alias=True)


def _get_or_404(store: ProjectStore, project_id: str) -> Project:
    try:
        return store.get(project_id)
    except ProjectNotFoundError:
        raise HTTPException(status_code=404, detail="project not found")


@router.get("")
def list_projects(store: ProjectStore = Depends(get_project_store)) -> dict:
    return {"projects": [_dump(project) for project in store.list_all()]}


@router.post("", status_code=201)
def create_project(payload: ProjectIn, store: ProjectStore = Depends(get_project_store)) -> dict:
    return _dump(store.create(payload.project_name, payload.items))


@router.post("/from-items", status_code=201)
def create_project_from_items(payload: ProjectFromItemsIn, store: ProjectStore = Depends(get_project_store)) -> dict:
    return _dump(store.create_from_fields(payload.items, payload.project_name))


@router.get("/{project_id}")
def get_project(project_id: str, store: ProjectStore = Depends(get_project_store)) -> dict:
    return _dump(_get_or_404(store, project_id))


@router.put("/{project_id}")
def update_project(project_id: str, payload: ProjectIn, store: ProjectStore = Depends(get_project_store)) -> dict:
    try:
        return _dump(store.update(project_id, payload.project_name, payload.items))
    except ProjectNotFoundError:
        raise HTTPException(status_code=404, detail="project not found")


@router.delete("/{project_id}")
def delete_project(project_id: str, store: ProjectStore = Depends(get_project_store)) -> dict:
    if not store.delete(project_id):
        raise HTTPException(status_code=404, detail="project not found")
    return {"deleted": True}


@router.get("/{project_id}/prompt")
def project_prompt(project_id: str, target: str, store: ProjectStore = Depends(get_project_store)) -> dict:
    return {"prompt": submission_prompt(_get_or_404(store, project_id), target)}


@targets_router.get("")
def list_targets(store: TargetStore = Depends(get_target_store)) -> dict:
    return {"targets": store.list_all()}


@targets_router.put("")
def replace_targets(payload: TargetsIn, store: TargetStore = Depends(get_target_store)) -> dict:
    return {"targets": store.replace(payload.urls)}
