from __future__ import annotations

import logging

from pydantic import ValidationError

from taskrelay.core.events.schemas import now_ms
from taskrelay.core.parsing.schemas import ParsedField
from taskrelay.core.storage.kv import KeyValueStore

from .schemas import Project, ProjectItem

DEFAULT_PROJECT_NAME = "New Project"

logger = logging.getLogger("taskrelay.projects")


class ProjectNotFoundError(KeyError):
    pass


class ProjectStore:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def _load_all(self) -> list[Project]:
        projects: list[Project] = []
        for raw in self.store.get("projects", []) or []:
            try:
                projects.append(Project.model_validate(raw))
            except ValidationError:
                logger.warning("Skipping malformed stored project")
        return projects

    def _write_all(self, projects: list[Project]) -> None:
        self.store.set(projects=[project.model_dump(by_alias=True) for project in projects])

    def list_all(self) -> list[Project]:
        return self._load_all()

    def get(self, project_id: str) -> Project:
        for project in self._load_all():
            if project.id == project_id:
                return project
        raise ProjectNotFoundError(project_id)

    def create(self, project_name: str, items: list[ProjectItem]) -> Project:
        projects = self._load_all()
        created = now_ms()
        # Ids are creation timestamps; bump on collision within the same millisecond.
        existing = {project.id for project in projects}
        while str(created) in existing:
            created += 1
        project = Project(
            id=str(created),
            project_name=project_name,
            items=list(items),
            created_at=created,
            updated_at=created,
        )
        projects.append(project)
        self._write_all(projects)
        return project

    def create_from_fields(self, fields: list[ParsedField], project_name: str | None = None) -> Project:
        name = project_name or (fields[0].value if fields else "") or DEFAULT_PROJECT_NAME
        return self.create(name, [ProjectItem(key=field.key, value=field.value) for field in fields])

    def update(self, project_id: str, project_name: str, items: list[ProjectItem]) -> Project:
        projects = self._load_all()
        for index, project in enumerate(projects):
            if project.id == project_id:
                updated = project.model_copy(
                    update={"project_name": project_name, "items": list(items), "updated_at": now_ms()}
                )
                projects[index] = updated
                self._write_all(projects)
                return updated
        raise ProjectNotFoundError(project_id)

    def delete(self, project_id: str) -> bool:
        projects = self._load_all()
        remaining = [project for project in projects if project.id != project_id]
        if len(remaining) == len(projects):
            return False
        self._write_all(remaining)
        return True


class TargetStore:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def list_all(self) -> list[str]:
        return [str(url) for url in self.store.get("targets", []) or []]

    def replace(self, urls: list[str]) -> list[str]:
        cleaned = [url.strip() for url in urls if url and url.strip()]
        self.store.set(targets=cleaned)
        return cleaned


def submission_prompt(project: Project, target: str) -> str:
    prompt = f'Submit project "{project.project_name}" to target "{target}"'
    if project.items:
        details = "\n".join(f"- {item.key}: {item.value}" for item in project.items)
        prompt += f"\n\nDetail information as below:\n{details}"
    return prompt
