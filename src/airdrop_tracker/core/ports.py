# src/airdrop_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The tracker depends on Protocols instead of concrete implementations.
This keeps the hosted backend / local cache swappable and makes testing easier.
"""

from typing import Protocol

from ..projects.project_models import Project, ProjectDraft, TaskProgress


class ProjectRepo(Protocol):
    """Remote project table (see projects.project_store.ProjectStore)."""

    def list_projects(self) -> list[Project]: ...
    def get_project(self, project_id: str) -> Project | None: ...
    def create_project(self, draft: ProjectDraft, user_id: str) -> Project: ...
    def update_project(self, project_id: str, draft: ProjectDraft) -> None: ...
    def update_task_progress(self, project_id: str, task_progress: TaskProgress) -> None: ...
    def delete_project(self, project_id: str) -> None: ...
    def list_option_names(self, kind: str) -> list[str]: ...
    def add_option_name(self, kind: str, user_id: str, name: str) -> str: ...


class KeyValueCache(Protocol):
    """Device-local string storage, shaped like browser localStorage."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...
