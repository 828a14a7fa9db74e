# src/airdrop_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..projects.project_models import Project
from ..tracker.tracker import ProgressTracker
from .ports import ProjectRepo
from .session import AuthSession


@dataclass
class AppState:
    """
    Explicit application context, built once in cli.bootstrap and passed around.

    `store` is None when no backend URL is configured (local-only usage).
    """

    settings: Any
    session: AuthSession
    store: ProjectRepo | None
    tracker: ProgressTracker

    projects: list[Project] = field(default_factory=list)

    def find_project(self, ref: str) -> Project | None:
        """Resolve a 1-based list position or a project id."""
        ref = (ref or "").strip()
        if not ref:
            return None
        if ref.isdigit():
            pos = int(ref)
            if 1 <= pos <= len(self.projects):
                return self.projects[pos - 1]
        for p in self.projects:
            if p.id == ref:
                return p
        return None

    def replace_project(self, updated: Project) -> None:
        self.projects = [updated if p.id == updated.id else p for p in self.projects]
