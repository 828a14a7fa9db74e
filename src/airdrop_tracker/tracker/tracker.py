# src/airdrop_tracker/tracker/tracker.py

from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime

from ..projects.project_models import Project
from . import progress
from .persistence import PersistenceWorker, ProgressBackend

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ToggleResult:
    """
    Outcome of a toggle.

    `project` is the optimistic state to render right away.
    `write` resolves to True/False once the background write finishes; callers never need to wait on it.
    """

    project: Project
    write: Future[bool]


class ProgressTracker:
    """Daily task-progress tracker bound to one persistence backend."""

    def __init__(
        self,
        backend: ProgressBackend,
        worker: PersistenceWorker | None = None,
        *,
        prune_stale: bool = False,
    ) -> None:
        self._backend = backend
        self._worker = worker or PersistenceWorker()
        self._prune_stale = prune_stale
        logger.info("ProgressTracker ready source=%s prune_stale=%s", backend.name, prune_stale)

    @property
    def source(self) -> str:
        return self._backend.name

    def hydrate(self, project: Project, *, now: datetime | float | None = None) -> Project:
        """Attach today's progress from the active backend to a freshly loaded project."""
        return self._backend.hydrate(project, now=now)

    def get_completions(
        self,
        project: Project,
        task_count: int | None = None,
        *,
        now: datetime | float | None = None,
    ) -> list[bool]:
        return progress.get_completions(project, task_count, now=now)

    def completion_ratio(
        self, project: Project, *, now: datetime | float | None = None
    ) -> progress.CompletionRatio:
        return progress.completion_ratio(project, now=now)

    def toggle(self, project: Project, index: int, *, now: datetime | float | None = None) -> ToggleResult:
        """
        Flip task `index` for today and queue the write.

        Returns before the write runs. IndexOutOfRange propagates and nothing is queued.
        """
        updated = progress.toggle(project, index, now=now, prune=self._prune_stale)
        backend = self._backend
        label = f"{backend.name} project={updated.id} task={index}"
        future = self._worker.submit(label, lambda: backend.write(updated, now=now))
        return ToggleResult(project=updated, write=future)

    def close(self) -> None:
        self._worker.close(wait=True)
