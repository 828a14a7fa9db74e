# src/airdrop_tracker/tracker/persistence.py

from __future__ import annotations

"""
Where toggled progress lands, and the worker that writes it.

Two backends, exactly one active per process:
- remote: the project's `task_progress` column (partial update by id)
- local:  `task_completions_<id>` entries in the device cache (today only)

Writes are fire-and-forget. A single worker thread keeps them in submission order,
so the last toggle is the last write. Failures are logged and dropped: no retry, no rollback.
"""

import logging
import sqlite3
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from typing import Protocol

from ..core.ports import ProjectRepo
from ..core.session import AuthSession
from ..errors import PersistenceWriteFailed, ProjectStoreError
from ..projects.project_models import Project
from .clock import today_key
from .local_cache import LocalProgressCache
from .progress import get_completions

logger = logging.getLogger(__name__)

Instant = datetime | float | None


class ProgressBackend(Protocol):
    name: str

    def hydrate(self, project: Project, *, now: Instant = None) -> Project: ...
    def write(self, project: Project, *, now: Instant = None) -> None: ...


class RemoteProgressBackend:
    """Source of truth is the `task_progress` field already on the project row."""

    name = "remote"

    def __init__(self, repo: ProjectRepo) -> None:
        self._repo = repo

    def hydrate(self, project: Project, *, now: Instant = None) -> Project:
        return project

    def write(self, project: Project, *, now: Instant = None) -> None:
        try:
            self._repo.update_task_progress(project.id, project.task_progress)
        except ProjectStoreError as e:
            raise PersistenceWriteFailed(f"remote write failed for project {project.id}: {e}") from e


class LocalProgressBackend:
    """
    Source of truth is the device cache.

    Whatever today's entry the remote row carries is replaced by the cached one on hydrate,
    so the two never mix.
    """

    name = "local"

    def __init__(self, cache: LocalProgressCache) -> None:
        self._cache = cache

    def hydrate(self, project: Project, *, now: Instant = None) -> Project:
        day = today_key(now)
        progress = {k: list(v) for k, v in project.task_progress.items() if k != day}
        cached = self._cache.load(project.id, now=now)
        if cached is not None:
            progress[day] = cached
        return replace(project, task_progress=progress)

    def write(self, project: Project, *, now: Instant = None) -> None:
        completions = get_completions(project, now=now)
        try:
            self._cache.save(project.id, completions, now=now)
        except (sqlite3.Error, OSError) as e:
            raise PersistenceWriteFailed(f"local write failed for project {project.id}: {e}") from e


def select_backend(
    source: str,
    *,
    session: AuthSession,
    repo: ProjectRepo | None,
    cache: LocalProgressCache | None,
) -> ProgressBackend:
    """
    remote | local | auto.

    auto: remote when there is an authenticated session and a repo, otherwise local.
    """
    source = (source or "auto").strip().lower()
    if source == "auto":
        source = "remote" if session.is_authenticated and repo is not None else "local"

    if source == "remote":
        if repo is None:
            raise ValueError("progress_source=remote needs a project store")
        return RemoteProgressBackend(repo)

    if source == "local":
        if cache is None:
            raise ValueError("progress_source=local needs a local cache")
        return LocalProgressBackend(cache)

    raise ValueError(f"unknown progress source: {source!r}")


class PersistenceWorker:
    """Single background thread running writes in order; futures resolve to True on success."""

    def __init__(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="progress-writer")

    def submit(self, label: str, fn: Callable[[], None]) -> Future[bool]:
        return self._executor.submit(self._run, label, fn)

    @staticmethod
    def _run(label: str, fn: Callable[[], None]) -> bool:
        try:
            fn()
        except PersistenceWriteFailed as e:
            logger.warning("Progress write dropped (%s): %s", label, e)
            return False
        except Exception:
            logger.exception("Progress write crashed (%s)", label)
            return False
        logger.debug("Progress write ok (%s)", label)
        return True

    def close(self, *, wait: bool = True) -> None:
        """Stop accepting writes; by default drain the ones already queued."""
        self._executor.shutdown(wait=wait)
