# src/airdrop_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires session, project store, local cache and tracker into AppState,
- loads the project list and attaches today's progress.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.session import AuthSession
from ..core.state import AppState
from ..errors import ProjectStoreError
from ..projects.project_models import Project
from ..projects.project_store import ProjectStore
from ..tracker.local_cache import LocalProgressCache, SQLiteKeyValueStore
from ..tracker.persistence import PersistenceWorker, select_backend
from ..tracker.tracker import ProgressTracker

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.cache_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, store: ProjectStore | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    session = AuthSession.from_settings(settings)

    if store is None and settings.backend_url:
        try:
            store = ProjectStore.from_settings(settings, session)
        except ValueError:
            logger.exception("Project store disabled: bad backend settings")
            store = None

    cache = LocalProgressCache(SQLiteKeyValueStore(settings.cache_db_path))
    backend = select_backend(settings.progress_source, session=session, repo=store, cache=cache)
    tracker = ProgressTracker(
        backend,
        PersistenceWorker(),
        prune_stale=bool(getattr(settings, "prune_stale_progress", False)),
    )

    return AppState(settings=settings, session=session, store=store, tracker=tracker)


def load_projects(state: AppState) -> list[Project]:
    """Fetch projects (newest first) and hydrate today's progress. Best-effort: [] on failure."""
    if state.store is None:
        return []
    try:
        projects = state.store.list_projects()
    except ProjectStoreError:
        logger.exception("Failed to load projects")
        return []
    out = [state.tracker.hydrate(p) for p in projects]
    logger.info("Loaded %d project(s) source=%s", len(out), state.tracker.source)
    return out
