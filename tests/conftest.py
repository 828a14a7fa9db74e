# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from airdrop_tracker.cli.bootstrap import create_initial_state, load_projects
from airdrop_tracker.core.state import AppState
from airdrop_tracker.projects.project_models import Project

from .fakes import FakeProjectRepo

# 12:00 in Jakarta on 2025-03-10.
NOW = datetime(2025, 3, 10, 5, 0, tzinfo=timezone.utc)
TODAY = "2025-03-10"
YESTERDAY = "2025-03-09"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="airdrop-test",
        log_level="DEBUG",
        backend_url="",
        backend_anon_key="anon",
        backend_access_token="token",
        backend_user_id="user-1",
        request_timeout_seconds=5.0,
        progress_source="remote",
        prune_stale_progress=False,
        data_dir=tmp_path,
        cache_db_path=tmp_path / "local_cache.sqlite3",
    )


@pytest.fixture()
def repo() -> FakeProjectRepo:
    return FakeProjectRepo(
        [
            Project(id="p1", name="Layer Zero", tasks=["bridge", "swap", "stake"], links=["https://a.example"]),
            Project(id="p2", name="Testnet Quest", tasks=[]),
        ]
    )


@pytest.fixture()
def state(settings: SimpleNamespace, repo: FakeProjectRepo) -> Iterator[AppState]:
    """AppState wired with the in-memory repo and a real SQLite cache under tmp_path."""
    st = create_initial_state(settings=settings, store=repo)
    st.projects = load_projects(st)
    yield st
    st.tracker.close()
