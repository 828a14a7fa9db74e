# tests/test_tracker.py

from __future__ import annotations

from datetime import timedelta

import pytest

from airdrop_tracker.core.session import ANONYMOUS, AuthSession
from airdrop_tracker.errors import IndexOutOfRange
from airdrop_tracker.projects.project_models import Project
from airdrop_tracker.tracker.clock import epoch_millis
from airdrop_tracker.tracker.local_cache import LocalProgressCache, cache_key, encode_entry
from airdrop_tracker.tracker.persistence import (
    LocalProgressBackend,
    PersistenceWorker,
    RemoteProgressBackend,
    select_backend,
)
from airdrop_tracker.tracker.tracker import ProgressTracker

from .conftest import NOW, TODAY, YESTERDAY
from .fakes import FakeProjectRepo, MemoryKeyValueCache

SIGNED_IN = AuthSession(user_id="u1", access_token="tok")


@pytest.fixture()
def remote_tracker(repo: FakeProjectRepo):
    tracker = ProgressTracker(RemoteProgressBackend(repo), PersistenceWorker())
    yield tracker
    tracker.close()


def test_remote_toggle_writes_progress_field(remote_tracker: ProgressTracker, repo: FakeProjectRepo) -> None:
    p = repo.get_project("p1")
    assert p is not None

    result = remote_tracker.toggle(p, 1, now=NOW)
    assert remote_tracker.get_completions(result.project, now=NOW) == [False, True, False]
    assert result.write.result(timeout=5) is True
    assert repo.progress_writes == [("p1", {TODAY: [False, True, False]})]


def test_toggle_returns_before_write_completes(remote_tracker: ProgressTracker, repo: FakeProjectRepo) -> None:
    repo.gate.clear()
    p = repo.get_project("p1")
    assert p is not None

    result = remote_tracker.toggle(p, 0, now=NOW)
    assert result.project.task_progress[TODAY] == [True, False, False]
    assert not result.write.done()

    repo.gate.set()
    assert result.write.result(timeout=5) is True


def test_failed_write_keeps_optimistic_state(repo: FakeProjectRepo) -> None:
    repo.fail_progress = True
    tracker = ProgressTracker(RemoteProgressBackend(repo), PersistenceWorker())
    try:
        p = repo.get_project("p1")
        assert p is not None
        result = tracker.toggle(p, 2, now=NOW)
        assert result.write.result(timeout=5) is False
        assert tracker.get_completions(result.project, now=NOW) == [False, False, True]
        assert repo.progress_writes == []
    finally:
        tracker.close()


def test_rapid_toggles_last_write_wins(remote_tracker: ProgressTracker, repo: FakeProjectRepo) -> None:
    p = repo.get_project("p1")
    assert p is not None

    r1 = remote_tracker.toggle(p, 0, now=NOW)
    r2 = remote_tracker.toggle(r1.project, 1, now=NOW)
    r3 = remote_tracker.toggle(r2.project, 0, now=NOW)
    assert r3.write.result(timeout=5) is True

    assert [w[1][TODAY] for w in repo.progress_writes] == [
        [True, False, False],
        [True, True, False],
        [False, True, False],
    ]
    assert repo.projects["p1"].task_progress[TODAY] == [False, True, False]


def test_out_of_range_queues_nothing(remote_tracker: ProgressTracker, repo: FakeProjectRepo) -> None:
    p = repo.get_project("p2")
    assert p is not None
    with pytest.raises(IndexOutOfRange):
        remote_tracker.toggle(p, 0, now=NOW)
    remote_tracker.close()
    assert repo.progress_writes == []


def test_toggle_never_touches_yesterday_remote(repo: FakeProjectRepo) -> None:
    repo.projects["p1"].task_progress = {YESTERDAY: [True, True, True]}
    tracker = ProgressTracker(RemoteProgressBackend(repo), PersistenceWorker())
    try:
        result = tracker.toggle(repo.projects["p1"], 0, now=NOW)
        result.write.result(timeout=5)
    finally:
        tracker.close()
    assert repo.progress_writes[-1][1] == {YESTERDAY: [True, True, True], TODAY: [True, False, False]}


def test_prune_stale_drops_past_days(repo: FakeProjectRepo) -> None:
    repo.projects["p1"].task_progress = {YESTERDAY: [True, True, True]}
    tracker = ProgressTracker(RemoteProgressBackend(repo), PersistenceWorker(), prune_stale=True)
    try:
        result = tracker.toggle(repo.projects["p1"], 0, now=NOW)
        result.write.result(timeout=5)
    finally:
        tracker.close()
    assert repo.progress_writes[-1][1] == {TODAY: [True, False, False]}


def test_local_backend_round_trip() -> None:
    kv = MemoryKeyValueCache()
    tracker = ProgressTracker(LocalProgressBackend(LocalProgressCache(kv)), PersistenceWorker())
    try:
        p = Project(id="p1", name="P", tasks=["a", "b"])
        result = tracker.toggle(p, 1, now=NOW)
        assert result.write.result(timeout=5) is True

        fresh = tracker.hydrate(Project(id="p1", name="P", tasks=["a", "b", "c"]), now=NOW)
        assert tracker.get_completions(fresh, now=NOW) == [False, True, False]
    finally:
        tracker.close()


def test_local_hydrate_replaces_remote_today_entry() -> None:
    backend = LocalProgressBackend(LocalProgressCache(MemoryKeyValueCache()))
    p = Project(id="p1", name="P", tasks=["a"], task_progress={TODAY: [True], YESTERDAY: [True]})

    hydrated = backend.hydrate(p, now=NOW)
    assert hydrated.task_progress == {YESTERDAY: [True]}


def test_local_hydrate_expires_prior_day_cache() -> None:
    kv = MemoryKeyValueCache(
        {cache_key("p1"): encode_entry([True, True], epoch_millis(NOW - timedelta(days=1)))}
    )
    tracker = ProgressTracker(LocalProgressBackend(LocalProgressCache(kv)), PersistenceWorker())
    try:
        p = tracker.hydrate(Project(id="p1", name="P", tasks=["a", "b"]), now=NOW)
        assert tracker.get_completions(p, now=NOW) == [False, False]
        ratio = tracker.completion_ratio(p, now=NOW)
        assert (ratio.done, ratio.total, ratio.percent) == (0, 2, 0)
    finally:
        tracker.close()


def test_select_backend(repo: FakeProjectRepo) -> None:
    cache = LocalProgressCache(MemoryKeyValueCache())
    assert select_backend("auto", session=SIGNED_IN, repo=repo, cache=cache).name == "remote"
    assert select_backend("auto", session=ANONYMOUS, repo=repo, cache=cache).name == "local"
    assert select_backend("auto", session=SIGNED_IN, repo=None, cache=cache).name == "local"
    assert select_backend("local", session=SIGNED_IN, repo=repo, cache=cache).name == "local"
    assert select_backend("remote", session=ANONYMOUS, repo=repo, cache=cache).name == "remote"

    with pytest.raises(ValueError):
        select_backend("remote", session=SIGNED_IN, repo=None, cache=cache)
    with pytest.raises(ValueError):
        select_backend("cloud", session=SIGNED_IN, repo=repo, cache=cache)
