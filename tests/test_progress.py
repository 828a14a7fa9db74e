# tests/test_progress.py

from __future__ import annotations

from datetime import timedelta

import pytest

from airdrop_tracker.errors import IndexOutOfRange
from airdrop_tracker.projects.project_models import Project
from airdrop_tracker.tracker.progress import completion_ratio, get_completions, reconcile, toggle

from .conftest import NOW, TODAY, YESTERDAY


def _project(tasks: list[str], progress: dict[str, list[bool]] | None = None) -> Project:
    return Project(id="p", name="P", tasks=tasks, task_progress=progress or {})


@pytest.mark.parametrize("n", [0, 1, 4, 25])
def test_default_all_false_without_entry_for_today(n: int) -> None:
    p = _project([f"t{i}" for i in range(n)])
    assert get_completions(p, n, now=NOW) == [False] * n


def test_double_toggle_restores_state() -> None:
    p = _project(["a", "b", "c"], {TODAY: [True, False, False]})
    once = toggle(p, 1, now=NOW)
    twice = toggle(once, 1, now=NOW)
    assert get_completions(once, now=NOW) == [True, True, False]
    assert get_completions(twice, now=NOW) == [True, False, False]


def test_toggle_does_not_mutate_input() -> None:
    p = _project(["a", "b"], {TODAY: [False, False]})
    updated = toggle(p, 0, now=NOW)
    assert p.task_progress == {TODAY: [False, False]}
    assert updated.task_progress[TODAY] == [True, False]


@pytest.mark.parametrize(
    "stored,n,expected",
    [
        ([True], 3, [True, False, False]),
        ([True, False, True], 3, [True, False, True]),
        ([True, True, True, True], 2, [True, True]),
        ([], 2, [False, False]),
    ],
)
def test_length_reconciliation(stored: list[bool], n: int, expected: list[bool]) -> None:
    p = _project([f"t{i}" for i in range(n)], {TODAY: stored})
    assert get_completions(p, n, now=NOW) == expected
    assert reconcile(stored, n) == expected


def test_toggle_extends_short_entry() -> None:
    # A task was added after today's entry was written.
    p = _project(["a", "b", "c"], {TODAY: [True]})
    updated = toggle(p, 2, now=NOW)
    assert updated.task_progress[TODAY] == [True, False, True]


def test_yesterday_is_isolated_from_today() -> None:
    p = _project(["a", "b"], {YESTERDAY: [True, True]})
    assert get_completions(p, now=NOW) == [False, False]

    updated = toggle(p, 0, now=NOW)
    assert updated.task_progress[YESTERDAY] == [True, True]
    assert updated.task_progress[TODAY] == [True, False]


def test_rollover_is_lazy() -> None:
    p = toggle(_project(["a"]), 0, now=NOW)
    assert get_completions(p, now=NOW) == [True]
    assert get_completions(p, now=NOW + timedelta(days=1)) == [False]


def test_prune_keeps_only_today() -> None:
    p = _project(["a"], {YESTERDAY: [True], "2025-01-01": [False]})
    updated = toggle(p, 0, now=NOW, prune=True)
    assert updated.task_progress == {TODAY: [True]}


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_toggle_out_of_range_raises_and_leaves_state(index: int) -> None:
    p = _project(["a", "b", "c"], {TODAY: [True, False, False]})
    with pytest.raises(IndexOutOfRange):
        toggle(p, index, now=NOW)
    assert p.task_progress == {TODAY: [True, False, False]}


def test_toggle_on_empty_task_list_raises() -> None:
    with pytest.raises(IndexOutOfRange):
        toggle(_project([]), 0, now=NOW)


def test_completion_ratio() -> None:
    p = _project(["a", "b", "c", "d"], {TODAY: [True, False, True, False]})
    r = completion_ratio(p, now=NOW)
    assert (r.done, r.total, r.percent) == (2, 4, 50)


def test_completion_ratio_zero_tasks() -> None:
    r = completion_ratio(_project([]), now=NOW)
    assert (r.done, r.total, r.percent) == (0, 0, 0)


def test_completion_ratio_rounds_to_nearest() -> None:
    one_of_three = _project(["a", "b", "c"], {TODAY: [True, False, False]})
    two_of_three = _project(["a", "b", "c"], {TODAY: [True, True, False]})
    one_of_eight = _project([str(i) for i in range(8)], {TODAY: [True] + [False] * 7})
    assert completion_ratio(one_of_three, now=NOW).percent == 33
    assert completion_ratio(two_of_three, now=NOW).percent == 67
    # 12.5 rounds half up
    assert completion_ratio(one_of_eight, now=NOW).percent == 13


def test_completion_ratio_ignores_surplus_stored_flags() -> None:
    p = _project(["a"], {TODAY: [False, True, True]})
    r = completion_ratio(p, now=NOW)
    assert (r.done, r.total) == (0, 1)
