# src/airdrop_tracker/tracker/progress.py

"""
Daily task-progress model.

Pure functions over a project's `task_progress` mapping (day key -> bools by task position).
Nothing here persists; see tracker.ProgressTracker for the write side.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from ..errors import IndexOutOfRange
from ..projects.project_models import Project, TaskProgress
from .clock import today_key


@dataclass(frozen=True, slots=True)
class CompletionRatio:
    done: int
    total: int
    percent: int


def reconcile(flags: list[bool] | None, task_count: int) -> list[bool]:
    """
    Fit a stored sequence to task_count.

    Copies the overlapping prefix; positions past the stored length are False.
    """
    n = max(0, int(task_count))
    stored = list(flags or [])[:n]
    return [bool(f) for f in stored] + [False] * (n - len(stored))


def get_completions(
    project: Project,
    task_count: int | None = None,
    *,
    now: datetime | float | None = None,
) -> list[bool]:
    if task_count is None:
        task_count = project.task_count
    day = today_key(now)
    return reconcile(project.task_progress.get(day), task_count)


def set_today(
    progress: TaskProgress,
    completions: list[bool],
    *,
    now: datetime | float | None = None,
    prune: bool = False,
) -> TaskProgress:
    """New mapping with today's entry replaced; other days kept unless prune=True."""
    day = today_key(now)
    out: TaskProgress = {} if prune else {k: list(v) for k, v in progress.items()}
    out[day] = list(completions)
    return out


def toggle(
    project: Project,
    index: int,
    *,
    now: datetime | float | None = None,
    prune: bool = False,
) -> Project:
    """
    Flip task `index` for today and return the updated project.

    The input project is not mutated. Raises IndexOutOfRange for index outside [0, task_count).
    """
    count = project.task_count
    if not 0 <= index < count:
        raise IndexOutOfRange(index, count)

    flags = get_completions(project, count, now=now)
    flags[index] = not flags[index]
    return replace(
        project,
        task_progress=set_today(project.task_progress, flags, now=now, prune=prune),
    )


def round_half_up(x: float) -> int:
    return int(x + 0.5)


def completion_ratio(project: Project, *, now: datetime | float | None = None) -> CompletionRatio:
    total = project.task_count
    done = sum(1 for f in get_completions(project, total, now=now) if f)
    percent = round_half_up(done / total * 100) if total else 0
    return CompletionRatio(done=done, total=total, percent=percent)
