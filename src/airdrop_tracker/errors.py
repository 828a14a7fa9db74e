# src/airdrop_tracker/errors.py

from __future__ import annotations


class TrackerError(Exception):
    """Base class for errors raised by airdrop_tracker."""


class IndexOutOfRange(TrackerError, IndexError):
    """Toggle target is outside [0, task_count)."""

    def __init__(self, index: int, task_count: int) -> None:
        super().__init__(f"task index {index} out of range for {task_count} task(s)")
        self.index = index
        self.task_count = task_count


class MalformedCacheEntry(TrackerError, ValueError):
    """A local cache value that does not decode to {completions, timestamp}."""


class PersistenceWriteFailed(TrackerError):
    """A progress write (remote or local) failed. Logged, never surfaced to toggle callers."""


class ProjectStoreError(TrackerError):
    """Remote project table request failed (transport or HTTP status)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProjectValidationError(TrackerError, ValueError):
    """Project draft failed form rules (name, URLs, result when finished)."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("; ".join(problems) or "invalid project")
        self.problems = list(problems)
