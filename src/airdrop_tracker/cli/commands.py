# src/airdrop_tracker/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from dataclasses import replace
from typing import cast

from ..core.state import AppState
from ..errors import IndexOutOfRange, ProjectStoreError, ProjectValidationError
from ..projects.project_models import Project, ProjectDraft, ProjectStatus
from ..projects.project_store import OPTION_TABLES
from ..tracker.clock import today_key
from ..tracker.progress import round_half_up
from .bootstrap import load_projects

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /toggle, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def progress_bar(percent: int, length: int = 12) -> str:
    done = int(length * percent // 100)
    return "#" * done + "-" * (length - done) + f" {percent}%"


def _project_line(state: AppState, pos: int, p: Project) -> str:
    ratio = state.tracker.completion_ratio(p)
    line = f"{pos}. {p.name} [{p.status.value}]"
    if ratio.total:
        line += f"  {ratio.done}/{ratio.total} done today  {progress_bar(ratio.percent)}"
    if p.status == ProjectStatus.FINISHED and p.result:
        line += f"  result: {p.result}"
    return line


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    backend = getattr(s, "backend_url", "") or "(not configured)"
    auth = "yes" if state.session.is_authenticated else "no"
    return (
        "Status:\n"
        f"  Backend: {backend}\n"
        f"  Signed in: {auth}\n"
        f"  Progress source: {state.tracker.source}\n"
        f"  Today (UTC+7): {today_key()}\n"
        f"  Projects loaded: {len(state.projects)}"
    )


def cmd_projects(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /projects          -> list loaded projects with today's progress
    /projects refresh  -> reload from the backend first
    """
    if args and args[0].lower() in ("refresh", "reload", "r"):
        if state.store is None:
            return "No backend configured (set AIRDROP_BACKEND_URL)."
        if emit:
            with contextlib.suppress(Exception):
                emit("Loading projects...")
        state.projects = load_projects(state)

    if not state.projects:
        return "No projects. Use /projects refresh to load them."

    lines = ["Projects:"]
    for i, p in enumerate(state.projects, start=1):
        lines.append("  " + _project_line(state, i, p))
    return "\n".join(lines)


def cmd_tasks(state: AppState, args: list[str]) -> str:
    """/tasks <project>: checklist for today, with the link paired to each task position."""
    if not args:
        return "Usage: /tasks <project # or id>"
    project = state.find_project(args[0])
    if project is None:
        return f"No such project: {args[0]}"
    if not project.tasks:
        return f"{project.name} has no tasks."

    flags = state.tracker.get_completions(project)
    lines = [f"{project.name} - tasks for {today_key()}:"]
    for i, (label, done) in enumerate(zip(project.tasks, flags), start=1):
        mark = "x" if done else " "
        link = project.links[i - 1] if i - 1 < len(project.links) else ""
        lines.append(f"  [{mark}] {i}. {label}" + (f"  <{link}>" if link else ""))
    if project.faucet_link:
        lines.append(f"  faucet: {project.faucet_link}")
    return "\n".join(lines)


def cmd_toggle(state: AppState, args: list[str]) -> str:
    """/toggle <project> <task #>: flip a task for today (1-based task number)."""
    if len(args) < 2:
        return "Usage: /toggle <project # or id> <task #>"
    project = state.find_project(args[0])
    if project is None:
        return f"No such project: {args[0]}"
    try:
        index = int(args[1]) - 1
    except ValueError:
        return f"Task number must be an integer, got {args[1]!r}."

    try:
        result = state.tracker.toggle(project, index)
    except IndexOutOfRange:
        return f"{project.name} has {project.task_count} task(s); pick 1..{project.task_count}."

    state.replace_project(result.project)
    done = state.tracker.get_completions(result.project)[index]
    ratio = state.tracker.completion_ratio(result.project)
    verb = "done" if done else "not done"
    return (
        f"{project.tasks[index]} -> {verb}. "
        f"{ratio.done}/{ratio.total} done today {progress_bar(ratio.percent)}"
    )


def cmd_progress(state: AppState, args: list[str]) -> str:
    if not state.projects:
        return "No projects loaded."
    total_done = 0
    total_tasks = 0
    lines = [f"Progress for {today_key()}:"]
    for i, p in enumerate(state.projects, start=1):
        ratio = state.tracker.completion_ratio(p)
        total_done += ratio.done
        total_tasks += ratio.total
        lines.append(f"  {i}. {p.name}: {ratio.done}/{ratio.total} ({ratio.percent}%)")
    overall = round_half_up(total_done / total_tasks * 100) if total_tasks else 0
    lines.append(f"Overall: {total_done}/{total_tasks} ({overall}%)")
    return "\n".join(lines)


def _store_or_reason(state: AppState) -> str | None:
    if state.store is None:
        return "No backend configured (set AIRDROP_BACKEND_URL)."
    if not state.session.is_authenticated:
        return "Not signed in (set AIRDROP_ACCESS_TOKEN and AIRDROP_USER_ID)."
    return None


def _split_items(raw: str) -> list[str]:
    return [s.strip() for s in raw.split(";") if s.strip()]


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <name> | task; task | link; link  (one link per task position)"""
    reason = _store_or_reason(state)
    if reason:
        return reason
    fields = [f.strip() for f in " ".join(args).split("|")]
    if not fields[0]:
        return "Usage: /add <name> | <task; task...> | <link; link...>"

    draft = ProjectDraft(
        name=fields[0],
        tasks=_split_items(fields[1]) if len(fields) > 1 else [],
        links=_split_items(fields[2]) if len(fields) > 2 else [],
    )
    try:
        created = state.store.create_project(draft, state.session.user_id or "")
    except ProjectValidationError as e:
        return f"Invalid project: {e}"
    except ProjectStoreError as e:
        return f"Backend error: {e}"

    state.projects = [state.tracker.hydrate(created), *state.projects]
    return f"Added {created.name} with {created.task_count} task(s)."


def cmd_finish(state: AppState, args: list[str]) -> str:
    """/finish <project> <result...>: mark a project Finished with its outcome."""
    reason = _store_or_reason(state)
    if reason:
        return reason
    if len(args) < 2:
        return "Usage: /finish <project # or id> <result>"
    project = state.find_project(args[0])
    if project is None:
        return f"No such project: {args[0]}"

    draft = ProjectDraft.from_project(project)
    draft.status = ProjectStatus.FINISHED
    draft.result = " ".join(args[1:])
    try:
        state.store.update_project(project.id, draft)
    except (ProjectValidationError, ProjectStoreError) as e:
        return f"Could not update {project.name}: {e}"

    state.replace_project(replace(project, status=ProjectStatus.FINISHED, result=draft.result))
    return f"{project.name} -> Finished ({draft.result})."


def cmd_delete(state: AppState, args: list[str]) -> str:
    reason = _store_or_reason(state)
    if reason:
        return reason
    if not args:
        return "Usage: /delete <project # or id>"
    project = state.find_project(args[0])
    if project is None:
        return f"No such project: {args[0]}"
    try:
        state.store.delete_project(project.id)
    except ProjectStoreError as e:
        return f"Could not delete {project.name}: {e}"

    state.projects = [p for p in state.projects if p.id != project.id]
    return f"Deleted {project.name}."


def cmd_options(state: AppState, args: list[str]) -> str:
    """
    /options wallet|social           -> saved dropdown values
    /options wallet|social add <n>   -> save a new one
    """
    reason = _store_or_reason(state)
    if reason:
        return reason
    if not args or args[0].lower() not in OPTION_TABLES:
        return "Usage: /options wallet|social [add <name>]"
    kind = args[0].lower()

    try:
        if len(args) >= 3 and args[1].lower() == "add":
            name = state.store.add_option_name(kind, state.session.user_id or "", " ".join(args[2:]))
            return f"Saved {kind} type: {name}"
        names = state.store.list_option_names(kind)
    except ProjectStoreError as e:
        return f"Backend error: {e}"

    if not names:
        return f"No saved {kind} types."
    return f"{kind.capitalize()} types: " + ", ".join(names)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show backend, session and progress source.")
registry.register(
    "projects", cmd_projects, help_text="List projects: /projects | /projects refresh.", aliases=["ls"]
)
registry.register("tasks", cmd_tasks, help_text="Today's checklist: /tasks <project>.")
registry.register(
    "toggle", cmd_toggle, help_text="Mark/unmark a task today: /toggle <project> <task #>.", aliases=["t"]
)
registry.register("progress", cmd_progress, help_text="Today's completion across all projects.")
registry.register("add", cmd_add, help_text="Create a project: /add <name> | <task; task> | <link; link>.")
registry.register("finish", cmd_finish, help_text="Mark a project Finished: /finish <project> <result>.")
registry.register("delete", cmd_delete, help_text="Delete a project: /delete <project>.", aliases=["rm"])
registry.register(
    "options", cmd_options, help_text="Saved wallet/social types: /options wallet|social [add <name>]."
)
