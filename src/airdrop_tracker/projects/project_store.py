# src/airdrop_tracker/projects/project_store.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.session import AuthSession
from ..errors import ProjectStoreError, ProjectValidationError
from .project_models import PROJECT_COLUMNS, Project, ProjectDraft, TaskProgress
from .validation import build_payload, validate_project

logger = logging.getLogger(__name__)

PROJECTS_TABLE = "projects"

# Reusable per-user dropdown values ("add new wallet type" in the form).
OPTION_TABLES = {
    "wallet": "wallet_types",
    "social": "social_types",
}


def _make_timeout(seconds: float) -> httpx.Timeout:
    return httpx.Timeout(
        connect=min(5.0, seconds),
        read=seconds,
        write=seconds,
        pool=min(5.0, seconds),
    )


class ProjectStore:
    """
    REST client for the hosted `projects` table (PostgREST query syntax).

    Row-level security on the server scopes every query to the session's user,
    so reads never filter by user_id here.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        session: AuthSession | None = None,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("backend base_url is required")

        bearer = session.access_token if session and session.is_authenticated else api_key
        self._client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {bearer}",
                "Content-Type": "application/json",
            },
            timeout=_make_timeout(timeout_seconds),
            transport=transport,
        )
        logger.info("ProjectStore ready url=%s authenticated=%s", base_url, bool(session and session.is_authenticated))

    @classmethod
    def from_settings(cls, settings, session: AuthSession | None = None) -> ProjectStore:
        return cls(
            settings.backend_url,
            settings.backend_anon_key,
            session=session,
            timeout_seconds=float(getattr(settings, "request_timeout_seconds", 10.0)),
        )

    def close(self) -> None:
        self._client.close()

    # ---- low-level helpers ----

    def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> Any:
        headers = {"Prefer": prefer} if prefer else None
        try:
            resp = self._client.request(method, f"/{table}", params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            raise ProjectStoreError(f"{method} {table} failed: {e}") from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning("%s %s -> %s %s", method, table, resp.status_code, message)
            raise ProjectStoreError(message, status_code=resp.status_code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise ProjectStoreError(f"{method} {table} returned invalid JSON") from e

    # ---- projects ----

    def list_projects(self) -> list[Project]:
        rows = self._request(
            "GET",
            PROJECTS_TABLE,
            params={"select": ",".join(PROJECT_COLUMNS), "order": "created_at.desc"},
        )
        return [Project.from_row(r) for r in rows or [] if isinstance(r, dict)]

    def get_project(self, project_id: str) -> Project | None:
        rows = self._request(
            "GET",
            PROJECTS_TABLE,
            params={"select": ",".join(PROJECT_COLUMNS), "id": f"eq.{project_id}", "limit": "1"},
        )
        if not rows:
            return None
        return Project.from_row(rows[0])

    def create_project(self, draft: ProjectDraft, user_id: str) -> Project:
        if not user_id:
            raise ValueError("user_id is required")
        problems = validate_project(draft)
        if problems:
            raise ProjectValidationError(problems)

        payload = build_payload(draft)
        payload["user_id"] = user_id
        rows = self._request("POST", PROJECTS_TABLE, json=payload, prefer="return=representation")
        if not rows:
            raise ProjectStoreError("insert returned no row")
        project = Project.from_row(rows[0])
        logger.info("Project created id=%s name=%s", project.id, project.name)
        return project

    def update_project(self, project_id: str, draft: ProjectDraft) -> None:
        problems = validate_project(draft)
        if problems:
            raise ProjectValidationError(problems)
        self._request(
            "PATCH",
            PROJECTS_TABLE,
            params={"id": f"eq.{project_id}"},
            json=build_payload(draft),
            prefer="return=minimal",
        )
        logger.info("Project updated id=%s", project_id)

    def update_task_progress(self, project_id: str, task_progress: TaskProgress) -> None:
        """Partial update: only the task_progress column."""
        self._request(
            "PATCH",
            PROJECTS_TABLE,
            params={"id": f"eq.{project_id}"},
            json={"task_progress": task_progress},
            prefer="return=minimal",
        )
        logger.debug("task_progress written id=%s days=%d", project_id, len(task_progress))

    def delete_project(self, project_id: str) -> None:
        self._request("DELETE", PROJECTS_TABLE, params={"id": f"eq.{project_id}"})
        logger.info("Project deleted id=%s", project_id)

    # ---- dropdown options ----

    def list_option_names(self, kind: str) -> list[str]:
        table = _option_table(kind)
        rows = self._request("GET", table, params={"select": "name", "order": "name.asc"})
        names = {str(r["name"]) for r in rows or [] if isinstance(r, dict) and r.get("name")}
        return sorted(names)

    def add_option_name(self, kind: str, user_id: str, name: str) -> str:
        table = _option_table(kind)
        name = (name or "").strip()
        if not name:
            raise ValueError("name is required")
        self._request("POST", table, json={"user_id": user_id, "name": name}, prefer="return=minimal")
        return name


def _option_table(kind: str) -> str:
    table = OPTION_TABLES.get(kind)
    if table is None:
        raise ValueError(f"unknown option kind: {kind!r}")
    return table


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)
