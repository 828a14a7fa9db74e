# src/airdrop_tracker/projects/project_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

TaskProgress = dict[str, list[bool]]
# {"2025-01-31": [True, False, ...]}: one bool per task position, per day key.


class ProjectStatus(StrEnum):
    ON_PROGRESS = "On Progress"
    FINISHED = "Finished"

    @classmethod
    def from_db(cls, raw: str | None) -> ProjectStatus:
        if not raw:
            return cls.ON_PROGRESS
        try:
            return cls(raw)
        except Exception:
            return cls.ON_PROGRESS


class LoginType(StrEnum):
    """
    How the user signs in to the airdrop campaign.

    Notes:
    - older rows may carry "Social"; it is read as SOCIAL_MEDIA.
    """

    WALLET = "Wallet"
    EMAIL = "Email"
    SOCIAL_MEDIA = "Social Media"

    @classmethod
    def from_db(cls, raw: str | None) -> LoginType | None:
        if not raw:
            return None
        if raw == "Social":
            return cls.SOCIAL_MEDIA
        try:
            return cls(raw)
        except Exception:
            return None


PROJECT_COLUMNS = (
    "id",
    "user_id",
    "name",
    "details",
    "status",
    "created_at",
    "login_type",
    "wallet_type",
    "wallet_address",
    "contact_email",
    "social_type",
    "social_username",
    "detail_task",
    "links",
    "faucet_link",
    "result",
    "tasks",
    "task_progress",
)


@dataclass(slots=True)
class Project:
    id: str
    name: str
    tasks: list[str] = field(default_factory=list)
    task_progress: TaskProgress = field(default_factory=dict)

    user_id: str | None = None
    status: ProjectStatus = ProjectStatus.ON_PROGRESS
    created_at: str | None = None

    login_type: LoginType | None = None
    wallet_type: str | None = None
    wallet_address: str | None = None
    contact_email: str | None = None
    social_type: str | None = None
    social_username: str | None = None

    links: list[str] = field(default_factory=list)
    faucet_link: str | None = None
    result: str | None = None

    @property
    def task_count(self) -> int:
        return len(self.tasks)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Project:
        return cls(
            id=str(row.get("id") or ""),
            name=str(row.get("name") or ""),
            tasks=_str_list(row.get("tasks")),
            task_progress=_progress_map(row.get("task_progress")),
            user_id=row.get("user_id"),
            status=ProjectStatus.from_db(row.get("status")),
            created_at=row.get("created_at"),
            login_type=LoginType.from_db(row.get("login_type")),
            wallet_type=row.get("wallet_type"),
            wallet_address=row.get("wallet_address"),
            contact_email=row.get("contact_email"),
            social_type=row.get("social_type"),
            social_username=row.get("social_username"),
            links=_str_list(row.get("links")),
            faucet_link=row.get("faucet_link"),
            result=row.get("result"),
        )


@dataclass(slots=True)
class ProjectDraft:
    """Editable project fields, as entered in a create/edit form."""

    name: str
    status: ProjectStatus = ProjectStatus.ON_PROGRESS
    login_type: LoginType | None = None
    wallet_type: str = ""
    wallet_address: str = ""
    contact_email: str = ""
    social_type: str = ""
    social_username: str = ""
    tasks: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    faucet_link: str = ""
    result: str = ""

    @classmethod
    def from_project(cls, project: Project) -> ProjectDraft:
        return cls(
            name=project.name,
            status=project.status,
            login_type=project.login_type,
            wallet_type=project.wallet_type or "",
            wallet_address=project.wallet_address or "",
            contact_email=project.contact_email or "",
            social_type=project.social_type or "",
            social_username=project.social_username or "",
            tasks=list(project.tasks),
            links=list(project.links),
            faucet_link=project.faucet_link or "",
            result=project.result or "",
        )


def _str_list(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [str(x) for x in raw if x is not None]


def _progress_map(raw: Any) -> TaskProgress:
    if not isinstance(raw, dict):
        return {}
    out: TaskProgress = {}
    for day, flags in raw.items():
        if not isinstance(day, str) or not isinstance(flags, list):
            continue
        out[day] = [bool(f) for f in flags]
    return out
