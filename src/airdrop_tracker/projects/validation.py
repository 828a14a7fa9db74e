# src/airdrop_tracker/projects/validation.py

"""Project form rules: URL checks, required fields, and the row payload sent to the store."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from .project_models import LoginType, ProjectDraft, ProjectStatus


def is_valid_url(value: str | None) -> bool:
    """Empty is allowed; anything else must be an http(s) URL with a host."""
    if not value:
        return True
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def validate_project(draft: ProjectDraft) -> list[str]:
    problems: list[str] = []

    if not draft.name.strip():
        problems.append("name is required")

    for i, link in enumerate(draft.links, start=1):
        if not is_valid_url(link):
            problems.append(f"link {i} is not a valid http(s) URL")

    if draft.faucet_link and not is_valid_url(draft.faucet_link):
        problems.append("faucet link is not a valid http(s) URL")

    if draft.status == ProjectStatus.FINISHED and not draft.result.strip():
        problems.append("result is required when the project is finished")

    return problems


def _clean(items: list[str]) -> list[str]:
    return [s.strip() for s in items if s and s.strip()]


def build_payload(draft: ProjectDraft) -> dict[str, Any]:
    """
    Row payload for insert/update.

    Login-specific fields survive only for the matching login type; result only when finished.
    """
    login = draft.login_type
    wallet = login == LoginType.WALLET
    social = login == LoginType.SOCIAL_MEDIA

    return {
        "name": draft.name.strip(),
        "details": None,
        "status": draft.status.value,
        "login_type": login.value if login else None,
        "wallet_type": (draft.wallet_type or None) if wallet else None,
        "wallet_address": (draft.wallet_address or None) if wallet else None,
        "contact_email": (draft.contact_email or None) if login == LoginType.EMAIL else None,
        "social_type": (draft.social_type or None) if social else None,
        "social_username": (draft.social_username or None) if social else None,
        "detail_task": None,
        "tasks": _clean(draft.tasks),
        "links": _clean(draft.links),
        "faucet_link": draft.faucet_link.strip() or None,
        "result": (draft.result or None) if draft.status == ProjectStatus.FINISHED else None,
    }
