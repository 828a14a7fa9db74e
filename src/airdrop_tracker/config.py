# src/airdrop_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- The backend client is NOT created here; bootstrap builds it from Settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "AIRDROP"

PROGRESS_SOURCES = ("remote", "local", "auto")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = (os.getenv(name) or "").strip().lower()
    return raw if raw in choices else default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Hosted backend (REST table API + auth) ----
    backend_url: str
    backend_anon_key: str
    backend_access_token: str | None
    backend_user_id: str | None
    request_timeout_seconds: float

    # ---- Progress tracking ----
    # remote | local | auto (remote when a session exists, local otherwise)
    progress_source: str
    prune_stale_progress: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    cache_db_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "airdrop-tracker")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        # Accept the web app's public variable names as a fallback.
        backend_url = (
            _first_env(_k("BACKEND_URL"), "NEXT_PUBLIC_SUPABASE_URL", "SUPABASE_URL", default="") or ""
        ).strip().rstrip("/")
        backend_anon_key = (
            _first_env(
                _k("BACKEND_ANON_KEY"),
                "NEXT_PUBLIC_SUPABASE_ANON_KEY",
                "SUPABASE_ANON_KEY",
                default="",
            )
            or ""
        ).strip()
        backend_access_token = _first_env(_k("ACCESS_TOKEN"), default=None)
        backend_user_id = _first_env(_k("USER_ID"), default=None)
        request_timeout_seconds = max(1.0, _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 10.0))

        progress_source = _env_choice(_k("PROGRESS_SOURCE"), PROGRESS_SOURCES, "auto")
        prune_stale_progress = _env_bool(_k("PRUNE_STALE_PROGRESS"), False)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/airdrop"))
        cache_db_path = _env_path(_k("CACHE_DB_PATH"), data_dir / "local_cache.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            backend_url=backend_url,
            backend_anon_key=backend_anon_key,
            backend_access_token=backend_access_token.strip() if backend_access_token else None,
            backend_user_id=backend_user_id.strip() if backend_user_id else None,
            request_timeout_seconds=request_timeout_seconds,
            progress_source=progress_source,
            prune_stale_progress=prune_stale_progress,
            data_dir=data_dir,
            cache_db_path=cache_db_path,
        )


SETTINGS = Settings.from_env()

# ---- Optional local overrides (never committed) ----
# Prefer .env for secrets; use config_local.py only for safe overrides.
try:
    import config_local as _config_local  # type: ignore

    if getattr(_config_local, "PROGRESS_SOURCE", None) in PROGRESS_SOURCES:
        object.__setattr__(SETTINGS, "progress_source", _config_local.PROGRESS_SOURCE)  # type: ignore[misc]
    if hasattr(_config_local, "PRUNE_STALE_PROGRESS"):
        object.__setattr__(  # type: ignore[misc]
            SETTINGS, "prune_stale_progress", bool(_config_local.PRUNE_STALE_PROGRESS)
        )
except Exception:
    pass


def get_settings() -> Settings:
    return SETTINGS
