# src/airdrop_tracker/core/session.py

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthSession:
    """What the tracker needs from the auth provider: who, and whether they are signed in."""

    user_id: str | None = None
    access_token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id and self.access_token)

    @classmethod
    def from_settings(cls, settings) -> AuthSession:
        return cls(
            user_id=getattr(settings, "backend_user_id", None),
            access_token=getattr(settings, "backend_access_token", None),
        )


ANONYMOUS = AuthSession()
