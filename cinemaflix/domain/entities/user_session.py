from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserSession:
    user_id: str  # google id, falls back to the account id
    name: str | None = None
    email: str | None = None
    picture: str | None = None
