from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cinemaflix.domain.entities.user_session import UserSession


class UserPayload(BaseModel):
    """User object handed back by the OAuth callback redirect."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    google_id: str | None = Field(default=None, alias="googleId")
    name: str | None = None
    email: str | None = None
    picture: str | None = None

    def to_domain(self) -> UserSession:
        user_id = self.google_id or self.id
        if not user_id:
            raise ValueError("User payload has neither google_id nor id")
        return UserSession(user_id=user_id, name=self.name, email=self.email, picture=self.picture)


def parse_callback_user(raw: str) -> UserSession:
    """Parse the `user` query parameter of the auth callback. Raises ValueError."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError("User payload is not valid JSON") from e
    if not isinstance(data, dict):
        raise ValueError("User payload must be a JSON object")
    try:
        payload = UserPayload.model_validate(data)
    except ValidationError as e:
        raise ValueError(str(e)) from e
    return payload.to_domain()
