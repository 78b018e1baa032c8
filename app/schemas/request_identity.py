from __future__ import annotations

from pydantic import BaseModel, Field


class RequestIdentity(BaseModel):
    subject: str | None = None
    email: str | None = None
    username: str | None = None
    auth_source: str = "anonymous"
    claims: dict = Field(default_factory=dict)
    # set for local-account sessions
    user_id: int | None = None

    @property
    def actor(self) -> str:
        return self.email or self.username or self.subject or "system@local"
