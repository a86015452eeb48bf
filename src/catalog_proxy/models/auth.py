"""Auth-related data models."""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel


class Credential(BaseModel):
    """A bearer token and the window in which it is trusted.

    Frozen so a renewal always swaps in a whole new record.
    """
    token: str
    issued_at: datetime
    expires_at: datetime

    model_config = {"frozen": True}

    @classmethod
    def issue(cls, token: str, now: datetime, ttl_seconds: int) -> Credential:
        return cls(token=token, issued_at=now, expires_at=now + timedelta(seconds=ttl_seconds))

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


class TokenStatus(BaseModel):
    """Current state of the cached credential."""
    has_token: bool
    is_expired: bool
    expires_at: datetime | None = None
    seconds_remaining: int | None = None
