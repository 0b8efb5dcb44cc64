from __future__ import annotations

from typing import Any
from uuid import UUID  # noqa: TCH003

from tagwise.core.models.base import AppBaseModel


class AuthUser(AppBaseModel):
    """Caller identity resolved from a Supabase access token."""

    id: UUID
    email: str
    role: str | None = None

    @classmethod
    def from_supabase_user(cls, user: Any) -> AuthUser | None:
        """Build from a gotrue `User`; None when the payload carries no id."""
        user_id = getattr(user, "id", None) if user else None
        if not user_id:
            return None
        return cls(
            id=user_id,
            email=getattr(user, "email", None) or "",
            role=getattr(user, "role", None),
        )
