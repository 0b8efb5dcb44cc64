from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from tagwise.core.models.base import AppBaseModel


class TagCreate(AppBaseModel):
    name: str = Field(min_length=1, max_length=100, description="Tag display name")
    semantic: str = Field(default="", max_length=1000, description="What the tag means, used for suggestions")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Tag name must be non-empty")
        return stripped


class TagUpdate(AppBaseModel):
    name: str | None = Field(default=None, max_length=100)
    semantic: str | None = Field(default=None, max_length=1000)


class TagRead(AppBaseModel):
    id: UUID
    user_id: UUID
    name: str
    semantic: str
    concept_id: UUID | None
    created_at: datetime
    updated_at: datetime | None
