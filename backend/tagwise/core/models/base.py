from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID  # noqa: TCH003

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict, Field


class AppBaseModel(PydanticBaseModel):
    """Shared config: built from rows or objects, unknown keys rejected."""

    model_config = ConfigDict(
        from_attributes=True,
        extra="forbid",
        populate_by_name=True,
    )


class TimestampedModel(AppBaseModel):
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None


class OwnedModel(TimestampedModel):
    """Row scoped to a single owner. Every store query filters on `user_id`."""

    id: UUID
    user_id: UUID


class SoftDeletableModel(OwnedModel):
    """Owned row that is hidden from reads instead of being removed."""

    is_deleted: bool = Field(default=False, description="Soft-delete marker")
