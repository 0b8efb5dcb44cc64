from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from .base import SoftDeletableModel


class Tag(SoftDeletableModel):
    """User tag domain model.

    `id` is derived from (name, user_id) so re-creating a tag with the same
    name upserts the existing row instead of adding a duplicate.
    """

    name: str = Field(min_length=1, max_length=100, description="Tag display name")
    semantic: str = Field(default="", max_length=1000, description="Free-text meaning used for embedding")
    concept_id: UUID | None = Field(default=None, description="Concept row holding the semantic embedding")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Tag name must be non-empty")
        return stripped

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "travel",
                    "semantic": "travel and vacations",
                }
            ]
        }
    }
