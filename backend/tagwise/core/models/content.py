from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field, model_validator

from .base import SoftDeletableModel


class ContentType(str, Enum):
    """Kind of stored content."""

    PLAIN_TEXT = "PLAIN_TEXT"
    MARKDOWN = "MARKDOWN"
    JSON = "JSON"
    YOUTUBE_VIDEO = "YOUTUBE_VIDEO"


class Content(SoftDeletableModel):
    """Content item domain model. Owned by one user and never hard-deleted."""

    title: str = Field(max_length=500, description="Content title")
    body: str = Field(default="", description="Text used for suggestions")
    content_type: ContentType = Field(default=ContentType.PLAIN_TEXT, description="Kind of content")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Type-specific extras")

    @model_validator(mode="after")
    def validate_title(self) -> Content:
        title = self.title.strip()
        if not title:
            raise ValueError("Content title must be non-empty")
        self.title = title
        return self
