from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from typing import Any
from uuid import UUID  # noqa: TCH003

from pydantic import Field, model_validator

from tagwise.core.models.base import AppBaseModel
from tagwise.core.models.content import ContentType


class TextContentCreate(AppBaseModel):
    title: str = Field(min_length=1, max_length=500, description="Content title")
    content: str = Field(default="", max_length=200_000, description="Content body")
    content_type: ContentType = Field(default=ContentType.PLAIN_TEXT, description="Kind of content")

    @model_validator(mode="after")
    def validate_kind(self) -> TextContentCreate:
        if self.content_type is ContentType.YOUTUBE_VIDEO:
            raise ValueError("Use the YouTube endpoint for video content")
        self.title = self.title.strip()
        if not self.title:
            raise ValueError("Content title must be non-empty")
        return self


class YoutubeContentCreate(AppBaseModel):
    url: str = Field(min_length=1, max_length=2048, description="Video URL")
    title: str | None = Field(default=None, max_length=500)
    description: str | None = Field(default=None, max_length=10_000)
    transcript: str | None = Field(default=None, description="Transcript text supplied by the client")


class ContentUpdate(AppBaseModel):
    title: str | None = Field(default=None, max_length=500)
    content: str | None = Field(default=None, max_length=200_000)
    content_type: ContentType | None = None

    @model_validator(mode="after")
    def normalize_optional_strings(self) -> ContentUpdate:
        # An empty title means "leave unchanged"
        if self.title is not None and self.title.strip() == "":
            self.title = None
        return self


class ContentRead(AppBaseModel):
    id: UUID
    user_id: UUID
    title: str
    body: str
    content_type: ContentType
    metadata: dict[str, Any]
    created_at: datetime
    updated_at: datetime | None
