from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field

from tagwise.core.models.base import AppBaseModel


class ContentTagsRequest(AppBaseModel):
    tag_ids: list[UUID] = Field(min_length=1, max_length=100, description="Tags to link or unlink")


class ContentTagsChanged(AppBaseModel):
    content_id: UUID
    count: int


class ContentTagRead(AppBaseModel):
    id: UUID
    content_id: UUID
    tag_id: UUID
    name: str
    semantic: str
    created_at: datetime
