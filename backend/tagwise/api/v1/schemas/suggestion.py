from __future__ import annotations

from pydantic import Field

from tagwise.core.models.base import AppBaseModel


class SuggestionRequest(AppBaseModel):
    content: str = Field(min_length=1, max_length=200_000, description="Text to suggest tags for")
    suggestions_count: int | None = Field(default=None, ge=0, le=100, description="Existing tags to return")
