from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from pydantic import Field

from .base import OwnedModel


class ContentTag(OwnedModel):
    """Link between a content item and one of the owner's tags.

    Links are only appended or removed, never updated. `name` and `semantic`
    are read from the linked tag when listing.
    """

    content_id: UUID
    tag_id: UUID
    name: str = Field(default="", description="Linked tag name")
    semantic: str = Field(default="", description="Linked tag semantic")
