from __future__ import annotations

from typing import Generic, TypeVar

from tagwise.core.models.base import AppBaseModel
from tagwise.core.schemas.pagination import ChunkMetadata

ItemT = TypeVar("ItemT")


class PageRead(AppBaseModel, Generic[ItemT]):
    """Public page envelope: one page of a segment plus the walking metadata."""

    data: list[ItemT]
    metadata: ChunkMetadata
