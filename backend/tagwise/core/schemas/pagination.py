from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TCH003
from enum import Enum
from typing import Any, Generic, TypeVar
from uuid import UUID  # noqa: TCH003

from pydantic import Field

from tagwise.core.models.base import AppBaseModel

T = TypeVar("T")


class PaginationDirection(str, Enum):
    """Walk direction relative to the anchor.

    NEXT walks from newest to oldest starting at the anchor (inclusive).
    PREVIOUS walks from oldest to newest over rows strictly newer than the anchor.
    """

    NEXT = "NEXT"
    PREVIOUS = "PREVIOUS"

    @property
    def opposite(self) -> PaginationDirection:
        return PaginationDirection.PREVIOUS if self is PaginationDirection.NEXT else PaginationDirection.NEXT


@dataclass(frozen=True, slots=True)
class ChunkScope:
    """Owner filter plus extra equality filters applied to every pagination query."""

    user_id: UUID
    filters: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ChunkAnchor:
    """Ordering key of the row a segment is anchored at."""

    id: UUID
    created_at: datetime


class ChunkMetadata(AppBaseModel):
    next_chunk_id: UUID | None = Field(default=None, description="Anchor of the following segment")
    prev_chunk_id: UUID | None = Field(default=None, description="Anchor of the preceding segment")
    current_chunk_id: UUID | None = Field(default=None, description="First id of this segment")
    has_next_chunk: bool = False
    chunk_size: int = Field(description="Segment capacity")
    chunk_total_items: int = Field(description="Rows found in this segment (<= chunk_size)")
    limit: int
    offset: int
    direction: PaginationDirection = PaginationDirection.NEXT


class ChunkPage(AppBaseModel, Generic[T]):
    """One page of a segment plus the metadata needed to walk further."""

    data: list[T]
    metadata: ChunkMetadata
