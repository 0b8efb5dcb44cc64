from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from tagwise.core.schemas.pagination import ChunkAnchor, ChunkScope, PaginationDirection

T = TypeVar("T")


class ChunkedRepository(ABC, Generic[T]):
    """Storage contract consumed by the chunked pagination engine.

    Rows are totally ordered by (created_at, id). Every method must apply the
    scope's owner and equality filters (and skip soft-deleted rows where the
    table has them) in the store query itself.
    """

    @abstractmethod
    async def find_anchor(self, scope: ChunkScope, anchor_id: UUID) -> ChunkAnchor | None:  # pragma: no cover
        """Return the ordering key of `anchor_id` within the scope, or None if absent."""

    @abstractmethod
    async def scan_ids(
        self,
        scope: ChunkScope,
        *,
        anchor: ChunkAnchor | None,
        direction: PaginationDirection,
        limit: int,
    ) -> Sequence[UUID]:  # pragma: no cover
        """Return up to `limit` ids only.

        NEXT: `(created_at, id) <= anchor`, ordered descending.
        PREVIOUS: `(created_at, id) > anchor`, ordered ascending.
        Without an anchor the whole scope is scanned in the direction's order.
        """

    @abstractmethod
    async def fetch_by_ids(self, scope: ChunkScope, ids: Sequence[UUID]) -> Sequence[T]:  # pragma: no cover
        """Fetch full rows for `ids`. Result order is unspecified; missing ids are skipped."""
