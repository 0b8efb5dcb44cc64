from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Generic, TypeVar

from tagwise.core.errors import InvalidArgumentError
from tagwise.core.schemas.pagination import (
    ChunkMetadata,
    ChunkPage,
    PaginationDirection,
)
from tagwise.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from tagwise.core.repositories.chunked_repository import ChunkedRepository
    from tagwise.core.schemas.pagination import ChunkAnchor, ChunkScope

logger = get_logger(__name__)

T = TypeVar("T")


def validate_page_request(*, limit: int, offset: int, segment_size: int) -> None:
    """Reject a page request that does not address a position inside one segment."""
    if offset < 0:
        raise InvalidArgumentError(f"Offset cannot be negative (got {offset}).")
    if limit < 1:
        raise InvalidArgumentError(f"Limit must be at least 1 (got {limit}).")
    if offset >= segment_size:
        raise InvalidArgumentError(
            f"Offset ({offset}) cannot equal or exceed chunk size ({segment_size})."
        )


class ChunkPaginator(Generic[T]):
    """Serves bounded pages of a (created_at DESC, id DESC) ordered collection.

    A segment is a window of at most `segment_size` rows anchored at a chunk id
    (or at the head of the ordering). The id map of a segment is loaded with a
    cheap id-only scan; `offset`/`limit` then slice that map in memory and only
    the sliced rows are fetched in full.

    An anchor that no longer resolves for the scope (deleted, foreign, or made
    up) is treated as no anchor, so clients fall back to the head of the list
    instead of getting an error.
    """

    def __init__(self, repo: ChunkedRepository[T], *, segment_size: int) -> None:
        if segment_size < 1:
            raise InvalidArgumentError(f"Segment size must be at least 1 (got {segment_size}).")
        self._repo = repo
        self._segment_size = segment_size

    @property
    def segment_size(self) -> int:
        return self._segment_size

    async def paginate(
        self,
        scope: ChunkScope,
        *,
        chunk_id: UUID | None = None,
        limit: int = 20,
        offset: int = 0,
        direction: PaginationDirection = PaginationDirection.NEXT,
    ) -> ChunkPage[T]:
        segment_size = self._segment_size
        validate_page_request(limit=limit, offset=offset, segment_size=segment_size)

        anchor = await self._resolve_anchor(scope, chunk_id)

        # The forward scan and the reverse boundary scan only share the anchor
        if anchor is not None:
            segment_ids, reverse_ids = await asyncio.gather(
                self._repo.scan_ids(scope, anchor=anchor, direction=direction, limit=segment_size + 1),
                self._repo.scan_ids(scope, anchor=anchor, direction=direction.opposite, limit=segment_size),
            )
        else:
            segment_ids = await self._repo.scan_ids(
                scope, anchor=None, direction=direction, limit=segment_size + 1
            )
            reverse_ids = []

        total_found = len(segment_ids)
        has_next_chunk = total_found > segment_size
        chunk_total_items = min(total_found, segment_size)
        next_chunk_id = segment_ids[segment_size] if has_next_chunk else None
        prev_chunk_id = reverse_ids[-1] if len(reverse_ids) == segment_size else None
        current_chunk_id = segment_ids[0] if segment_ids else None

        page_ids = list(segment_ids[:chunk_total_items][offset:offset + limit])
        data = await self._fetch_ordered(scope, page_ids)

        return ChunkPage(
            data=data,
            metadata=ChunkMetadata(
                next_chunk_id=next_chunk_id,
                prev_chunk_id=prev_chunk_id,
                current_chunk_id=current_chunk_id,
                has_next_chunk=has_next_chunk,
                chunk_size=segment_size,
                chunk_total_items=chunk_total_items,
                limit=limit,
                offset=offset,
                direction=direction,
            ),
        )

    async def _resolve_anchor(self, scope: ChunkScope, chunk_id: UUID | None) -> ChunkAnchor | None:
        if chunk_id is None:
            return None
        anchor = await self._repo.find_anchor(scope, chunk_id)
        if anchor is None:
            logger.debug("Chunk anchor %s not found for user %s; starting from the head", chunk_id, scope.user_id)
        return anchor

    async def _fetch_ordered(self, scope: ChunkScope, page_ids: Sequence[UUID]) -> list[T]:
        """Fetch rows by id and restore the id order; ids that vanished are dropped."""
        if not page_ids:
            return []
        rows = await self._repo.fetch_by_ids(scope, page_ids)
        by_id = {row.id: row for row in rows}
        return [by_id[i] for i in page_ids if i in by_id]
