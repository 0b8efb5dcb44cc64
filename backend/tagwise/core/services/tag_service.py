from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from tagwise.core.errors import InvalidArgumentError
from tagwise.core.models.tag import Tag
from tagwise.core.schemas.pagination import ChunkScope, PaginationDirection
from tagwise.core.services.cache_service import CacheService
from tagwise.core.services.pagination import ChunkPaginator
from tagwise.utils.ids import tag_id_for
from tagwise.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tagwise.core.repositories.tag_repository import TagRepository
    from tagwise.core.schemas.pagination import ChunkPage
    from tagwise.core.services.suggestion_service import SuggestionService

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TagWriteResult:
    """Stored tag plus the semantic that still has to be learned, if any."""

    tag: Tag
    semantic_to_learn: str | None = None


class TagService:
    """Service for managing user tags (RLS friendly, owner filtered)."""

    def __init__(
        self,
        repo: TagRepository,
        suggestions: SuggestionService,
        cache: CacheService,
        *,
        segment_size: int,
    ) -> None:
        self._repo = repo
        self._suggestions = suggestions
        self._cache = cache
        self._paginator: ChunkPaginator[Tag] = ChunkPaginator(repo, segment_size=segment_size)

    async def create_tag(self, name: str, semantic: str, user_id: UUID) -> TagWriteResult:
        """Create a tag, or revive and overwrite the user's existing tag of the same name.

        The concept row is reserved before the tag is written; its embedding is
        learned later from `semantic_to_learn`.
        """
        stripped = name.strip()
        if not stripped:
            raise InvalidArgumentError("Tag name must be non-empty")
        semantic = semantic.strip()
        concept_id = await self._suggestions.ensure_concept_exists(semantic) if semantic else None

        tag = Tag(
            id=tag_id_for(stripped, user_id),
            user_id=user_id,
            name=stripped,
            semantic=semantic,
            concept_id=concept_id,
        )
        stored = await self._repo.upsert(tag)
        logger.info("Upserted tag %s for user %s", stored.id, user_id)
        return TagWriteResult(tag=stored, semantic_to_learn=semantic or None)

    async def update_tag(
        self,
        tag_id: UUID,
        user_id: UUID,
        *,
        name: str | None = None,
        semantic: str | None = None,
    ) -> TagWriteResult | None:
        existing = await self._repo.get(tag_id, user_id)
        if not existing:
            return None

        changes: dict = {}
        if name is not None:
            stripped = name.strip()
            if not stripped:
                raise InvalidArgumentError("Tag name must be non-empty")
            changes["name"] = stripped
        semantic_to_learn = None
        if semantic is not None:
            semantic = semantic.strip()
            changes["semantic"] = semantic
            if semantic != existing.semantic:
                changes["concept_id"] = await self._suggestions.ensure_concept_exists(semantic) if semantic else None
                semantic_to_learn = semantic or None

        updated = await self._repo.update_fields(tag_id, user_id, changes)
        if updated is None:
            return None
        return TagWriteResult(tag=updated, semantic_to_learn=semantic_to_learn)

    async def delete_tag(self, tag_id: UUID, user_id: UUID) -> bool:
        deleted = await self._repo.soft_delete(tag_id, user_id)
        if deleted:
            # Cached suggestions and tag-filtered content pages may still name the tag
            await asyncio.gather(
                self._suggestions.invalidate_suggestions(user_id),
                self._cache.delete_by_pattern(CacheService.generate_key("contents", "list-filtered", user_id, "*")),
            )
        return deleted

    async def get_tag(self, tag_id: str | UUID, user_id: UUID) -> Tag | None:
        """Return the tag if it exists and belongs to the user; otherwise None."""
        try:
            tag_uuid = UUID(str(tag_id))
        except ValueError:
            return None
        return await self._repo.get(tag_uuid, user_id)

    async def get_tags_by_ids(self, tag_ids: Sequence[UUID], user_id: UUID) -> Sequence[Tag]:
        return await self._repo.get_many(list(dict.fromkeys(tag_ids)), user_id)

    async def list_tags(
        self,
        user_id: UUID,
        *,
        chunk_id: UUID | None = None,
        limit: int = 20,
        offset: int = 0,
        direction: PaginationDirection = PaginationDirection.NEXT,
    ) -> ChunkPage[Tag]:
        """List the user's tags newest first, one page of one segment at a time."""
        return await self._paginator.paginate(
            ChunkScope(user_id=user_id),
            chunk_id=chunk_id,
            limit=limit,
            offset=offset,
            direction=direction,
        )
