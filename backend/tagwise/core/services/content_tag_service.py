from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from tagwise.core.models.content_tag import ContentTag
from tagwise.core.schemas.pagination import ChunkScope, PaginationDirection
from tagwise.core.services.cache_service import CacheService
from tagwise.core.services.pagination import ChunkPaginator
from tagwise.utils.ids import content_tag_id_for
from tagwise.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tagwise.core.repositories.content_repository import ContentRepository
    from tagwise.core.repositories.content_tag_repository import ContentTagRepository
    from tagwise.core.repositories.tag_repository import TagRepository
    from tagwise.core.schemas.pagination import ChunkPage

logger = get_logger(__name__)


class ContentTagService:
    """Links a user's tags to their content items."""

    def __init__(
        self,
        repo: ContentTagRepository,
        contents: ContentRepository,
        tags: TagRepository,
        cache: CacheService,
        *,
        segment_size: int,
    ) -> None:
        self._repo = repo
        self._contents = contents
        self._tags = tags
        self._cache = cache
        self._paginator: ChunkPaginator[ContentTag] = ChunkPaginator(repo, segment_size=segment_size)

    async def add_tags_to_content(self, content_id: UUID, tag_ids: Sequence[UUID], user_id: UUID) -> int | None:
        """Link tags to a content item; returns how many tags were accepted.

        Tags the user does not own are skipped and re-adding an existing link is
        a no-op. Returns None when the content item is not the user's.
        """
        if not await self._contents.get(content_id, user_id):
            return None

        owned = {t.id for t in await self._tags.get_many(list(dict.fromkeys(tag_ids)), user_id)}
        accepted = [t for t in dict.fromkeys(tag_ids) if t in owned]
        skipped = len(set(tag_ids)) - len(accepted)
        if skipped:
            logger.warning("Skipping %d unknown tag(s) for content %s", skipped, content_id)
        if not accepted:
            return 0

        links = [
            ContentTag(
                id=content_tag_id_for(user_id, content_id, tag_id),
                user_id=user_id,
                content_id=content_id,
                tag_id=tag_id,
            )
            for tag_id in accepted
        ]
        await self._repo.add_many(links)
        await self._invalidate_filtered_lists(user_id)
        return len(accepted)

    async def remove_tags_from_content(self, content_id: UUID, tag_ids: Sequence[UUID], user_id: UUID) -> int:
        removed = await self._repo.remove_many(content_id, list(dict.fromkeys(tag_ids)), user_id)
        if removed:
            await self._invalidate_filtered_lists(user_id)
        return removed

    async def get_tag_of_content(self, content_id: UUID, tag_id: UUID, user_id: UUID) -> ContentTag | None:
        return await self._repo.get(content_id, tag_id, user_id)

    async def list_tags_of_content(
        self,
        content_id: UUID,
        user_id: UUID,
        *,
        chunk_id: UUID | None = None,
        limit: int = 20,
        offset: int = 0,
        direction: PaginationDirection = PaginationDirection.NEXT,
    ) -> ChunkPage[ContentTag]:
        return await self._paginator.paginate(
            ChunkScope(user_id=user_id, filters={"content_id": content_id}),
            chunk_id=chunk_id,
            limit=limit,
            offset=offset,
            direction=direction,
        )

    async def _invalidate_filtered_lists(self, user_id: UUID) -> None:
        await self._cache.delete_by_pattern(CacheService.generate_key("contents", "list-filtered", user_id, "*"))
