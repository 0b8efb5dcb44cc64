from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from tagwise.core.errors import InvalidArgumentError
from tagwise.core.models.content import Content, ContentType
from tagwise.core.schemas.pagination import (
    ChunkMetadata,
    ChunkPage,
    ChunkScope,
    PaginationDirection,
)
from tagwise.core.services.cache_service import CacheService
from tagwise.core.services.pagination import ChunkPaginator
from tagwise.core.services.suggestion_service import suggestion_cache_key
from tagwise.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tagwise.core.repositories.content_repository import ContentRepository
    from tagwise.core.repositories.content_tag_repository import ContentTagRepository

logger = get_logger(__name__)

DEFAULT_YOUTUBE_TITLE = "YouTube Video"


@dataclass(frozen=True, slots=True)
class ContentUpdateResult:
    content: Content
    body_changed: bool


class ContentService:
    """Service for managing content items with user-scoped access.

    Reads go through the cache; every write drops the owner's list pages and the
    item's cached detail so the next read sees the change.
    """

    def __init__(
        self,
        repo: ContentRepository,
        links: ContentTagRepository,
        cache: CacheService,
        *,
        segment_size: int,
    ) -> None:
        self._repo = repo
        self._links = links
        self._cache = cache
        self._paginator: ChunkPaginator[Content] = ChunkPaginator(repo, segment_size=segment_size)

    async def create_text_content(
        self,
        *,
        title: str,
        body: str,
        user_id: UUID,
        content_type: ContentType = ContentType.PLAIN_TEXT,
    ) -> Content:
        return await self._create(
            title=title,
            body=body,
            content_type=content_type,
            user_id=user_id,
            metadata={},
        )

    async def create_youtube_content(
        self,
        *,
        url: str,
        user_id: UUID,
        title: str | None = None,
        description: str | None = None,
        transcript: str | None = None,
    ) -> Content:
        """Store a video reference. The transcript is supplied by the caller, never fetched."""
        if not url.strip():
            raise InvalidArgumentError("YouTube url must be non-empty")
        resolved_title = (title or "").strip() or DEFAULT_YOUTUBE_TITLE
        body = f"{resolved_title}\n\n{description or ''}\n\n{transcript or ''}"
        return await self._create(
            title=resolved_title,
            body=body,
            content_type=ContentType.YOUTUBE_VIDEO,
            user_id=user_id,
            metadata={
                "youtube_url": url.strip(),
                "user_description": description,
                "transcript": transcript,
            },
        )

    async def _create(
        self,
        *,
        title: str,
        body: str,
        content_type: ContentType,
        user_id: UUID,
        metadata: dict[str, Any],
    ) -> Content:
        if not title or not title.strip():
            raise InvalidArgumentError("Content title must be non-empty")

        content = Content(
            id=uuid4(),
            user_id=user_id,
            title=title,
            body=body or "",
            content_type=content_type,
            metadata=metadata,
        )
        stored = await self._repo.create(content)
        logger.info("Content created: %s (%s)", stored.title, stored.id)
        await self._invalidate_caches(user_id, stored.id, include_suggestions=False)
        return stored

    async def update_content(
        self,
        content_id: UUID,
        user_id: UUID,
        *,
        title: str | None = None,
        body: str | None = None,
        content_type: ContentType | None = None,
    ) -> ContentUpdateResult | None:
        """Partially update a content item. Returns None if it is missing or not the user's."""
        existing = await self._repo.get(content_id, user_id)
        if not existing:
            return None

        changes: dict[str, Any] = {}
        if title is not None:
            if not title.strip():
                raise InvalidArgumentError("Content title must be non-empty")
            changes["title"] = title.strip()
        if body is not None:
            changes["body"] = body
        if content_type is not None:
            changes["content_type"] = content_type

        updated = await self._repo.update_fields(content_id, user_id, changes)
        if updated is None:
            return None

        body_changed = body is not None and body != existing.body
        await self._invalidate_caches(user_id, content_id, include_suggestions=body_changed)
        return ContentUpdateResult(content=updated, body_changed=body_changed)

    async def delete_content(self, content_id: UUID, user_id: UUID) -> bool:
        deleted = await self._repo.soft_delete(content_id, user_id)
        if deleted:
            await self._invalidate_caches(user_id, content_id, include_suggestions=True)
        return deleted

    async def get_content(self, content_id: str | UUID, user_id: UUID) -> Content | None:
        """Return the content item if it exists and belongs to the user; otherwise None."""
        try:
            content_uuid = UUID(str(content_id))
        except ValueError:
            return None

        key = self._detail_key(user_id, content_uuid)
        cached = await self._cache.get(key)
        if cached is not None:
            return Content.model_validate(cached)

        content = await self._repo.get(content_uuid, user_id)
        if content is not None:
            await self._cache.set(key, content.model_dump(mode="json"))
        return content

    async def list_contents(
        self,
        user_id: UUID,
        *,
        chunk_id: UUID | None = None,
        limit: int = 20,
        offset: int = 0,
        direction: PaginationDirection = PaginationDirection.NEXT,
    ) -> ChunkPage[Content]:
        """List the user's content newest first; each page is cached until the next write."""
        key = CacheService.generate_key(
            "contents", "list", user_id, chunk_id or "root", limit, offset, direction.value
        )
        cached = await self._cache.get(key)
        if cached is not None:
            return ChunkPage[Content].model_validate(cached)

        page = await self._paginator.paginate(
            ChunkScope(user_id=user_id),
            chunk_id=chunk_id,
            limit=limit,
            offset=offset,
            direction=direction,
        )
        await self._cache.set(key, page.model_dump(mode="json"))
        return page

    async def list_contents_by_tags(
        self,
        user_id: UUID,
        tag_ids: Sequence[UUID],
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> ChunkPage[Content]:
        """List content linked to every one of `tag_ids`, newest first.

        Plain limit/offset paging; the result carries no chunk anchors.
        """
        if not tag_ids:
            raise InvalidArgumentError("At least one tag id is required")
        if offset < 0:
            raise InvalidArgumentError(f"Offset cannot be negative (got {offset}).")
        if limit < 1:
            raise InvalidArgumentError(f"Limit must be at least 1 (got {limit}).")

        wanted = set(tag_ids)
        key = CacheService.generate_key(
            "contents", "list-filtered", user_id, ",".join(sorted(str(t) for t in wanted)), limit, offset
        )
        cached = await self._cache.get(key)
        if cached is not None:
            return ChunkPage[Content].model_validate(cached)

        linked = await self._links.content_ids_with_tags(list(wanted), user_id)
        matching = [content_id for content_id, tags in linked.items() if tags >= wanted]
        contents = await self._repo.get_many(matching, user_id)
        ordered = sorted(contents, key=lambda c: (c.created_at, c.id), reverse=True)
        data = ordered[offset:offset + limit]

        page = ChunkPage(
            data=data,
            metadata=ChunkMetadata(
                chunk_size=limit,
                chunk_total_items=len(data),
                limit=limit,
                offset=offset,
            ),
        )
        await self._cache.set(key, page.model_dump(mode="json"))
        return page

    @staticmethod
    def _detail_key(user_id: UUID, content_id: UUID) -> str:
        return CacheService.generate_key("contents", "detail", user_id, content_id)

    async def _invalidate_caches(self, user_id: UUID, content_id: UUID, *, include_suggestions: bool) -> None:
        """Drop every list page of the owner and, optionally, the item's suggestions."""
        patterns = [
            CacheService.generate_key("contents", "list", user_id, "*"),
            CacheService.generate_key("contents", "list-filtered", user_id, "*"),
        ]
        tasks = [self._cache.delete_by_pattern(p) for p in patterns]
        tasks.append(self._cache.delete(self._detail_key(user_id, content_id)))
        if include_suggestions:
            tasks.append(self._cache.delete(suggestion_cache_key(user_id, content_id)))
        await asyncio.gather(*tasks)
