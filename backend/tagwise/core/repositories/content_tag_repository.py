from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from tagwise.core.models.content_tag import ContentTag
from tagwise.core.repositories.chunked_repository import ChunkedRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class ContentTagRepository(ChunkedRepository[ContentTag]):
    """Abstract repository interface for content/tag links.

    Chunk scopes for this repository carry a `content_id` filter.
    """

    @abstractmethod
    async def add_many(self, links: Sequence[ContentTag]) -> int:  # pragma: no cover - interface only
        """Insert links, ignoring ones that already exist. Return the number submitted."""

    @abstractmethod
    async def remove_many(self, content_id: UUID, tag_ids: Sequence[UUID], user_id: UUID) -> int:  # pragma: no cover
        """Remove links between `content_id` and `tag_ids`. Return the number removed."""

    @abstractmethod
    async def get(self, content_id: UUID, tag_id: UUID, user_id: UUID) -> ContentTag | None:  # pragma: no cover
        """Fetch one link with its tag name/semantic, or None."""

    @abstractmethod
    async def content_ids_with_tags(self, tag_ids: Sequence[UUID], user_id: UUID) -> dict[UUID, set[UUID]]:  # pragma: no cover
        """Map content id to the subset of `tag_ids` linked to it."""
