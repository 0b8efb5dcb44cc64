from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from tagwise.core.models.content import Content
from tagwise.core.repositories.chunked_repository import ChunkedRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class ContentRepository(ChunkedRepository[Content]):
    """Abstract repository interface for content items."""

    @abstractmethod
    async def create(self, content: Content) -> Content:  # pragma: no cover - interface only
        """Persist a new content item and return the stored entity."""

    @abstractmethod
    async def get(self, content_id: UUID, user_id: UUID) -> Content | None:  # pragma: no cover
        """Fetch a non-deleted content item owned by `user_id`, or None."""

    @abstractmethod
    async def get_many(self, content_ids: Sequence[UUID], user_id: UUID) -> Sequence[Content]:  # pragma: no cover
        """Fetch the non-deleted content items among `content_ids` owned by `user_id`."""

    @abstractmethod
    async def update_fields(self, content_id: UUID, user_id: UUID, changes: dict) -> Content | None:  # pragma: no cover
        """Partially update a non-deleted content item and return it, or None if missing."""

    @abstractmethod
    async def soft_delete(self, content_id: UUID, user_id: UUID) -> bool:  # pragma: no cover
        """Mark a content item deleted. Return True if a row was touched."""
