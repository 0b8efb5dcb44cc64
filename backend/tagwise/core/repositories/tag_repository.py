from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from tagwise.core.models.tag import Tag
from tagwise.core.repositories.chunked_repository import ChunkedRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class TagRepository(ChunkedRepository[Tag]):
    """Abstract repository interface for user tags.

    Contract used by services and dependency injection. Implementations should
    perform I/O (database, network) and therefore expose async methods.
    """

    @abstractmethod
    async def upsert(self, tag: Tag) -> Tag:  # pragma: no cover - interface only
        """Insert the tag or, on id conflict, revive it and overwrite name/semantic/concept."""

    @abstractmethod
    async def get(self, tag_id: UUID, user_id: UUID) -> Tag | None:  # pragma: no cover
        """Fetch a non-deleted tag owned by `user_id`, or None."""

    @abstractmethod
    async def get_many(self, tag_ids: Sequence[UUID], user_id: UUID) -> Sequence[Tag]:  # pragma: no cover
        """Fetch the non-deleted tags among `tag_ids` owned by `user_id`."""

    @abstractmethod
    async def update_fields(self, tag_id: UUID, user_id: UUID, changes: dict) -> Tag | None:  # pragma: no cover
        """Partially update a non-deleted tag and return it, or None if missing."""

    @abstractmethod
    async def soft_delete(self, tag_id: UUID, user_id: UUID) -> bool:  # pragma: no cover
        """Mark a tag deleted. Return True if a row was touched."""
