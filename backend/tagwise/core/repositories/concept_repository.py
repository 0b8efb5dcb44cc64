from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from tagwise.core.models.concept import Concept
    from tagwise.core.schemas.suggestion import ExistingTagSuggestion


class ConceptRepository(ABC):
    """Abstract repository for semantic concepts and their embeddings.

    Concept ids are content-addressed, so every write is an idempotent upsert.
    """

    @abstractmethod
    async def upsert_many(self, concepts: Sequence[Concept]) -> None:  # pragma: no cover - interface only
        """Insert concepts or overwrite embedding and updated_at on id conflict."""

    @abstractmethod
    async def insert_if_absent(self, concept: Concept) -> None:  # pragma: no cover
        """Insert a concept unless its id already exists; never overwrite."""

    @abstractmethod
    async def get(self, concept_id: UUID) -> Concept | None:  # pragma: no cover
        """Fetch a concept by id or return None if not found."""

    @abstractmethod
    async def match_user_tags(
        self,
        *,
        user_id: UUID,
        embedding: Sequence[float],
        limit: int,
    ) -> Sequence[ExistingTagSuggestion]:  # pragma: no cover
        """Rank the user's non-deleted tags with a learned concept by cosine distance.

        Results are ordered by ascending distance (closest first) and carry the
        distance as `score`.
        """
