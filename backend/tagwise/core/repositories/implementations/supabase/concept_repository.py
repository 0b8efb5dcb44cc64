from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tagwise.core.models.concept import Concept
from tagwise.core.repositories.concept_repository import ConceptRepository
from tagwise.core.repositories.implementations.supabase.base import SupabaseRepository
from tagwise.core.schemas.suggestion import ExistingTagSuggestion

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class SupabaseConceptRepository(SupabaseRepository, ConceptRepository):
    """Supabase implementation of the ConceptRepository over `tag_concepts`.

    Nearest-neighbour ranking is pushed down to the `match_user_tags` RPC,
    which orders by pgvector's cosine distance operator (`<=>`).
    """

    TABLE_NAME = "tag_concepts"

    async def upsert_many(self, concepts: Sequence[Concept]) -> None:
        if not concepts:
            return
        rows = [self._concept_to_row(c) for c in concepts]
        for row in rows:
            row.pop("created_at", None)
        await self._run(
            lambda: self._table()
            .upsert(rows, on_conflict="id")
            .execute()
        )

    async def insert_if_absent(self, concept: Concept) -> None:
        row = self._concept_to_row(concept)
        await self._run(
            lambda: self._table()
            .upsert(row, on_conflict="id", ignore_duplicates=True)
            .execute()
        )

    async def get(self, concept_id: UUID) -> Concept | None:
        resp = await self._run(
            lambda: self._table()
            .select("*")
            .eq("id", str(concept_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_concept(items[0])

    async def match_user_tags(
        self,
        *,
        user_id: UUID,
        embedding: Sequence[float],
        limit: int,
    ) -> Sequence[ExistingTagSuggestion]:
        def _rpc():
            params: dict[str, Any] = {
                "p_user_id": str(user_id),
                "p_embedding": self._format_vector(embedding),
                "p_limit": limit,
            }
            return self._client.rpc("match_user_tags", params=params).execute()

        resp = await self._run(_rpc)
        rows: list[dict[str, Any]] = resp.data or []
        return [
            ExistingTagSuggestion(tag_id=r["tag_id"], name=r["name"], score=float(r["distance"]))
            for r in rows
        ]

    def _concept_to_row(self, concept: Concept) -> dict[str, Any]:
        data = concept.model_dump(mode="json")
        if concept.embedding is not None:
            data["embedding"] = self._format_vector(concept.embedding)
        if data.get("updated_at") is None:
            data.pop("updated_at", None)
        return data

    def _row_to_concept(self, row: dict[str, Any]) -> Concept:
        normalized = dict(row)
        if "embedding" in normalized:
            normalized["embedding"] = self._parse_vector_string(normalized["embedding"])
        return Concept.model_validate(normalized)
