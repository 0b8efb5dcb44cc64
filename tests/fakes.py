from __future__ import annotations

import fnmatch
import re
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from tagwise.core.errors import UpstreamUnavailableError
from tagwise.core.models.concept import Concept
from tagwise.core.models.content import Content
from tagwise.core.models.content_tag import ContentTag
from tagwise.core.models.tag import Tag
from tagwise.core.repositories.concept_repository import ConceptRepository
from tagwise.core.repositories.content_repository import ContentRepository
from tagwise.core.repositories.content_tag_repository import ContentTagRepository
from tagwise.core.repositories.tag_repository import TagRepository
from tagwise.core.schemas.pagination import ChunkAnchor, ChunkScope, PaginationDirection
from tagwise.core.schemas.suggestion import ExistingTagSuggestion
from tagwise.core.services.embedding_service import EmbeddingProvider
from tagwise.utils.similarity import cosine_distance


class InMemoryChunkedRepository:
    """Row store with the same scan semantics as the PostgREST queries."""

    def __init__(self) -> None:
        self.rows: dict[UUID, Any] = {}
        self.scan_calls: list[tuple[PaginationDirection, int]] = []
        self.fetch_calls: list[list[UUID]] = []

    def _in_scope(self, row: Any, scope: ChunkScope) -> bool:
        if row.user_id != scope.user_id:
            return False
        if getattr(row, "is_deleted", False):
            return False
        return all(getattr(row, column) == value for column, value in scope.filters.items())

    def _scoped(self, scope: ChunkScope) -> list[Any]:
        return [r for r in self.rows.values() if self._in_scope(r, scope)]

    async def find_anchor(self, scope: ChunkScope, anchor_id: UUID) -> ChunkAnchor | None:
        row = self.rows.get(anchor_id)
        if row is None or not self._in_scope(row, scope):
            return None
        return ChunkAnchor(id=row.id, created_at=row.created_at)

    async def scan_ids(
        self,
        scope: ChunkScope,
        *,
        anchor: ChunkAnchor | None,
        direction: PaginationDirection,
        limit: int,
    ) -> Sequence[UUID]:
        self.scan_calls.append((direction, limit))
        rows = self._scoped(scope)
        if anchor is not None:
            key = (anchor.created_at, anchor.id)
            if direction is PaginationDirection.NEXT:
                rows = [r for r in rows if (r.created_at, r.id) <= key]
            else:
                rows = [r for r in rows if (r.created_at, r.id) > key]
        rows.sort(key=lambda r: (r.created_at, r.id), reverse=direction is PaginationDirection.NEXT)
        return [r.id for r in rows[:limit]]

    async def fetch_by_ids(self, scope: ChunkScope, ids: Sequence[UUID]) -> Sequence[Any]:
        self.fetch_calls.append(list(ids))
        wanted = set(ids)
        # Deliberately unordered, like an IN query
        return [self._hydrate(r) for r in reversed(self._scoped(scope)) if r.id in wanted]

    def _hydrate(self, row: Any) -> Any:
        return row


class InMemoryTagRepository(InMemoryChunkedRepository, TagRepository):
    async def upsert(self, tag: Tag) -> Tag:
        existing = self.rows.get(tag.id)
        stored = tag.model_copy(
            update={
                "is_deleted": False,
                "updated_at": datetime.now(UTC),
                "created_at": existing.created_at if existing else tag.created_at,
            }
        )
        self.rows[tag.id] = stored
        return stored

    async def get(self, tag_id: UUID, user_id: UUID) -> Tag | None:
        row = self.rows.get(tag_id)
        if row is None or row.user_id != user_id or row.is_deleted:
            return None
        return row

    async def get_many(self, tag_ids: Sequence[UUID], user_id: UUID) -> Sequence[Tag]:
        return [t for i in tag_ids if (t := await self.get(i, user_id)) is not None]

    async def update_fields(self, tag_id: UUID, user_id: UUID, changes: dict) -> Tag | None:
        row = await self.get(tag_id, user_id)
        if row is None:
            return None
        updated = row.model_copy(update={**changes, "updated_at": datetime.now(UTC)})
        self.rows[tag_id] = updated
        return updated

    async def soft_delete(self, tag_id: UUID, user_id: UUID) -> bool:
        row = await self.get(tag_id, user_id)
        if row is None:
            return False
        self.rows[tag_id] = row.model_copy(update={"is_deleted": True})
        return True


class InMemoryContentRepository(InMemoryChunkedRepository, ContentRepository):
    async def create(self, content: Content) -> Content:
        self.rows[content.id] = content
        return content

    async def get(self, content_id: UUID, user_id: UUID) -> Content | None:
        row = self.rows.get(content_id)
        if row is None or row.user_id != user_id or row.is_deleted:
            return None
        return row

    async def get_many(self, content_ids: Sequence[UUID], user_id: UUID) -> Sequence[Content]:
        return [c for i in content_ids if (c := await self.get(i, user_id)) is not None]

    async def update_fields(self, content_id: UUID, user_id: UUID, changes: dict) -> Content | None:
        row = await self.get(content_id, user_id)
        if row is None:
            return None
        updated = row.model_copy(update={**changes, "updated_at": datetime.now(UTC)})
        self.rows[content_id] = updated
        return updated

    async def soft_delete(self, content_id: UUID, user_id: UUID) -> bool:
        row = await self.get(content_id, user_id)
        if row is None:
            return False
        self.rows[content_id] = row.model_copy(update={"is_deleted": True})
        return True


class InMemoryContentTagRepository(InMemoryChunkedRepository, ContentTagRepository):
    def __init__(self, tags: InMemoryTagRepository) -> None:
        super().__init__()
        self._tags = tags

    def _tag_is_live(self, row: ContentTag) -> bool:
        tag = self._tags.rows.get(row.tag_id)
        return tag is not None and not tag.is_deleted

    def _in_scope(self, row: ContentTag, scope: ChunkScope) -> bool:
        return super()._in_scope(row, scope) and self._tag_is_live(row)

    def _hydrate(self, row: ContentTag) -> ContentTag:
        tag = self._tags.rows.get(row.tag_id)
        if tag is None:
            return row
        return row.model_copy(update={"name": tag.name, "semantic": tag.semantic})

    async def add_many(self, links: Sequence[ContentTag]) -> int:
        for link in links:
            self.rows.setdefault(link.id, link)
        return len(links)

    async def remove_many(self, content_id: UUID, tag_ids: Sequence[UUID], user_id: UUID) -> int:
        doomed = [
            r.id for r in self.rows.values()
            if r.user_id == user_id and r.content_id == content_id and r.tag_id in set(tag_ids)
        ]
        for link_id in doomed:
            del self.rows[link_id]
        return len(doomed)

    async def get(self, content_id: UUID, tag_id: UUID, user_id: UUID) -> ContentTag | None:
        for row in self.rows.values():
            if (
                row.user_id == user_id
                and row.content_id == content_id
                and row.tag_id == tag_id
                and self._tag_is_live(row)
            ):
                return self._hydrate(row)
        return None

    async def content_ids_with_tags(self, tag_ids: Sequence[UUID], user_id: UUID) -> dict[UUID, set[UUID]]:
        grouped: dict[UUID, set[UUID]] = {}
        for row in self.rows.values():
            if row.user_id == user_id and row.tag_id in set(tag_ids) and self._tag_is_live(row):
                grouped.setdefault(row.content_id, set()).add(row.tag_id)
        return grouped


class InMemoryConceptRepository(ConceptRepository):
    """Concept store whose nearest-neighbour ranking mirrors the match_user_tags RPC."""

    def __init__(self, tags: InMemoryTagRepository) -> None:
        self.concepts: dict[UUID, Concept] = {}
        self._tags = tags

    async def upsert_many(self, concepts: Sequence[Concept]) -> None:
        for concept in concepts:
            existing = self.concepts.get(concept.id)
            created_at = existing.created_at if existing else concept.created_at
            self.concepts[concept.id] = concept.model_copy(update={"created_at": created_at})

    async def insert_if_absent(self, concept: Concept) -> None:
        self.concepts.setdefault(concept.id, concept)

    async def get(self, concept_id: UUID) -> Concept | None:
        return self.concepts.get(concept_id)

    async def match_user_tags(
        self,
        *,
        user_id: UUID,
        embedding: Sequence[float],
        limit: int,
    ) -> Sequence[ExistingTagSuggestion]:
        ranked: list[ExistingTagSuggestion] = []
        for tag in self._tags.rows.values():
            if tag.user_id != user_id or tag.is_deleted or tag.concept_id is None:
                continue
            concept = self.concepts.get(tag.concept_id)
            if concept is None or concept.embedding is None:
                continue
            ranked.append(
                ExistingTagSuggestion(
                    tag_id=tag.id,
                    name=tag.name,
                    score=cosine_distance(concept.embedding, embedding),
                )
            )
        ranked.sort(key=lambda s: (s.score, s.tag_id))
        return ranked[:limit]


# Axis per topic; words outside every topic land on the last axis
TOPIC_WORDS: dict[int, frozenset[str]] = {
    0: frozenset({"trip", "tokyo", "spring", "booking", "flights", "hotels", "travel", "vacations"}),
    1: frozenset({"office", "tasks", "work", "meeting", "deadline"}),
}
_WORD_RE = re.compile(r"[a-z]+")


class FakeEmbeddingProvider(EmbeddingProvider):
    """Deterministic bag-of-topics embedder.

    `fail_batches` breaks multi-input calls only (keyword ranking), while
    `fail_all` breaks every call.
    """

    def __init__(self, *, fail_batches: bool = False, fail_all: bool = False) -> None:
        self.fail_batches = fail_batches
        self.fail_all = fail_all
        self.calls: list[list[str]] = []

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self.fail_all or (self.fail_batches and len(texts) > 1):
            raise UpstreamUnavailableError("embedding provider is down")
        return [self.vector_for(t) for t in texts]

    @staticmethod
    def vector_for(text: str) -> list[float]:
        vector = [0.0] * (len(TOPIC_WORDS) + 1)
        for word in _WORD_RE.findall(text.lower()):
            axis = next((i for i, words in TOPIC_WORDS.items() if word in words), len(TOPIC_WORDS))
            vector[axis] += 1.0
        return vector


class FakeRedis:
    """Dict-backed stand-in for the redis.asyncio calls the cache makes."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.store[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    async def scan_iter(self, match: str | None = None, count: int | None = None):  # noqa: ARG002
        for key in list(self.store):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    async def ping(self) -> bool:
        return True


class BrokenRedis:
    """Every call fails as if the server were unreachable."""

    async def get(self, key: str) -> str | None:
        raise ConnectionError("redis down")

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        raise ConnectionError("redis down")

    async def delete(self, *keys: str) -> int:
        raise ConnectionError("redis down")

    async def scan_iter(self, match: str | None = None, count: int | None = None):  # noqa: ARG002
        raise ConnectionError("redis down")
        yield  # pragma: no cover


def keys_matching(redis: FakeRedis, pattern: str) -> list[str]:
    return [k for k in redis.store if fnmatch.fnmatchcase(k, pattern)]


def ids_of(rows: Iterable[Any]) -> list[UUID]:
    return [r.id for r in rows]
