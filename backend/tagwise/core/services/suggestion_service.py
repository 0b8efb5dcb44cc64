from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from tagwise.core.errors import InvalidArgumentError, TagwiseError, UpstreamUnavailableError
from tagwise.core.models.concept import Concept
from tagwise.core.schemas.suggestion import (
    KeywordScore,
    PotentialTagSuggestion,
    SuggestionResult,
)
from tagwise.core.services.cache_service import CacheService
from tagwise.core.services.keyword_service import (
    DEFAULT_CANDIDATE_LIMIT,
    extract_candidates,
    keyword_limit,
)
from tagwise.utils.ids import concept_id_for, normalize
from tagwise.utils.logging import get_logger
from tagwise.utils.similarity import similarities_to

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tagwise.core.repositories.concept_repository import ConceptRepository
    from tagwise.core.services.embedding_service import EmbeddingProvider

logger = get_logger(__name__)

SUGGESTION_CACHE_PREFIX = ("suggestions", "list")


def suggestion_cache_key(user_id: UUID, content_id: UUID) -> str:
    return CacheService.generate_key(*SUGGESTION_CACHE_PREFIX, user_id, content_id)


class SuggestionService:
    """Ranks a user's existing tags and novel keywords against a piece of content.

    Existing tags are scored by cosine distance (lower is better); keywords by
    cosine similarity to the whole text (higher is better). Results live only
    in the cache.
    """

    def __init__(
        self,
        concepts: ConceptRepository,
        embedder: EmbeddingProvider,
        cache: CacheService,
        *,
        cache_ttl: int | None = None,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
    ) -> None:
        self._concepts = concepts
        self._embedder = embedder
        self._cache = cache
        self._cache_ttl = cache_ttl
        self._candidate_limit = candidate_limit

    async def extract_keywords(self, text: str) -> list[KeywordScore]:
        """Rank keyword candidates by similarity to the full text.

        Embedding or scoring failures degrade to an empty list.
        """
        candidates = extract_candidates(text, (1, 2), self._candidate_limit)
        if not candidates:
            return []

        try:
            embeddings = await self._embedder.embed_batch([text, *candidates])
            if len(embeddings) != len(candidates) + 1:
                raise UpstreamUnavailableError(
                    f"Expected {len(candidates) + 1} embeddings, got {len(embeddings)}"
                )
            scores = similarities_to(embeddings[0], embeddings[1:])
        except TagwiseError as err:
            logger.error("Failed to score keyword candidates: %s", err)
            return []

        scored = [KeywordScore(word=word, score=score) for word, score in zip(candidates, scores, strict=True)]
        scored.sort(key=lambda k: k.score, reverse=True)
        return scored[:keyword_limit(text)]

    async def create_suggestions_for_content(
        self,
        *,
        content: str,
        user_id: UUID,
        suggestions_count: int,
        content_id: UUID | None = None,
    ) -> SuggestionResult:
        """Compute existing-tag and keyword suggestions for `content`.

        A failure to embed the content itself is fatal (UpstreamUnavailableError);
        keyword failures only empty `potential`. When `content_id` is known the
        complete result is cached in a single write.
        """
        if suggestions_count < 0:
            raise InvalidArgumentError(f"suggestions_count cannot be negative (got {suggestions_count}).")
        logger.info("Generating suggestions for content %s (user: %s)", content_id or "<unsaved>", user_id)

        # Keyword work is cancelled as soon as the content embedding fails
        try:
            async with asyncio.TaskGroup() as tg:
                embed_task = tg.create_task(self._embedder.embed(content))
                keywords_task = tg.create_task(self.extract_keywords(content))
        except ExceptionGroup as group:
            raise group.exceptions[0] from None
        content_embedding, raw_keywords = embed_task.result(), keywords_task.result()

        existing = list(
            await self._concepts.match_user_tags(
                user_id=user_id,
                embedding=content_embedding,
                limit=suggestions_count,
            )
        ) if suggestions_count > 0 else []
        logger.debug("Found %d existing tag matches", len(existing))

        existing_names = {normalize(s.name) for s in existing}
        potential = [
            PotentialTagSuggestion(keyword=k.word, score=k.score)
            for k in raw_keywords
            if normalize(k.word) not in existing_names
        ]
        logger.debug("Found %d new keyword suggestions", len(potential))

        result = SuggestionResult(existing=existing, potential=potential)
        if content_id is not None:
            await self._cache.set(
                suggestion_cache_key(user_id, content_id),
                result.model_dump(mode="json"),
                self._cache_ttl,
            )
        return result

    async def get_suggestions_for_content(self, content_id: UUID, user_id: UUID) -> SuggestionResult | None:
        """Return cached suggestions, or None when they have not been computed yet."""
        cached = await self._cache.get(suggestion_cache_key(user_id, content_id))
        if cached is None:
            return None
        try:
            return SuggestionResult.model_validate(cached)
        except ValueError as err:
            logger.warning("Ignoring malformed cached suggestions for %s: %s", content_id, err)
            return None

    async def invalidate_suggestions(self, user_id: UUID, content_id: UUID | None = None) -> None:
        if content_id is not None:
            await self._cache.delete(suggestion_cache_key(user_id, content_id))
            return
        await self._cache.delete_by_pattern(CacheService.generate_key("suggestions", "*", user_id, "*"))

    async def learn_tags(self, semantics: Sequence[str]) -> list[UUID]:
        """Embed and upsert concepts for the given semantic strings.

        Inputs are normalized and deduplicated (first occurrence wins the order);
        all embeddings come from a single batch call.
        """
        unique = list(dict.fromkeys(normalize(s) for s in semantics if normalize(s)))
        if not unique:
            return []

        logger.info("Learning %d semantic concepts", len(unique))
        embeddings = await self._embedder.embed_batch(unique)
        now = datetime.now(UTC)
        concepts = [
            Concept(id=concept_id_for(semantic), semantic=semantic, embedding=vector, updated_at=now)
            for semantic, vector in zip(unique, embeddings, strict=True)
        ]
        await self._concepts.upsert_many(concepts)
        logger.info("Learned/updated %d concepts", len(concepts))
        return [c.id for c in concepts]

    async def ensure_concept_exists(self, semantic: str) -> UUID:
        """Reserve a concept row with no embedding; an existing row is left untouched."""
        normalized = normalize(semantic)
        concept_id = concept_id_for(normalized)
        await self._concepts.insert_if_absent(Concept(id=concept_id, semantic=normalized))
        return concept_id
