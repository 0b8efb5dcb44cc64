from __future__ import annotations

from uuid import UUID, uuid4

import pytest
from fakes import (
    FakeEmbeddingProvider,
    FakeRedis,
    InMemoryConceptRepository,
    InMemoryContentRepository,
    InMemoryContentTagRepository,
    InMemoryTagRepository,
)

from tagwise.core.services.cache_service import CacheService
from tagwise.core.services.content_service import ContentService
from tagwise.core.services.content_tag_service import ContentTagService
from tagwise.core.services.suggestion_service import SuggestionService
from tagwise.core.services.tag_service import TagService


@pytest.fixture()
def user_id() -> UUID:
    return uuid4()


@pytest.fixture()
def other_user_id() -> UUID:
    return uuid4()


@pytest.fixture()
def tag_repo() -> InMemoryTagRepository:
    return InMemoryTagRepository()


@pytest.fixture()
def content_repo() -> InMemoryContentRepository:
    return InMemoryContentRepository()


@pytest.fixture()
def content_tag_repo(tag_repo: InMemoryTagRepository) -> InMemoryContentTagRepository:
    return InMemoryContentTagRepository(tag_repo)


@pytest.fixture()
def concept_repo(tag_repo: InMemoryTagRepository) -> InMemoryConceptRepository:
    return InMemoryConceptRepository(tag_repo)


@pytest.fixture()
def embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture()
def redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def cache(redis: FakeRedis) -> CacheService:
    return CacheService(redis, default_ttl=300)  # type: ignore[arg-type]


@pytest.fixture()
def suggestion_service(
    concept_repo: InMemoryConceptRepository,
    embedder: FakeEmbeddingProvider,
    cache: CacheService,
) -> SuggestionService:
    return SuggestionService(concept_repo, embedder, cache, cache_ttl=120)


@pytest.fixture()
def tag_service(
    tag_repo: InMemoryTagRepository, suggestion_service: SuggestionService, cache: CacheService
) -> TagService:
    return TagService(tag_repo, suggestion_service, cache, segment_size=50)


@pytest.fixture()
def content_service(
    content_repo: InMemoryContentRepository,
    content_tag_repo: InMemoryContentTagRepository,
    cache: CacheService,
) -> ContentService:
    return ContentService(content_repo, content_tag_repo, cache, segment_size=50)


@pytest.fixture()
def content_tag_service(
    content_tag_repo: InMemoryContentTagRepository,
    content_repo: InMemoryContentRepository,
    tag_repo: InMemoryTagRepository,
    cache: CacheService,
) -> ContentTagService:
    return ContentTagService(content_tag_repo, content_repo, tag_repo, cache, segment_size=100)
