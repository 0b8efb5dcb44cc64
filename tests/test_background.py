from __future__ import annotations

from uuid import uuid4

from fakes import FakeEmbeddingProvider, keys_matching

from tagwise.background import learn_tag_semantics, regenerate_content_suggestions
from tagwise.core.services.suggestion_service import SuggestionService
from tagwise.utils.ids import concept_id_for


async def test_regenerate_caches_suggestions(suggestion_service, redis, user_id) -> None:
    content_id = uuid4()

    await regenerate_content_suggestions(
        suggestions=suggestion_service,
        content_id=content_id,
        user_id=user_id,
        body="Trip to Tokyo next spring",
        suggestions_count=5,
    )

    assert await suggestion_service.get_suggestions_for_content(content_id, user_id) is not None
    assert keys_matching(redis, f"suggestions:list:{user_id}:{content_id}")


async def test_regenerate_logs_instead_of_raising(concept_repo, cache, redis, user_id, caplog) -> None:
    broken = SuggestionService(concept_repo, FakeEmbeddingProvider(fail_all=True), cache)

    await regenerate_content_suggestions(
        suggestions=broken,
        content_id=uuid4(),
        user_id=user_id,
        body="Trip",
        suggestions_count=5,
    )

    assert keys_matching(redis, "suggestions:*") == []
    assert "Suggestion job failed" in caplog.text


async def test_regenerate_skips_empty_text(suggestion_service, embedder, user_id) -> None:
    await regenerate_content_suggestions(
        suggestions=suggestion_service,
        content_id=uuid4(),
        user_id=user_id,
        body="  ",
        suggestions_count=5,
    )

    assert embedder.calls == []


async def test_learn_tag_semantics(suggestion_service, concept_repo) -> None:
    await learn_tag_semantics(suggestions=suggestion_service, semantics=["Travel", "travel"])

    assert list(concept_repo.concepts) == [concept_id_for("travel")]


async def test_learn_tag_semantics_logs_failures(concept_repo, cache, caplog) -> None:
    broken = SuggestionService(concept_repo, FakeEmbeddingProvider(fail_all=True), cache)

    await learn_tag_semantics(suggestions=broken, semantics=["travel"])

    assert concept_repo.concepts == {}
    assert "Tag learning job failed" in caplog.text


async def test_regenerate_embeds_body_only(suggestion_service, embedder, user_id) -> None:
    body = "Trip to Tokyo next spring, booking flights and hotels"

    await regenerate_content_suggestions(
        suggestions=suggestion_service,
        content_id=uuid4(),
        user_id=user_id,
        body=f"  {body}\n",
        suggestions_count=5,
    )

    assert embedder.calls
    # The document text of every call is the stripped body
    assert all(call[0] == body for call in embedder.calls)
