from __future__ import annotations

from uuid import uuid4

import pytest
from fakes import keys_matching

from tagwise.core.errors import InvalidArgumentError
from tagwise.core.models.content import ContentType


async def test_create_text_content(content_service, user_id) -> None:
    content = await content_service.create_text_content(
        title="  Notes  ", body="# Heading", user_id=user_id, content_type=ContentType.MARKDOWN
    )

    assert content.title == "Notes"
    assert content.content_type is ContentType.MARKDOWN
    assert content.metadata == {}
    assert await content_service.get_content(content.id, user_id) == content


async def test_create_text_content_requires_title(content_service, user_id) -> None:
    with pytest.raises(InvalidArgumentError):
        await content_service.create_text_content(title=" ", body="x", user_id=user_id)


async def test_create_youtube_content_builds_body(content_service, user_id) -> None:
    content = await content_service.create_youtube_content(
        url="https://youtu.be/abc",
        user_id=user_id,
        title="Tokyo vlog",
        description="Day one",
        transcript="hello from tokyo",
    )

    assert content.body == "Tokyo vlog\n\nDay one\n\nhello from tokyo"
    assert content.content_type is ContentType.YOUTUBE_VIDEO
    assert content.metadata["youtube_url"] == "https://youtu.be/abc"


async def test_create_youtube_content_defaults(content_service, user_id) -> None:
    content = await content_service.create_youtube_content(url="https://youtu.be/abc", user_id=user_id)

    assert content.title == "YouTube Video"
    assert content.body == "YouTube Video\n\n\n\n"


async def test_get_content_is_cached_and_owner_scoped(content_service, content_repo, redis, user_id, other_user_id) -> None:
    content = await content_service.create_text_content(title="t", body="b", user_id=user_id)

    assert await content_service.get_content(content.id, other_user_id) is None
    assert await content_service.get_content(content.id, user_id) == content
    assert keys_matching(redis, f"contents:detail:{user_id}:{content.id}")
    assert await content_service.get_content("nope", user_id) is None


async def test_list_contents_serves_repeat_requests_from_cache(content_service, content_repo, user_id) -> None:
    for i in range(3):
        await content_service.create_text_content(title=f"item {i}", body="", user_id=user_id)

    first = await content_service.list_contents(user_id, limit=2)
    scans = len(content_repo.scan_calls)
    second = await content_service.list_contents(user_id, limit=2)

    assert len(content_repo.scan_calls) == scans
    assert second.model_dump(mode="json") == first.model_dump(mode="json")


async def test_writes_invalidate_list_pages(content_service, user_id) -> None:
    first = await content_service.create_text_content(title="first", body="", user_id=user_id)
    page = await content_service.list_contents(user_id)
    assert [c.id for c in page.data] == [first.id]

    second = await content_service.create_text_content(title="second", body="", user_id=user_id)
    page = await content_service.list_contents(user_id)
    assert {c.id for c in page.data} == {first.id, second.id}

    await content_service.delete_content(first.id, user_id)
    page = await content_service.list_contents(user_id)
    assert [c.id for c in page.data] == [second.id]


async def test_update_content_reports_body_change(content_service, suggestion_service, redis, user_id) -> None:
    content = await content_service.create_text_content(title="t", body="old", user_id=user_id)
    await suggestion_service.create_suggestions_for_content(
        content="old", user_id=user_id, suggestions_count=1, content_id=content.id
    )

    renamed = await content_service.update_content(content.id, user_id, title="renamed")
    assert renamed.body_changed is False
    assert renamed.content.title == "renamed"
    assert keys_matching(redis, "suggestions:*")

    rewritten = await content_service.update_content(content.id, user_id, body="new body")
    assert rewritten.body_changed is True
    assert keys_matching(redis, "suggestions:*") == []
    assert (await content_service.get_content(content.id, user_id)).body == "new body"


async def test_update_missing_content_returns_none(content_service, user_id) -> None:
    assert await content_service.update_content(uuid4(), user_id, title="x") is None
    assert await content_service.delete_content(uuid4(), user_id) is False


async def test_list_contents_by_tags_requires_every_tag(
    content_service, content_tag_service, tag_service, user_id
) -> None:
    travel = (await tag_service.create_tag("travel", "", user_id)).tag
    food = (await tag_service.create_tag("food", "", user_id)).tag
    both = await content_service.create_text_content(title="ramen in tokyo", body="", user_id=user_id)
    only_travel = await content_service.create_text_content(title="flight", body="", user_id=user_id)
    await content_tag_service.add_tags_to_content(both.id, [travel.id, food.id], user_id)
    await content_tag_service.add_tags_to_content(only_travel.id, [travel.id], user_id)

    page = await content_service.list_contents_by_tags(user_id, [travel.id, food.id])
    assert [c.id for c in page.data] == [both.id]

    page = await content_service.list_contents_by_tags(user_id, [travel.id])
    assert [c.id for c in page.data] == [only_travel.id, both.id]

    page = await content_service.list_contents_by_tags(user_id, [travel.id], limit=1, offset=1)
    assert [c.id for c in page.data] == [both.id]
    assert page.metadata.next_chunk_id is None


async def test_list_contents_by_tags_validates_input(content_service, user_id) -> None:
    with pytest.raises(InvalidArgumentError):
        await content_service.list_contents_by_tags(user_id, [])
    with pytest.raises(InvalidArgumentError):
        await content_service.list_contents_by_tags(user_id, [uuid4()], limit=0)
