from __future__ import annotations

from uuid import uuid4

import pytest

from tagwise.utils.ids import content_tag_id_for


@pytest.fixture()
async def content(content_service, user_id):
    return await content_service.create_text_content(title="Tokyo trip", body="", user_id=user_id)


async def test_add_tags_ignores_duplicates_and_foreign_tags(
    content_tag_service, tag_service, content_tag_repo, content, user_id, other_user_id
) -> None:
    travel = (await tag_service.create_tag("travel", "trips", user_id)).tag
    foreign = (await tag_service.create_tag("travel", "trips", other_user_id)).tag

    added = await content_tag_service.add_tags_to_content(content.id, [travel.id, travel.id, foreign.id, uuid4()], user_id)
    again = await content_tag_service.add_tags_to_content(content.id, [travel.id], user_id)

    assert added == 1
    assert again == 1
    assert list(content_tag_repo.rows) == [content_tag_id_for(user_id, content.id, travel.id)]


async def test_add_tags_to_someone_elses_content(content_tag_service, tag_service, content, other_user_id) -> None:
    tag = (await tag_service.create_tag("travel", "", other_user_id)).tag

    assert await content_tag_service.add_tags_to_content(content.id, [tag.id], other_user_id) is None


async def test_get_and_list_tags_of_content_carry_tag_fields(
    content_tag_service, tag_service, content, user_id
) -> None:
    travel = (await tag_service.create_tag("travel", "trips", user_id)).tag
    food = (await tag_service.create_tag("food", "ramen", user_id)).tag
    await content_tag_service.add_tags_to_content(content.id, [travel.id, food.id], user_id)

    link = await content_tag_service.get_tag_of_content(content.id, travel.id, user_id)
    page = await content_tag_service.list_tags_of_content(content.id, user_id)

    assert (link.name, link.semantic) == ("travel", "trips")
    assert {(lt.name, lt.semantic) for lt in page.data} == {("travel", "trips"), ("food", "ramen")}
    assert page.metadata.chunk_size == 100


async def test_list_tags_of_content_is_scoped_to_the_content(
    content_tag_service, content_service, tag_service, content, user_id
) -> None:
    other = await content_service.create_text_content(title="other", body="", user_id=user_id)
    tag = (await tag_service.create_tag("travel", "", user_id)).tag
    await content_tag_service.add_tags_to_content(other.id, [tag.id], user_id)

    page = await content_tag_service.list_tags_of_content(content.id, user_id)

    assert page.data == []


async def test_remove_tags(content_tag_service, tag_service, content, user_id) -> None:
    tag = (await tag_service.create_tag("travel", "", user_id)).tag
    await content_tag_service.add_tags_to_content(content.id, [tag.id], user_id)

    assert await content_tag_service.remove_tags_from_content(content.id, [tag.id], user_id) == 1
    assert await content_tag_service.remove_tags_from_content(content.id, [tag.id], user_id) == 0
    assert await content_tag_service.get_tag_of_content(content.id, tag.id, user_id) is None


async def test_links_to_deleted_tags_are_hidden(
    content_tag_service, content_service, tag_service, content, user_id
) -> None:
    travel = (await tag_service.create_tag("travel", "trips", user_id)).tag
    food = (await tag_service.create_tag("food", "ramen", user_id)).tag
    await content_tag_service.add_tags_to_content(content.id, [travel.id, food.id], user_id)
    cached = await content_service.list_contents_by_tags(user_id, [travel.id])
    assert [c.id for c in cached.data] == [content.id]

    await tag_service.delete_tag(travel.id, user_id)

    page = await content_tag_service.list_tags_of_content(content.id, user_id)
    assert [lt.tag_id for lt in page.data] == [food.id]
    assert page.metadata.chunk_total_items == 1
    assert await content_tag_service.get_tag_of_content(content.id, travel.id, user_id) is None
    assert (await content_service.list_contents_by_tags(user_id, [travel.id])).data == []
    assert [c.id for c in (await content_service.list_contents_by_tags(user_id, [food.id])).data] == [content.id]
