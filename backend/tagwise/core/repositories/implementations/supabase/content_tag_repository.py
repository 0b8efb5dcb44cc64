from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

from tagwise.core.models.content_tag import ContentTag
from tagwise.core.repositories.content_tag_repository import ContentTagRepository
from tagwise.core.repositories.implementations.supabase.base import SupabaseChunkedRepository

if TYPE_CHECKING:
    from collections.abc import Sequence


class SupabaseContentTagRepository(SupabaseChunkedRepository, ContentTagRepository):
    """Supabase implementation of the ContentTagRepository over `content_tags`.

    Every read inner-joins the linked tag through the `tag_id -> tags.id` foreign
    key, so links to soft-deleted tags are never returned and the tag's
    name/semantic come back with the row.
    """

    TABLE_NAME = "content_tags"
    TAG_JOIN = "tags!inner(name, semantic, is_deleted)"

    def _select(self, columns: str):
        return self._table().select(f"{columns}, {self.TAG_JOIN}")

    def _live(self, query):
        return query.eq("tags.is_deleted", False)

    async def add_many(self, links: Sequence[ContentTag]) -> int:
        if not links:
            return 0
        rows = [
            {
                "id": str(link.id),
                "user_id": str(link.user_id),
                "content_id": str(link.content_id),
                "tag_id": str(link.tag_id),
                "created_at": link.created_at.isoformat(),
            }
            for link in links
        ]
        await self._run(
            lambda: self._table()
            .upsert(rows, on_conflict="id", ignore_duplicates=True)
            .execute()
        )
        return len(rows)

    async def remove_many(self, content_id: UUID, tag_ids: Sequence[UUID], user_id: UUID) -> int:
        if not tag_ids:
            return 0
        resp = await self._run(
            lambda: self._table()
            .delete()
            .eq("user_id", str(user_id))
            .eq("content_id", str(content_id))
            .in_("tag_id", [str(t) for t in tag_ids])
            .execute()
        )
        return len(resp.data or [])

    async def get(self, content_id: UUID, tag_id: UUID, user_id: UUID) -> ContentTag | None:
        resp = await self._run(
            lambda: self._live(self._select("*"))
            .eq("user_id", str(user_id))
            .eq("content_id", str(content_id))
            .eq("tag_id", str(tag_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_model(items[0])

    async def content_ids_with_tags(self, tag_ids: Sequence[UUID], user_id: UUID) -> dict[UUID, set[UUID]]:
        if not tag_ids:
            return {}
        resp = await self._run(
            lambda: self._live(self._select("content_id, tag_id"))
            .eq("user_id", str(user_id))
            .in_("tag_id", [str(t) for t in tag_ids])
            .execute()
        )
        grouped: dict[UUID, set[UUID]] = {}
        for row in resp.data or []:
            grouped.setdefault(UUID(str(row["content_id"])), set()).add(UUID(str(row["tag_id"])))
        return grouped

    def _row_to_model(self, row: dict[str, Any]) -> ContentTag:
        normalized = dict(row)
        tag = normalized.pop("tags", None) or {}
        normalized["name"] = tag.get("name") or ""
        normalized["semantic"] = tag.get("semantic") or ""
        return ContentTag.model_validate(normalized)
