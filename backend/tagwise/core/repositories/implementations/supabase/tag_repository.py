from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from tagwise.core.models.tag import Tag
from tagwise.core.repositories.implementations.supabase.base import SupabaseChunkedRepository
from tagwise.core.repositories.tag_repository import TagRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class SupabaseTagRepository(SupabaseChunkedRepository, TagRepository):
    """Supabase implementation of the TagRepository.

    Assumes a `tags` table with columns matching the `Tag` model fields and the
    `(user_id, is_deleted, created_at DESC, id DESC)` index used by pagination.
    """

    TABLE_NAME = "tags"
    SOFT_DELETE_COLUMN = "is_deleted"

    async def upsert(self, tag: Tag) -> Tag:
        row = self._tag_to_row(tag)
        # created_at is left to the column default so a revived tag keeps its position
        row.pop("created_at", None)
        row["is_deleted"] = False
        row["updated_at"] = datetime.now(UTC).isoformat()
        resp = await self._run(
            lambda: self._table()
            .upsert(row, on_conflict="id")
            .execute()
        )
        return self._row_to_model(self._first(resp.data))

    async def get(self, tag_id: UUID, user_id: UUID) -> Tag | None:
        resp = await self._run(
            lambda: self._live(self._table().select("*"))
            .eq("id", str(tag_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_model(items[0])

    async def get_many(self, tag_ids: Sequence[UUID], user_id: UUID) -> Sequence[Tag]:
        if not tag_ids:
            return []
        resp = await self._run(
            lambda: self._live(self._table().select("*"))
            .eq("user_id", str(user_id))
            .in_("id", [str(t) for t in tag_ids])
            .execute()
        )
        return [self._row_to_model(r) for r in (resp.data or [])]

    async def update_fields(self, tag_id: UUID, user_id: UUID, changes: dict) -> Tag | None:
        sanitized: dict[str, Any] = {
            k: (str(v) if k == "concept_id" and v is not None else v)
            for k, v in (changes or {}).items()
            if k not in {"id", "user_id", "created_at", "updated_at", "is_deleted"}
        }
        if not sanitized:
            return await self.get(tag_id, user_id)
        sanitized["updated_at"] = datetime.now(UTC).isoformat()

        resp = await self._run(
            lambda: self._live(self._table().update(sanitized))
            .eq("id", str(tag_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_model(items[0])

    async def soft_delete(self, tag_id: UUID, user_id: UUID) -> bool:
        resp = await self._run(
            lambda: self._table()
            .update({"is_deleted": True, "updated_at": datetime.now(UTC).isoformat()})
            .eq("id", str(tag_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return len(resp.data or []) > 0

    def _row_to_model(self, row: dict[str, Any]) -> Tag:
        normalized = dict(row)
        if normalized.get("semantic") is None:
            normalized["semantic"] = ""
        return Tag.model_validate(normalized)

    @staticmethod
    def _tag_to_row(tag: Tag) -> dict[str, Any]:
        return tag.model_dump(mode="json")
