from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from tagwise.core.models.content import Content
from tagwise.core.repositories.content_repository import ContentRepository
from tagwise.core.repositories.implementations.supabase.base import SupabaseChunkedRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class SupabaseContentRepository(SupabaseChunkedRepository, ContentRepository):
    """Supabase implementation of the ContentRepository over the `contents` table."""

    TABLE_NAME = "contents"
    SOFT_DELETE_COLUMN = "is_deleted"

    async def create(self, content: Content) -> Content:
        row = content.model_dump(mode="json")
        if row.get("updated_at") is None:
            row.pop("updated_at", None)
        resp = await self._run(
            lambda: self._table()
            .insert(row)
            .execute()
        )
        return self._row_to_model(self._first(resp.data))

    async def get(self, content_id: UUID, user_id: UUID) -> Content | None:
        resp = await self._run(
            lambda: self._live(self._table().select("*"))
            .eq("id", str(content_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_model(items[0])

    async def get_many(self, content_ids: Sequence[UUID], user_id: UUID) -> Sequence[Content]:
        if not content_ids:
            return []
        resp = await self._run(
            lambda: self._live(self._table().select("*"))
            .eq("user_id", str(user_id))
            .in_("id", [str(c) for c in content_ids])
            .execute()
        )
        return [self._row_to_model(r) for r in (resp.data or [])]

    async def update_fields(self, content_id: UUID, user_id: UUID, changes: dict) -> Content | None:
        # Only send columns that belong to the row schema; ownership and history are immutable
        sanitized: dict[str, Any] = {
            k: v for k, v in (changes or {}).items()
            if k not in {"id", "user_id", "created_at", "updated_at", "is_deleted"}
        }
        if not sanitized:
            return await self.get(content_id, user_id)
        if "content_type" in sanitized and hasattr(sanitized["content_type"], "value"):
            sanitized["content_type"] = sanitized["content_type"].value
        sanitized["updated_at"] = datetime.now(UTC).isoformat()

        resp = await self._run(
            lambda: self._live(self._table().update(sanitized))
            .eq("id", str(content_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_model(items[0])

    async def soft_delete(self, content_id: UUID, user_id: UUID) -> bool:
        resp = await self._run(
            lambda: self._live(self._table().update({"is_deleted": True, "updated_at": datetime.now(UTC).isoformat()}))
            .eq("id", str(content_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return len(resp.data or []) > 0

    def _row_to_model(self, row: dict[str, Any]) -> Content:
        normalized = dict(row)
        if normalized.get("metadata") is None:
            normalized["metadata"] = {}
        if normalized.get("body") is None:
            normalized["body"] = ""
        return Content.model_validate(normalized)
