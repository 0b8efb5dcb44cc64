from __future__ import annotations

import asyncio
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar
from uuid import UUID

from pydantic import TypeAdapter

from tagwise.core.schemas.pagination import ChunkAnchor, PaginationDirection
from tagwise.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from supabase import Client

    from tagwise.core.schemas.pagination import ChunkScope

_datetime_adapter = TypeAdapter(datetime)


class SupabaseRepository:
    """Shared PostgREST plumbing for the Supabase repositories.

    Subclasses set `TABLE_NAME` and, for soft-deleted tables, `SOFT_DELETE_COLUMN`.
    Blocking client calls are pushed to a worker thread.
    """

    TABLE_NAME: ClassVar[str]
    SOFT_DELETE_COLUMN: ClassVar[str | None] = None

    def __init__(self, client: Client) -> None:
        self._client: Client = client

    def _table(self):
        return self._client.table(self.TABLE_NAME)

    def _live(self, query):
        if self.SOFT_DELETE_COLUMN:
            return query.eq(self.SOFT_DELETE_COLUMN, False)
        return query

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        return await asyncio.to_thread(func)

    @staticmethod
    def _first(data: Any) -> dict[str, Any]:
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        return {}

    @staticmethod
    def _iso(value: datetime | None) -> str | None:
        return value.isoformat() if value is not None else None

    @staticmethod
    def _parse_datetime(value: Any) -> datetime:
        return _datetime_adapter.validate_python(value)

    @staticmethod
    def _parse_vector_string(vector_str: Any) -> list[float] | None:
        """Parse vector string from pgvector into list[float].

        pgvector returns vectors as string representations like '[0.1,0.2,0.3]'
        that need to be parsed into Python lists for Pydantic validation.
        """
        if vector_str is None:
            return None
        if isinstance(vector_str, list):
            return [float(x) for x in vector_str]

        try:
            cleaned = vector_str.strip("[]")
            if not cleaned:
                return None
            return [float(x.strip()) for x in cleaned.split(",")]
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to parse vector string '{vector_str}': {e}")
            return None

    @staticmethod
    def _format_vector(vector: Sequence[float]) -> str:
        return "[" + ",".join(repr(float(x)) for x in vector) + "]"


class SupabaseChunkedRepository(SupabaseRepository):
    """Implements the ChunkedRepository queries over a (created_at, id) ordered table."""

    def _select(self, columns: str):
        return self._table().select(columns)

    def _scoped(self, query, scope: ChunkScope):
        query = query.eq("user_id", str(scope.user_id))
        for column, value in scope.filters.items():
            query = query.eq(column, str(value))
        return self._live(query)

    @staticmethod
    def _anchor_filter(anchor: ChunkAnchor, direction: PaginationDirection) -> str:
        """PostgREST `or` expression for the row-value comparison against the anchor."""
        ts = f'"{anchor.created_at.isoformat()}"'
        if direction is PaginationDirection.NEXT:
            # (created_at, id) <= (ts, anchor_id)
            return f"created_at.lt.{ts},and(created_at.eq.{ts},id.lte.{anchor.id})"
        # (created_at, id) > (ts, anchor_id)
        return f"created_at.gt.{ts},and(created_at.eq.{ts},id.gt.{anchor.id})"

    async def find_anchor(self, scope: ChunkScope, anchor_id: UUID) -> ChunkAnchor | None:
        resp = await self._run(
            lambda: self._scoped(self._select("id, created_at"), scope)
            .eq("id", str(anchor_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return ChunkAnchor(id=UUID(str(items[0]["id"])), created_at=self._parse_datetime(items[0]["created_at"]))

    async def scan_ids(
        self,
        scope: ChunkScope,
        *,
        anchor: ChunkAnchor | None,
        direction: PaginationDirection,
        limit: int,
    ) -> Sequence[UUID]:
        descending = direction is PaginationDirection.NEXT

        def _query():
            q = self._scoped(self._select("id"), scope)
            if anchor is not None:
                q = q.or_(self._anchor_filter(anchor, direction))
            return (
                q
                .order("created_at", desc=descending)
                .order("id", desc=descending)
                .limit(limit)
                .execute()
            )

        resp = await self._run(_query)
        return [UUID(str(row["id"])) for row in (resp.data or [])]

    async def fetch_by_ids(self, scope: ChunkScope, ids: Sequence[UUID]) -> Sequence[Any]:
        if not ids:
            return []
        resp = await self._run(
            lambda: self._scoped(self._select(self._select_columns()), scope)
            .in_("id", [str(i) for i in ids])
            .execute()
        )
        return [self._row_to_model(r) for r in (resp.data or [])]

    def _select_columns(self) -> str:
        return "*"

    def _row_to_model(self, row: dict[str, Any]) -> Any:  # pragma: no cover - overridden
        raise NotImplementedError
