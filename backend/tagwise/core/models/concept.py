from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from pydantic import Field

from .base import TimestampedModel


class Concept(TimestampedModel):
    """Normalized semantic string and its embedding.

    `id` is a hash of `semantic`, so learning the same string twice touches
    the same row. `embedding` stays None until the concept is learned.
    """

    id: UUID
    semantic: str
    embedding: list[float] | None = Field(default=None, description="Vector embedding, None until learned")

    @property
    def is_learned(self) -> bool:
        return self.embedding is not None
