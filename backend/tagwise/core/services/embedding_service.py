from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from tagwise.core.errors import UpstreamUnavailableError
from tagwise.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from openai import AsyncOpenAI

logger = get_logger(__name__)

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"


class EmbeddingProvider(ABC):
    """Maps text to fixed-length float vectors. Dimensionality is opaque to callers."""

    async def embed(self, text: str) -> list[float]:
        vectors = await self.embed_batch([text])
        return vectors[0]

    @abstractmethod
    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:  # pragma: no cover - interface only
        """Embed every input, preserving order. Raise UpstreamUnavailableError on failure."""


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embedding provider backed by the OpenAI embeddings endpoint."""

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        model: str = DEFAULT_EMBEDDING_MODEL,
        dimensions: int | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._dimensions = dimensions

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        # The endpoint rejects empty strings
        inputs = [t if t.strip() else " " for t in texts]
        kwargs: dict[str, Any] = {"model": self._model, "input": inputs}
        if self._dimensions:
            kwargs["dimensions"] = self._dimensions

        try:
            resp = await self._client.embeddings.create(**kwargs)
        except Exception as err:  # pragma: no cover - network errors
            logger.error("Failed to create embeddings for %d inputs: %s", len(inputs), err)
            raise UpstreamUnavailableError(f"Embedding provider failed: {err}") from err

        data = sorted(resp.data, key=lambda item: item.index)
        if len(data) != len(inputs):
            raise UpstreamUnavailableError(
                f"Embedding provider returned {len(data)} vectors for {len(inputs)} inputs"
            )
        return [list(item.embedding) for item in data]
