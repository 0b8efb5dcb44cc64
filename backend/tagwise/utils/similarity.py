from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from tagwise.core.errors import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Sequence


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors.

    Returns 0.0 when either vector has zero magnitude.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise InvalidArgumentError(
            f"Vectors must have equal length (got {va.shape[0]} and {vb.shape[0]})"
        )
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(np.dot(va, vb) / denom)


def cosine_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine distance (lower = closer), same convention as pgvector's `<=>`."""
    return 1.0 - cosine_similarity(a, b)


def similarities_to(query: Sequence[float], vectors: Sequence[Sequence[float]]) -> list[float]:
    """Cosine similarity of every row in `vectors` against `query`."""
    if not vectors:
        return []
    q = np.asarray(query, dtype=np.float64)
    matrix = np.asarray(vectors, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[1] != q.shape[0]:
        raise InvalidArgumentError(
            f"Vectors must have length {q.shape[0]} to compare against the query"
        )
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(q)
    dots = matrix @ q
    safe = np.where(norms == 0, 1.0, norms)
    scores = np.where(norms == 0, 0.0, dots / safe)
    return [float(s) for s in scores]
