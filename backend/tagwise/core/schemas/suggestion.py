from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from pydantic import Field

from tagwise.core.models.base import AppBaseModel


class KeywordScore(AppBaseModel):
    """Keyword candidate with cosine similarity to the whole text (higher is better)."""

    word: str
    score: float


class ExistingTagSuggestion(AppBaseModel):
    """Existing tag ranked by cosine distance to the content (lower is better)."""

    tag_id: UUID
    name: str
    score: float


class PotentialTagSuggestion(AppBaseModel):
    """Keyword not yet covered by a suggested tag (cosine similarity, higher is better)."""

    keyword: str
    score: float


class SuggestionResult(AppBaseModel):
    existing: list[ExistingTagSuggestion] = Field(default_factory=list)
    potential: list[PotentialTagSuggestion] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "existing": [{"tag_id": "6d0f0c8e-4d1e-5b7a-9f55-0a4b8a8f2c11", "name": "travel", "score": 0.21}],
                    "potential": [{"keyword": "tokyo", "score": 0.74}],
                }
            ]
        }
    }
