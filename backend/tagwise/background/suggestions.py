from __future__ import annotations

from typing import TYPE_CHECKING

from tagwise.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from tagwise.core.services.suggestion_service import SuggestionService


async def regenerate_content_suggestions(
    *,
    suggestions: SuggestionService,
    content_id: UUID,
    user_id: UUID,
    body: str | None,
    suggestions_count: int,
) -> None:
    """Recompute and cache tag suggestions for a content item as background work.

    Suggestions are computed from the body alone. Errors are logged and the
    cache simply stays empty for the item.
    """
    logger.info("Starting suggestion job for content %s (user: %s)", content_id, user_id)
    try:
        text = (body or "").strip()
        if not text:
            logger.warning("No text to suggest tags for content %s", content_id)
            return

        result = await suggestions.create_suggestions_for_content(
            content=text,
            user_id=user_id,
            suggestions_count=suggestions_count,
            content_id=content_id,
        )
        logger.info(
            "Suggestion job finished for content %s: %d existing, %d potential",
            content_id,
            len(result.existing),
            len(result.potential),
        )
    except Exception as err:
        logger.error("Suggestion job failed for content %s: %s", content_id, err)


async def learn_tag_semantics(*, suggestions: SuggestionService, semantics: Sequence[str]) -> None:
    """Embed tag semantics into concepts as background work. Errors are logged."""
    try:
        learned = await suggestions.learn_tags(semantics)
        logger.debug("Learned concepts: %s", learned)
    except Exception as err:
        logger.error("Tag learning job failed for %d semantic(s): %s", len(semantics), err)
