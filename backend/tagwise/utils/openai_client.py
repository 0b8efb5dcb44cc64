from __future__ import annotations

from typing import TYPE_CHECKING

from openai import AsyncOpenAI

from tagwise.utils.logging import get_logger

if TYPE_CHECKING:
    from tagwise.config import Settings

logger = get_logger(__name__)


def create_openai_client(settings: Settings) -> AsyncOpenAI:
    """Build the embeddings client for the app lifespan.

    `APP_OPENAI_API_KEY` wins; otherwise the SDK reads `OPENAI_API_KEY`.
    """
    options = {"timeout": settings.openai_timeout, "max_retries": settings.openai_max_retries}
    if settings.openai_api_key:
        logger.debug("Initializing OpenAI client with APP_OPENAI_API_KEY")
        return AsyncOpenAI(api_key=settings.openai_api_key, **options)
    logger.debug("Initializing OpenAI client from OPENAI_API_KEY")
    return AsyncOpenAI(**options)
