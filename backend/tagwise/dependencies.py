from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tagwise.core.errors import UpstreamUnavailableError
from tagwise.core.repositories.implementations.supabase.concept_repository import (
    SupabaseConceptRepository,
)
from tagwise.core.repositories.implementations.supabase.content_repository import (
    SupabaseContentRepository,
)
from tagwise.core.repositories.implementations.supabase.content_tag_repository import (
    SupabaseContentTagRepository,
)
from tagwise.core.repositories.implementations.supabase.tag_repository import (
    SupabaseTagRepository,
)
from tagwise.core.schemas.auth import AuthUser
from tagwise.core.services.cache_service import CacheService
from tagwise.core.services.content_service import ContentService
from tagwise.core.services.content_tag_service import ContentTagService
from tagwise.core.services.embedding_service import OpenAIEmbeddingProvider
from tagwise.core.services.suggestion_service import SuggestionService
from tagwise.core.services.tag_service import TagService
from tagwise.db.base import create_request_supabase_client
from tagwise.utils.logging import get_logger

logger = get_logger(__name__)

# Use auto_error=False to handle missing tokens gracefully
http_bearer = HTTPBearer(auto_error=False)

if TYPE_CHECKING:
    from supabase import Client

    from tagwise.config import Settings
    from tagwise.core.repositories.concept_repository import ConceptRepository
    from tagwise.core.repositories.content_repository import ContentRepository
    from tagwise.core.repositories.content_tag_repository import ContentTagRepository
    from tagwise.core.repositories.tag_repository import TagRepository
    from tagwise.core.services.embedding_service import EmbeddingProvider


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_request_supabase_client(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> Client:
    """Create a request-scoped Supabase client and set PostgREST bearer.

    Extracts the Authorization: Bearer <jwt> header if present and configures
    PostgREST to enforce RLS for the user.
    """
    auth_header = request.headers.get("authorization") or request.headers.get("Authorization")
    jwt: str | None = None
    if auth_header and auth_header.lower().startswith("bearer "):
        jwt = auth_header.split(" ", 1)[1].strip()
    return create_request_supabase_client(settings, jwt)


def get_cache_service(request: Request, settings: Settings = Depends(get_app_settings)) -> CacheService:
    return CacheService(request.app.state.redis, default_ttl=settings.cache_default_ttl)


def get_embedding_provider(request: Request, settings: Settings = Depends(get_app_settings)) -> EmbeddingProvider:
    return OpenAIEmbeddingProvider(
        request.app.state.openai,
        model=settings.embedding_model,
        dimensions=settings.embedding_dimensions,
    )


def get_concept_repository(request: Request) -> ConceptRepository:
    """Concepts are shared across users, so they go through the admin client."""
    client = request.app.state.supabase_admin
    if client is None:
        raise UpstreamUnavailableError("Concept store is not configured")
    return SupabaseConceptRepository(client)


def get_tag_repository(client: Client = Depends(get_request_supabase_client)) -> TagRepository:
    """Get a request-scoped tag repository instance using request client."""
    return SupabaseTagRepository(client)


def get_content_repository(client: Client = Depends(get_request_supabase_client)) -> ContentRepository:
    return SupabaseContentRepository(client)


def get_content_tag_repository(client: Client = Depends(get_request_supabase_client)) -> ContentTagRepository:
    return SupabaseContentTagRepository(client)


def get_suggestion_service(
    concepts: ConceptRepository = Depends(get_concept_repository),
    embedder: EmbeddingProvider = Depends(get_embedding_provider),
    cache: CacheService = Depends(get_cache_service),
    settings: Settings = Depends(get_app_settings),
) -> SuggestionService:
    return SuggestionService(
        concepts,
        embedder,
        cache,
        cache_ttl=settings.suggestion_cache_ttl,
        candidate_limit=settings.keyword_candidate_limit,
    )


def get_tag_service(
    repo: TagRepository = Depends(get_tag_repository),
    suggestions: SuggestionService = Depends(get_suggestion_service),
    cache: CacheService = Depends(get_cache_service),
    settings: Settings = Depends(get_app_settings),
) -> TagService:
    """Get a request-scoped tag service instance."""
    return TagService(repo, suggestions, cache, segment_size=settings.tag_segment_size)


def get_content_service(
    repo: ContentRepository = Depends(get_content_repository),
    links: ContentTagRepository = Depends(get_content_tag_repository),
    cache: CacheService = Depends(get_cache_service),
    settings: Settings = Depends(get_app_settings),
) -> ContentService:
    """Get a request-scoped content service instance."""
    return ContentService(repo, links, cache, segment_size=settings.content_segment_size)


def get_content_tag_service(
    repo: ContentTagRepository = Depends(get_content_tag_repository),
    contents: ContentRepository = Depends(get_content_repository),
    tags: TagRepository = Depends(get_tag_repository),
    cache: CacheService = Depends(get_cache_service),
    settings: Settings = Depends(get_app_settings),
) -> ContentTagService:
    return ContentTagService(repo, contents, tags, cache, segment_size=settings.content_tag_segment_size)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
    settings: Settings = Depends(get_app_settings),
) -> AuthUser:
    """Validate JWT via Supabase and return authenticated user."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    jwt = credentials.credentials
    if not jwt or len(jwt.split(".")) != 3:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token format",
            headers={"WWW-Authenticate": "Bearer"},
        )
    supabase = create_request_supabase_client(settings, jwt)
    try:
        resp = await asyncio.to_thread(lambda: supabase.auth.get_user(jwt))
    except Exception as err:
        error_msg = str(err).lower()
        logger.warning(
            "JWT validation failed",
            extra={
                "error_type": type(err).__name__,
                "error_summary": error_msg[:100] if error_msg else "Unknown error",
            },
        )
        detail = "Token is invalid or expired" if ("invalid" in error_msg or "expired" in error_msg) else "Authentication failed"
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from err
    user = AuthUser.from_supabase_user(getattr(resp, "user", None))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user data",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
