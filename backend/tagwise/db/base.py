from __future__ import annotations

from typing import TYPE_CHECKING

from redis.asyncio import Redis
from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from tagwise.utils.logging import get_logger

if TYPE_CHECKING:
    from tagwise.config import Settings

logger = get_logger(__name__)


def create_supabase_admin_client(settings: Settings) -> Client:
    """Return a Supabase admin client using the service role key.

    This client is intended for background tasks and the shared concept
    store, which no single user owns.
    """
    logger.debug("Initializing Supabase admin client")
    if not settings.supabase_service_role_key:
        raise RuntimeError("supabase_service_role_key is required for admin client")
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )


def create_request_supabase_client(settings: Settings, bearer_token: str | None = None) -> Client:
    """Create a request-scoped Supabase client using the anon key.

    If a JWT is provided, set it as the PostgREST bearer so that RLS policies
    are enforced for all table/rpc operations in this request.
    """
    logger.debug("Creating request-scoped Supabase client")
    anon_key = settings.supabase_anon_key
    if not anon_key:
        raise RuntimeError("supabase_anon_key is required for request client")

    client = create_client(
        settings.supabase_url,
        anon_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
    if bearer_token:
        client.postgrest.auth(bearer_token)
    return client


def create_redis_client(settings: Settings) -> Redis:
    """Create the cache client. Connections are opened lazily on first use."""
    logger.debug("Creating Redis client for %s", settings.redis_url.split("@")[-1])
    return Redis.from_url(settings.redis_url, decode_responses=True)
