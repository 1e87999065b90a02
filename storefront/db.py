"""
Database Module - Supabase and Redis Clients

Provides lazily created singletons of:
- Async Supabase client for the products/orders/order_items tables
- Sync Upstash Redis client for server-side cart snapshots
"""

from typing import Optional

from supabase._async.client import AsyncClient, create_client as acreate_client
from upstash_redis import Redis

from storefront.config import Settings

_async_supabase_client: Optional[AsyncClient] = None
_sync_redis_client: Optional[Redis] = None


async def get_supabase(settings: Optional[Settings] = None) -> AsyncClient:
    """
    Get async Supabase client (singleton).

    Uses SUPABASE_URL and SUPABASE_ANON_KEY; row-level security on the
    hosted project decides what the anon key may read and write.
    """
    global _async_supabase_client

    if _async_supabase_client is None:
        settings = settings or Settings.from_env()
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
        _async_supabase_client = await acreate_client(settings.supabase_url, settings.supabase_anon_key)

    return _async_supabase_client


def get_redis_sync(settings: Optional[Settings] = None) -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    The cart manager is synchronous, so it uses the blocking REST client.
    """
    global _sync_redis_client

    if _sync_redis_client is None:
        settings = settings or Settings.from_env()
        if not settings.redis_url or not settings.redis_token:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _sync_redis_client = Redis(url=settings.redis_url, token=settings.redis_token)

    return _sync_redis_client


def reset_clients() -> None:
    """Drop cached clients (tests, credential rotation)."""
    global _async_supabase_client, _sync_redis_client
    _async_supabase_client = None
    _sync_redis_client = None


class RedisKeys:
    """Redis key prefixes."""

    CART = "cart:"  # cart:{session_id}

    @staticmethod
    def cart_key(session_id: str) -> str:
        return f"{RedisKeys.CART}{session_id}"
