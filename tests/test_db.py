"""Tests for client factories"""
import pytest
from unittest.mock import AsyncMock, Mock, patch

from storefront import db
from storefront.config import Settings
from storefront.services.domains import CheckoutService


@pytest.fixture(autouse=True)
def fresh_clients():
    db.reset_clients()
    yield
    db.reset_clients()


def test_redis_requires_credentials():
    """Missing Upstash credentials raise"""
    with pytest.raises(ValueError):
        db.get_redis_sync(Settings())


def test_redis_client_is_cached():
    """The Upstash client is built once"""
    settings = Settings(redis_url="https://redis.example", redis_token="tok")

    with patch("storefront.db.Redis") as redis_cls:
        first = db.get_redis_sync(settings)
        second = db.get_redis_sync(settings)

    assert first is second
    redis_cls.assert_called_once_with(url="https://redis.example", token="tok")


def test_cart_key():
    assert db.RedisKeys.cart_key("sess-1") == "cart:sess-1"


@pytest.mark.asyncio
async def test_supabase_requires_credentials():
    """Missing Supabase credentials raise"""
    with pytest.raises(ValueError):
        await db.get_supabase(Settings())


@pytest.mark.asyncio
async def test_checkout_service_create():
    """CheckoutService.create wires repositories to one client"""
    client = Mock()
    settings = Settings(supabase_url="https://x.supabase.co", supabase_anon_key="anon")

    with patch("storefront.db.acreate_client", AsyncMock(return_value=client)) as factory:
        service = await CheckoutService.create(settings)

    factory.assert_awaited_once_with("https://x.supabase.co", "anon")
    assert service.orders.client is client
    assert service.products.client is client
