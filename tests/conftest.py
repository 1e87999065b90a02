"""Pytest configuration and fixtures"""
import os
import pytest
from decimal import Decimal
from unittest.mock import Mock, AsyncMock

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test_anon_key")
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")

from storefront.cart import CartManager, InMemoryCartStorage, RecordingNotifier
from storefront.services.models import Product


@pytest.fixture
def mock_supabase_client():
    """Mock async Supabase client; every query ends in an awaited execute()."""
    client = Mock()

    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.insert.return_value = table_mock
    table_mock.update.return_value = table_mock
    table_mock.delete.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.limit.return_value = table_mock
    table_mock.order.return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock

    return client


@pytest.fixture
def sample_product_row():
    """Row from the products table"""
    return {
        "id": 7,
        "name": "Logitech MX Master 3 Mouse",
        "description": "Ergonomic wireless mouse",
        "price": 7999,
        "category": "Mobile Chargers",
        "stock": 25,
        "image_url": "https://placehold.co/mx-master.png",
        "created_at": "2025-01-01T00:00:00Z",
    }


@pytest.fixture
def sample_order_row():
    """Row from the orders table"""
    return {
        "id": 42,
        "user_id": "user-123",
        "user_email": "buyer@example.com",
        "status": "Processing",
        "payment_mode": "COD",
        "total_amount": 30.0,
        "created_at": "2025-01-01T00:00:00Z",
        "shipping_address": {
            "full_name": "Asha Rao",
            "address": "12 MG Road",
            "city": "Bengaluru",
            "postal_code": "560001",
            "country": "India",
        },
    }


@pytest.fixture
def make_product():
    """Factory for catalog products"""
    def _make(product_id="p1", price="10", stock=5, name=None, images=None):
        return Product(
            id=product_id,
            name=name or f"Product {product_id}",
            price=Decimal(str(price)),
            images=images if images is not None else [f"https://img.example.com/{product_id}.png"],
            stock=stock,
        )
    return _make


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def storage():
    return InMemoryCartStorage()


@pytest.fixture
def cart(storage, notifier):
    """Initialized cart backed by in-memory storage"""
    manager = CartManager(storage, notifier)
    manager.initialize()
    return manager
