"""
Repository Pattern for Database Operations

- ProductRepository: product catalog reads, stock updates
- OrderRepository: orders and order items
"""
from .product_repo import ProductRepository
from .order_repo import OrderRepository

__all__ = [
    "ProductRepository",
    "OrderRepository",
]
