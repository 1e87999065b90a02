"""
TechGear Storefront Core

This package contains the storefront building blocks:
- cart: session cart manager, persistence backends, advisory notifications
- db: Supabase and Upstash Redis client factories
- services: catalog/order repositories, checkout, money helpers
- config: environment-driven settings

Note: Imports are lazy so importing the package never requires
database credentials.
"""

__all__ = [
    "get_supabase",
    "get_redis_sync",
    "create_cart_manager",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "get_supabase":
        from storefront.db import get_supabase
        return get_supabase
    elif name == "get_redis_sync":
        from storefront.db import get_redis_sync
        return get_redis_sync
    elif name == "create_cart_manager":
        from storefront.cart import create_cart_manager
        return create_cart_manager
    raise AttributeError(f"module 'storefront' has no attribute '{name}'")
