"""
Common Error Constants and Exceptions

Error messages live here so callers and tests share one wording.
"""

# User errors
ERROR_UNAUTHORIZED = "You must be logged in to place an order."

# Cart errors
ERROR_CART_EMPTY = "Your cart is empty."
ERROR_CART_STORAGE = "Cart storage unavailable"
ERROR_CART_SNAPSHOT_CORRUPT = "Stored cart snapshot is corrupt"

# Product errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"

# Order errors
ERROR_ORDER_FAILED = "Failed to place order."
ERROR_ORDER_INVALID_STATUS = "Invalid order status"


class StorefrontError(Exception):
    """Base class for storefront errors."""


class CartStorageError(StorefrontError):
    """Cart persistence backend could not read or write the snapshot."""


class CorruptCartSnapshot(StorefrontError, ValueError):
    """Persisted cart snapshot is not a valid line-item array."""


class CheckoutError(StorefrontError):
    """Order placement was rejected or failed."""
