"""Domain services wrapping repositories."""
from .checkout import CheckoutService

__all__ = ["CheckoutService"]
