"""Cart package: line items, storage backends, notifications and manager."""
from .models import CartLineItem
from .notifications import LoggingNotifier, Notification, RecordingNotifier, Severity
from .service import CartManager, create_cart_manager
from .storage import InMemoryCartStorage, JsonFileCartStorage, RedisCartStorage

__all__ = [
    "CartLineItem",
    "CartManager",
    "create_cart_manager",
    "InMemoryCartStorage",
    "JsonFileCartStorage",
    "RedisCartStorage",
    "LoggingNotifier",
    "Notification",
    "RecordingNotifier",
    "Severity",
]
