"""
Advisory cart notifications.

The cart manager reports outcomes (added, clamped, removed, cleared)
through a sink with a single ``notify(message, severity)`` method. Sinks
are for display only; callers must not branch on them.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Protocol

from storefront.logging import get_logger

logger = get_logger(__name__)


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"


# Message templates
MSG_ADDED = "Added to cart: {name} has been added to your cart."
MSG_ADD_STOCK_LIMIT = "Stock limit reached: Cannot add more than {stock} units."
MSG_REMOVED = "Removed from cart: Item removed from your cart."
MSG_QUANTITY_ZERO = "Item removed: Quantity set to 0, item removed."
MSG_UPDATE_STOCK_LIMIT = "Stock limit reached: Max quantity is {stock}."
MSG_CLEARED = "Cart cleared: Your shopping cart is now empty."


class NotificationSink(Protocol):
    def notify(self, message: str, severity: Severity) -> None:
        ...


@dataclass(frozen=True)
class Notification:
    message: str
    severity: Severity


class LoggingNotifier:
    """Writes notifications to the application log."""

    def notify(self, message: str, severity: Severity) -> None:
        if severity is Severity.WARNING:
            logger.warning(message)
        else:
            logger.info(message)


class RecordingNotifier:
    """Keeps notifications until the UI drains them."""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, message: str, severity: Severity) -> None:
        self.notifications.append(Notification(message, severity))

    def drain(self) -> List[Notification]:
        """Return pending notifications and forget them."""
        pending, self.notifications = self.notifications, []
        return pending

    @property
    def messages(self) -> List[str]:
        return [n.message for n in self.notifications]
