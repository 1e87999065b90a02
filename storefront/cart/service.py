"""Cart manager: session cart state, stock clamping, snapshot persistence."""
from dataclasses import replace
from decimal import Decimal
from typing import List, Optional

from storefront.config import (
    CART_BACKEND_FILE,
    CART_BACKEND_MEMORY,
    CART_BACKEND_REDIS,
    Settings,
)
from storefront.errors import CartStorageError, CorruptCartSnapshot
from storefront.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from storefront.services.models import Product
from storefront.services.money import format_money, to_float
from .models import CartLineItem
from .notifications import (
    LoggingNotifier,
    NotificationSink,
    Severity,
    MSG_ADDED,
    MSG_ADD_STOCK_LIMIT,
    MSG_CLEARED,
    MSG_QUANTITY_ZERO,
    MSG_REMOVED,
    MSG_UPDATE_STOCK_LIMIT,
)
from .storage import CartStorage, InMemoryCartStorage, JsonFileCartStorage, RedisCartStorage

logger = get_logger(__name__)


class CartManager:
    """
    Owns the line items of one browsing session's cart.

    Features:
    - One line per product, quantity clamped to the stock snapshot
    - Whole-cart snapshot written to storage after every mutation
    - Advisory notifications for every user-visible outcome

    Mutations never raise for stock or quantity problems and never raise
    for storage failures; the in-memory cart stays authoritative.
    """

    def __init__(self, storage: CartStorage, notifier: Optional[NotificationSink] = None):
        self.storage = storage
        self.notifier = notifier or LoggingNotifier()
        self._items: List[CartLineItem] = []

    @property
    def items(self) -> List[CartLineItem]:
        """Current line items in insertion order (a copy)."""
        return list(self._items)

    def initialize(self) -> None:
        """Rehydrate from storage; start empty if the snapshot is missing or unreadable."""
        try:
            items = self.storage.load()
        except CorruptCartSnapshot as e:
            logger.warning(f"Corrupted cart snapshot, starting with an empty cart: {e}")
            items = None
        except CartStorageError as e:
            logger.warning(f"Cart storage unavailable, starting with an empty cart: {e}")
            items = None

        self._items = list(items) if items else []
        logger.debug(f"Cart initialized with {len(self._items)} line item(s)")

    def add_item(self, product: Product, quantity_to_add: int = 1) -> None:
        """Add units of a product, clamping the line to the product's stock."""
        if isinstance(quantity_to_add, bool) or not isinstance(quantity_to_add, int) or quantity_to_add < 1:
            raise ValueError("quantity_to_add must be a positive integer")

        stock = product.stock
        index = self._find_index(product.id)

        if index is None:
            quantity = quantity_to_add
            if quantity > stock:
                self._notify(MSG_ADD_STOCK_LIMIT.format(stock=stock), Severity.WARNING)
                quantity = stock
            # An out-of-stock product never gets a zero-quantity line
            if quantity > 0:
                self._items.append(
                    CartLineItem(
                        product_id=product.id,
                        name=product.name,
                        unit_price=product.price,
                        quantity=quantity,
                        image_ref=product.first_image,
                        available_stock=stock,
                    )
                )
        else:
            existing = self._items[index]
            new_quantity = existing.quantity + quantity_to_add
            if new_quantity > stock:
                self._notify(MSG_ADD_STOCK_LIMIT.format(stock=stock), Severity.WARNING)
                new_quantity = stock
            if new_quantity > 0:
                self._items[index] = replace(existing, quantity=new_quantity, available_stock=stock)
            else:
                del self._items[index]

        logger.debug(f"Added {quantity_to_add} x {sanitize_string_for_logging(product.name)} (stock {stock})")
        self._notify(MSG_ADDED.format(name=product.name), Severity.INFO)
        self._persist()

    def remove_item(self, product_id: str) -> None:
        """Drop the product's line if present."""
        self._items = [item for item in self._items if item.product_id != product_id]
        self._notify(MSG_REMOVED, Severity.INFO)
        self._persist()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set an absolute quantity; <= 0 removes, above the stock snapshot clamps."""
        index = self._find_index(product_id)
        if index is None:
            return

        item = self._items[index]
        if quantity <= 0:
            del self._items[index]
            self._notify(MSG_QUANTITY_ZERO, Severity.WARNING)
        elif quantity > item.available_stock:
            self._items[index] = replace(item, quantity=item.available_stock)
            self._notify(MSG_UPDATE_STOCK_LIMIT.format(stock=item.available_stock), Severity.WARNING)
        else:
            self._items[index] = replace(item, quantity=quantity)

        self._persist()

    def clear_cart(self) -> None:
        self._items = []
        self._notify(MSG_CLEARED, Severity.INFO)
        self._persist()

    def get_total(self) -> Decimal:
        """Sum of unit_price × quantity over all lines."""
        return sum((item.line_total for item in self._items), Decimal("0"))

    def get_item_count(self) -> int:
        """Total units in the cart (not distinct products)."""
        return sum(item.quantity for item in self._items)

    def get_cart_summary(self, currency: str = "INR") -> dict:
        """Plain-dict view of the cart for templates and checkout."""
        if not self._items:
            return {
                "is_empty": True,
                "total_items": 0,
                "items": [],
                "total": 0.0,
                "formatted_total": format_money(0, currency),
            }

        total = self.get_total()
        return {
            "is_empty": False,
            "total_items": self.get_item_count(),
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "image": item.image_ref,
                    "quantity": item.quantity,
                    "available_stock": item.available_stock,
                    "unit_price": to_float(item.unit_price),
                    "total": to_float(item.line_total),
                }
                for item in self._items
            ],
            "total": to_float(total),
            "formatted_total": format_money(total, currency),
        }

    def _find_index(self, product_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.product_id == product_id:
                return index
        return None

    def _notify(self, message: str, severity: Severity) -> None:
        self.notifier.notify(message, severity)

    def _persist(self) -> None:
        try:
            self.storage.save(self._items)
        except CartStorageError as e:
            logger.error(f"Failed to persist cart ({len(self._items)} line item(s)): {e}")


def create_cart_manager(
    settings: Optional[Settings] = None,
    notifier: Optional[NotificationSink] = None,
    session_id: Optional[str] = None,
) -> CartManager:
    """
    Build and rehydrate a cart manager for one browsing session.

    Args:
        settings: Resolved settings (read from the environment if omitted)
        notifier: Notification sink (logs notifications if omitted)
        session_id: Redis backend only; scopes the key to one session

    Returns:
        Initialized CartManager
    """
    settings = settings or Settings.from_env()

    if settings.cart_backend == CART_BACKEND_MEMORY:
        storage: CartStorage = InMemoryCartStorage()
    elif settings.cart_backend == CART_BACKEND_FILE:
        storage = JsonFileCartStorage(settings.cart_storage_path)
    elif settings.cart_backend == CART_BACKEND_REDIS:
        from storefront.db import RedisKeys, get_redis_sync

        key = RedisKeys.cart_key(session_id or settings.cart_storage_key)
        storage = RedisCartStorage(get_redis_sync(settings), key, ttl=settings.cart_ttl_seconds)
        logger.info(f"Using Redis cart storage for session {sanitize_id_for_logging(session_id)}")
    else:
        raise ValueError(f"Unknown cart storage backend: {settings.cart_backend}")

    manager = CartManager(storage, notifier)
    manager.initialize()
    return manager
