"""Order Repository - Order operations."""
from decimal import Decimal
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from storefront.errors import ERROR_ORDER_INVALID_STATUS, ERROR_PRODUCT_NOT_FOUND
from storefront.services.models import (
    ORDER_STATUSES,
    PAYMENT_MODE_COD,
    PLACEHOLDER_IMAGE,
    Order,
    OrderItem,
    ShippingAddress,
)
from storefront.services.money import to_float
from .base import BaseRepository, parse_db_id

if TYPE_CHECKING:
    from storefront.cart.models import CartLineItem

ORDER_ITEMS_WITH_PRODUCT = "quantity, price_at_time, products (id, name, image_url, stock)"


def _order_item_from_row(row: Dict[str, Any]) -> OrderItem:
    product = row.get("products") or {}
    return OrderItem(
        product_id=str(product["id"]) if product.get("id") is not None else "unknown-product",
        name=product.get("name") or "Product Not Available",
        quantity=row["quantity"],
        price_at_time=row["price_at_time"],
        image=product.get("image_url") or PLACEHOLDER_IMAGE,
    )


class OrderRepository(BaseRepository):
    """Order database operations."""

    async def create(
        self,
        user_id: str,
        total_amount: Decimal,
        shipping_address: ShippingAddress,
        user_email: Optional[str] = None,
        status: str = "Processing",
        payment_mode: str = PAYMENT_MODE_COD,
    ) -> Order:
        """Insert an order row (items are written separately)."""
        if status not in ORDER_STATUSES:
            raise ValueError(f"{ERROR_ORDER_INVALID_STATUS}: {status!r}")

        data = {
            "user_id": user_id,
            "user_email": user_email,
            "status": status,
            "payment_mode": payment_mode,
            "total_amount": to_float(total_amount),
            "shipping_address": shipping_address.model_dump(),
        }
        result = await self.client.table("orders").insert(data).execute()
        return Order(**result.data[0])

    async def add_items(self, order_id: str, items: List["CartLineItem"]) -> None:
        """Insert order_items rows priced at the cart snapshot.

        Raises ValueError before touching the database if the order id or any
        product id is not a database id.
        """
        db_order_id = parse_db_id(order_id)
        if db_order_id is None:
            raise ValueError(f"Invalid order id: {order_id!r}")

        rows = []
        for item in items:
            db_product_id = parse_db_id(item.product_id)
            if db_product_id is None:
                raise ValueError(f"{ERROR_PRODUCT_NOT_FOUND}: {item.product_id!r}")
            rows.append(
                {
                    "order_id": db_order_id,
                    "product_id": db_product_id,
                    "quantity": item.quantity,
                    "price_at_time": to_float(item.unit_price),
                }
            )
        if rows:
            await self.client.table("order_items").insert(rows).execute()

    async def delete(self, order_id: str) -> None:
        """Remove an order and any of its items."""
        db_id = parse_db_id(order_id)
        if db_id is None:
            return

        await self.client.table("order_items").delete().eq("order_id", db_id).execute()
        await self.client.table("orders").delete().eq("id", db_id).execute()

    async def get_for_user(self, user_id: str) -> List[Order]:
        """Order history for a user, newest first (items not loaded)."""
        result = await (
            self.client.table("orders")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [Order(**row) for row in result.data or []]

    async def get_by_id(self, order_id: str, user_id: str) -> Optional[Order]:
        """Get one of the user's orders with its items."""
        db_id = parse_db_id(order_id)
        if db_id is None:
            return None

        result = await (
            self.client.table("orders")
            .select("*")
            .eq("id", db_id)
            .eq("user_id", user_id)
            .execute()
        )
        if not result.data:
            return None

        items_result = await (
            self.client.table("order_items")
            .select(ORDER_ITEMS_WITH_PRODUCT)
            .eq("order_id", db_id)
            .execute()
        )
        order = Order(**result.data[0])
        order.items = [_order_item_from_row(row) for row in items_result.data or []]
        return order
