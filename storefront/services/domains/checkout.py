"""
Checkout Domain Service

Turns the session cart into a cash-on-delivery order:
1. Insert the order row (status Processing, payment mode COD)
2. Insert order_items at the prices snapshotted in the cart
3. Decrement product stock
4. Clear the cart

Every product id is checked before anything is written. If step 2 fails the
order row from step 1 is deleted again, and the cart is only cleared once
steps 1-2 succeed.
"""
from typing import Optional

import httpx
from postgrest.exceptions import APIError

from storefront.cart import CartManager
from storefront.config import Settings
from storefront.db import get_supabase
from storefront.errors import (
    CheckoutError,
    ERROR_CART_EMPTY,
    ERROR_ORDER_FAILED,
    ERROR_PRODUCT_NOT_FOUND,
    ERROR_UNAUTHORIZED,
)
from storefront.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from storefront.services.models import Order, OrderItem, PAYMENT_MODE_COD, ShippingAddress
from storefront.services.repositories import OrderRepository, ProductRepository
from storefront.services.repositories.base import parse_db_id

logger = get_logger(__name__)

INITIAL_ORDER_STATUS = "Processing"


class CheckoutService:
    """Cash-on-delivery order placement."""

    def __init__(self, orders: OrderRepository, products: ProductRepository):
        self.orders = orders
        self.products = products

    @classmethod
    async def create(cls, settings: Optional[Settings] = None) -> "CheckoutService":
        """Build the service on the shared async Supabase client."""
        client = await get_supabase(settings)
        return cls(OrderRepository(client), ProductRepository(client))

    async def place_cod_order(
        self,
        user_id: Optional[str],
        shipping_address: ShippingAddress,
        cart: CartManager,
        user_email: Optional[str] = None,
    ) -> Order:
        """
        Place an order for everything in the cart.

        Args:
            user_id: Authenticated user id (from the identity service)
            shipping_address: Validated delivery address
            cart: The session cart; cleared on success
            user_email: Stored on the order for the admin console

        Returns:
            The created order with its items

        Raises:
            CheckoutError: Not logged in, empty cart, or the database rejected the order
        """
        if not user_id:
            raise CheckoutError(ERROR_UNAUTHORIZED)

        items = cart.items
        if not items:
            raise CheckoutError(ERROR_CART_EMPTY)

        safe_user = sanitize_id_for_logging(user_id)
        for item in items:
            if parse_db_id(item.product_id) is None:
                logger.warning(
                    f"Checkout refused for user {safe_user}: unknown product "
                    f"{sanitize_string_for_logging(item.name)} ({sanitize_id_for_logging(item.product_id)})"
                )
                raise CheckoutError(ERROR_PRODUCT_NOT_FOUND)

        total = cart.get_total()

        try:
            order = await self.orders.create(
                user_id=user_id,
                total_amount=total,
                shipping_address=shipping_address,
                user_email=user_email,
                status=INITIAL_ORDER_STATUS,
                payment_mode=PAYMENT_MODE_COD,
            )
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Failed to place order for user {safe_user}: {e}", exc_info=True)
            raise CheckoutError(ERROR_ORDER_FAILED) from e

        try:
            await self.orders.add_items(order.id, items)
        except (APIError, httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to add items to order {order.id}, rolling back: {e}", exc_info=True)
            await self._discard_order(order.id)
            raise CheckoutError(ERROR_ORDER_FAILED) from e

        for item in items:
            try:
                await self.products.decrement_stock(item.product_id, item.quantity)
            except (APIError, httpx.HTTPError) as e:
                logger.warning(
                    f"Stock not updated for {sanitize_string_for_logging(item.name)} on order {order.id}: {e}"
                )

        cart.clear_cart()
        logger.info(
            f"Order {order.id} placed for user {safe_user}: {len(items)} line(s), total {total}, "
            f"ship to {sanitize_string_for_logging(shipping_address.city)}"
        )

        order.items = [
            OrderItem(
                product_id=item.product_id,
                name=item.name,
                quantity=item.quantity,
                price_at_time=item.unit_price,
                image=item.image_ref,
            )
            for item in items
        ]
        return order

    async def _discard_order(self, order_id: str) -> None:
        try:
            await self.orders.delete(order_id)
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Order {order_id} left without items, delete failed: {e}", exc_info=True)
