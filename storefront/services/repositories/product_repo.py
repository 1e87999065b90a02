"""Product Repository - Product catalog operations."""
import re
from typing import Any, Dict, List, Optional

from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.models import PLACEHOLDER_IMAGE, Product
from .base import BaseRepository, parse_db_id

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 20
STOCK_UPDATE_ATTEMPTS = 3


def slugify(text: str) -> str:
    """Category name to URL slug ("Mobile Chargers" -> "mobile-chargers")."""
    return re.sub(r"\s+", "-", (text or "").lower())


def product_from_row(row: Dict[str, Any]) -> Product:
    """Map a `products` table row to the storefront Product."""
    return Product(
        id=str(row["id"]),
        name=row["name"],
        description=row.get("description"),
        category_slug=slugify(row.get("category") or ""),
        price=row.get("price"),
        images=[row.get("image_url") or PLACEHOLDER_IMAGE],
        stock=row.get("stock") or 0,
    )


class ProductRepository(BaseRepository):
    """Product database operations."""

    async def get_all(self, limit: int = DEFAULT_PAGE_SIZE) -> List[Product]:
        """Get the first `limit` products."""
        result = await self.client.table("products").select("*").limit(limit).execute()
        return [product_from_row(row) for row in result.data or []]

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        """Get product by ID; non-numeric ids never match."""
        db_id = parse_db_id(product_id)
        if db_id is None:
            return None

        result = await self.client.table("products").select("*").eq("id", db_id).execute()
        if not result.data:
            return None
        return product_from_row(result.data[0])

    async def get_by_category(self, slug: str) -> List[Product]:
        """Products whose category slugifies to `slug`."""
        result = await self.client.table("products").select("*").execute()
        products = [product_from_row(row) for row in result.data or []]
        return [p for p in products if p.category_slug == slug]

    async def decrement_stock(self, product_id: str, quantity: int) -> Optional[int]:
        """Reduce stock after a sale, never below zero. Returns the new stock.

        The update only applies if stock still holds the value just read, so
        two concurrent checkouts cannot both write from the same reading. A
        lost race re-reads and retries; after STOCK_UPDATE_ATTEMPTS the
        decrement is skipped and None returned.
        """
        db_id = parse_db_id(product_id)
        if db_id is None:
            return None

        for _ in range(STOCK_UPDATE_ATTEMPTS):
            result = await self.client.table("products").select("stock").eq("id", db_id).execute()
            if not result.data:
                logger.warning(
                    f"Stock update skipped, product {sanitize_id_for_logging(product_id)} not found"
                )
                return None

            current = int(result.data[0].get("stock") or 0)
            new_stock = max(0, current - quantity)
            updated = await (
                self.client.table("products")
                .update({"stock": new_stock})
                .eq("id", db_id)
                .eq("stock", current)
                .execute()
            )
            if updated.data:
                return new_stock

        logger.warning(
            f"Stock update skipped for product {sanitize_id_for_logging(product_id)}: "
            f"stock kept changing"
        )
        return None
