"""Cart line item with Decimal pricing and snapshot serialization."""
import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List

from storefront.errors import CorruptCartSnapshot, ERROR_CART_SNAPSHOT_CORRUPT
from storefront.services.money import multiply, parse_decimal

SNAPSHOT_FIELDS = ("product_id", "name", "unit_price", "quantity", "image_ref", "available_stock")


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class CartLineItem:
    """One cart row per product.

    name, unit_price, image_ref and available_stock are snapshots taken
    when the product was added; they are not refreshed from the catalog.
    """
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int
    image_ref: str
    available_stock: int

    def __post_init__(self):
        if not isinstance(self.product_id, str) or not self.product_id:
            raise ValueError("product_id must be a non-empty string")
        if not isinstance(self.name, str):
            raise ValueError("name must be a string")
        if not isinstance(self.image_ref, str):
            raise ValueError("image_ref must be a string")
        if not _is_int(self.available_stock) or self.available_stock < 0:
            raise ValueError("available_stock must be a non-negative integer")
        if not _is_int(self.quantity) or self.quantity < 1:
            raise ValueError("quantity must be a positive integer")
        if self.quantity > self.available_stock:
            raise ValueError(
                f"quantity {self.quantity} exceeds available stock {self.available_stock}"
            )
        price = parse_decimal(self.unit_price)
        if price < 0:
            raise ValueError("unit_price must be non-negative")
        object.__setattr__(self, "unit_price", price)

    @property
    def line_total(self) -> Decimal:
        """unit_price × quantity."""
        return multiply(self.unit_price, self.quantity)

    def to_dict(self) -> dict:
        """Convert to a JSON-safe dictionary."""
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "image_ref": self.image_ref,
            "available_stock": self.available_stock,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLineItem":
        """Create from dictionary; raises KeyError/ValueError on bad data."""
        return cls(
            product_id=data["product_id"],
            name=data["name"],
            unit_price=parse_decimal(data["unit_price"]),
            quantity=data["quantity"],
            image_ref=data["image_ref"],
            available_stock=data["available_stock"],
        )


def dump_snapshot(items: Iterable[CartLineItem]) -> str:
    """Serialize line items to the persisted JSON array."""
    return json.dumps([item.to_dict() for item in items], ensure_ascii=False)


def load_snapshot(raw: str) -> List[CartLineItem]:
    """
    Parse a persisted JSON array back into line items.

    Raises:
        CorruptCartSnapshot: If the payload is not an array of valid,
            distinct line items
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise CorruptCartSnapshot(f"{ERROR_CART_SNAPSHOT_CORRUPT}: not valid JSON ({e})") from e

    if not isinstance(data, list):
        raise CorruptCartSnapshot(f"{ERROR_CART_SNAPSHOT_CORRUPT}: expected a JSON array")

    items: List[CartLineItem] = []
    seen = set()
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise CorruptCartSnapshot(f"{ERROR_CART_SNAPSHOT_CORRUPT}: entry {index} is not an object")
        try:
            item = CartLineItem.from_dict(entry)
        except (KeyError, TypeError, ValueError) as e:
            raise CorruptCartSnapshot(f"{ERROR_CART_SNAPSHOT_CORRUPT}: entry {index} is invalid ({e})") from e
        if item.product_id in seen:
            raise CorruptCartSnapshot(f"{ERROR_CART_SNAPSHOT_CORRUPT}: duplicate product_id {item.product_id}")
        seen.add(item.product_id)
        items.append(item)
    return items
