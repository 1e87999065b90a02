"""Database Models - Pydantic models for catalog and order entities."""
from decimal import Decimal
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, field_validator

from storefront.services.money import to_decimal as _to_decimal

PLACEHOLDER_IMAGE = "https://placehold.co/600x400.png"

OrderStatus = Literal["Pending", "Processing", "Shipped", "Delivered", "Cancelled"]
ORDER_STATUSES = ("Pending", "Processing", "Shipped", "Delivered", "Cancelled")
PAYMENT_MODE_COD = "COD"


class Product(BaseModel):
    """Catalog product as seen by the storefront."""
    id: str
    name: str
    description: Optional[str] = None
    category_slug: str = ""
    price: Decimal
    images: list[str] = []
    specifications: dict[str, str] = {}
    stock: int = 0  # Units currently available

    class Config:
        extra = "ignore"

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("stock", mode="before")
    @classmethod
    def non_negative_stock(cls, v):
        return max(0, int(v or 0))

    @property
    def first_image(self) -> str:
        return self.images[0] if self.images else PLACEHOLDER_IMAGE


class ShippingAddress(BaseModel):
    """Cash-on-delivery shipping address."""
    full_name: str
    address: str
    city: str
    postal_code: str
    country: str = "India"

    @field_validator("full_name", "address", "city", "postal_code", "country")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class OrderItem(BaseModel):
    """Line of a placed order, priced at order time."""
    product_id: str
    name: str = "Product Not Available"
    quantity: int
    price_at_time: Decimal
    image: str = PLACEHOLDER_IMAGE

    @field_validator("price_at_time", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)


class Order(BaseModel):
    """Order model."""
    id: str
    user_id: str
    user_email: Optional[str] = None
    items: list[OrderItem] = []
    total_amount: Decimal
    status: OrderStatus = "Pending"
    created_at: Optional[datetime] = None
    shipping_address: Optional[ShippingAddress] = None
    payment_mode: str = PAYMENT_MODE_COD

    class Config:
        extra = "ignore"

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v)

    @field_validator("total_amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        return v or "Pending"
