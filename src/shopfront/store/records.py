"""Canonical in-memory shapes for products and orders."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from django.db import models

from .formatting import json_number, stock_status
from .mutability import get_source

PLACEHOLDER_IMAGE = "/placeholder-product.svg"
DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_CURRENCY = "THB"


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    SUCCESS = "success", "Success"
    FAILED = "failed", "Failed"
    SHIPPED = "shipped", "Shipped"
    CANCELLED = "cancelled", "Cancelled"


@dataclass
class Product:
    """A catalog product merged from either backend."""

    id: int | str
    name: str
    price: Decimal
    description: str = ""
    image: str = PLACEHOLDER_IMAGE
    category: str = DEFAULT_CATEGORY
    brand: str = ""
    stock: int = 0
    currency: str = DEFAULT_CURRENCY
    image_alt: str = ""

    def __post_init__(self):
        if not self.image_alt:
            self.image_alt = self.name

    @property
    def editable(self) -> bool:
        return get_source(self.id).editable

    def as_payload(self) -> dict:
        """Wire shape, as the backends accept it."""
        return {
            "id": self.id,
            "name": self.name,
            "price": json_number(self.price),
            "description": self.description,
            "image": self.image,
            "category": self.category,
            "brand": self.brand,
            "stock": self.stock,
            "currency": self.currency,
            "imageAlt": self.image_alt,
        }

    def as_dict(self) -> dict:
        """Wire shape plus derived presentation fields."""
        source = get_source(self.id)
        return {
            **self.as_payload(),
            "stockStatus": stock_status(self.stock),
            "source": source.origin.value,
            "editable": source.editable,
        }


@dataclass
class OrderItem:
    product_id: int | str
    qty: int
    price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.qty

    def as_payload(self) -> dict:
        return {
            "productId": self.product_id,
            "qty": self.qty,
            "price": json_number(self.price),
        }


@dataclass
class Order:
    """A customer order merged from either backend."""

    id: int | str
    created_at: datetime | None = None
    items: list[OrderItem] = field(default_factory=list)
    total: Decimal = Decimal("0")
    status: str = OrderStatus.PENDING
    customer_info: dict = field(default_factory=dict)

    @property
    def editable(self) -> bool:
        return get_source(self.id).editable

    def as_payload(self) -> dict:
        return {
            "id": self.id,
            "createAt": self.created_at.isoformat() if self.created_at else None,
            "items": [item.as_payload() for item in self.items],
            "total": json_number(self.total),
            "status": str(self.status),
            "customerInfo": dict(self.customer_info),
        }

    def as_dict(self) -> dict:
        source = get_source(self.id)
        return {
            **self.as_payload(),
            "source": source.origin.value,
            "editable": source.editable,
        }
