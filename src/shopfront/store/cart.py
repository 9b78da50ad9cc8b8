"""Session-backed shopping cart."""

from dataclasses import dataclass
from decimal import Decimal

from .exceptions import ValidationFailed
from .formatting import json_number, to_decimal
from .merge import record_key
from .records import Product

CART_SESSION_KEY = "cart"


@dataclass
class CartLine:
    product: dict
    quantity: int

    @property
    def product_id(self):
        return self.product["id"]

    @property
    def price(self) -> Decimal:
        return to_decimal(self.product.get("price"), Decimal("0"))

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def as_dict(self) -> dict:
        return {
            "product": self.product,
            "quantity": self.quantity,
            "subtotal": json_number(self.subtotal),
        }


class Cart:
    """Cart lines stored in the session as ``{key: {"product": ..., "quantity": n}}``."""

    def __init__(self, session):
        self.session = session
        self._lines = session.get(CART_SESSION_KEY) or {}

    def __len__(self):
        return len(self._lines)

    def __bool__(self):
        return bool(self._lines)

    def _save(self):
        self.session[CART_SESSION_KEY] = self._lines
        self.session.modified = True

    def add(self, product: Product, quantity: int = 1) -> CartLine:
        if quantity < 1:
            raise ValidationFailed({"quantity": "Quantity must be at least 1"})

        key = record_key(product.id)
        line = self._lines.get(key)
        if line is None:
            line = {"product": product.as_payload(), "quantity": 0}
            self._lines[key] = line
        line["quantity"] += quantity
        self._save()
        return CartLine(product=line["product"], quantity=line["quantity"])

    def set_quantity(self, product_id, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        key = record_key(product_id)
        if key not in self._lines:
            return
        if quantity <= 0:
            del self._lines[key]
        else:
            self._lines[key]["quantity"] = quantity
        self._save()

    def remove(self, product_id) -> None:
        if self._lines.pop(record_key(product_id), None) is not None:
            self._save()

    def clear(self) -> None:
        self._lines = {}
        self._save()

    @property
    def items(self) -> list[CartLine]:
        return [CartLine(product=line["product"], quantity=line["quantity"]) for line in self._lines.values()]

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.items)

    @property
    def total_price(self) -> Decimal:
        return sum((line.subtotal for line in self.items), Decimal("0"))

    def as_dict(self) -> dict:
        return {
            "items": [line.as_dict() for line in self.items],
            "totalItems": self.total_items,
            "totalPrice": json_number(self.total_price),
        }
