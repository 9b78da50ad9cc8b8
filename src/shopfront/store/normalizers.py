"""Response normalizers.

Backends answer in one of three shapes:

    {"products": [{...}, {...}]}     wrapped list
    [{...}, {...}]                   bare list
    {"0": {...}, "1": {...}}         legacy keyed map

All three are turned into canonical ``Product``/``Order`` records. Malformed
input gives an empty list and a single bad entry is skipped, never the batch.
"""

import logging
from datetime import timezone as dt_timezone
from decimal import Decimal

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .formatting import to_decimal, to_int
from .records import (
    DEFAULT_CATEGORY,
    DEFAULT_CURRENCY,
    PLACEHOLDER_IMAGE,
    Order,
    OrderItem,
    OrderStatus,
    Product,
)

logger = logging.getLogger(__name__)


def _missing(value) -> bool:
    return value is None or value == ""


def _text(value, default: str = "") -> str:
    return str(value) if not _missing(value) else default


def coerce_identifier(value):
    """Numeric identifiers become ints; anything else stays a stripped string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else value
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
        return text or None
    return None


def extract_entries(raw, resource_key: str) -> list[dict]:
    """Pull the raw record objects out of any of the accepted shapes."""
    if isinstance(raw, list):
        return [entry for entry in raw if isinstance(entry, dict)]

    if not isinstance(raw, dict):
        return []

    wrapped = raw.get(resource_key)
    if isinstance(wrapped, list):
        return [entry for entry in wrapped if isinstance(entry, dict)]

    return [
        entry
        for key, entry in raw.items()
        if key != "id" and isinstance(entry, dict)
    ]


def normalize_product(raw) -> Product | None:
    """Build one Product, or None when id, name or price is unusable."""
    if not isinstance(raw, dict):
        return None

    identifier = coerce_identifier(raw.get("id"))
    name = raw.get("name")
    price = to_decimal(raw.get("price"))
    if identifier is None or _missing(name) or price is None:
        logger.debug("Skipping product entry without id/name/price: %r", raw.get("id"))
        return None

    return Product(
        id=identifier,
        name=str(name),
        price=price,
        description=_text(raw.get("description")),
        image=_text(raw.get("image"), PLACEHOLDER_IMAGE),
        category=_text(raw.get("category"), DEFAULT_CATEGORY),
        brand=_text(raw.get("brand")),
        stock=to_int(raw.get("stock"), 0),
        currency=_text(raw.get("currency"), DEFAULT_CURRENCY),
        image_alt=_text(raw.get("imageAlt"), str(name)),
    )


def normalize_products(raw) -> list[Product]:
    products = []
    for entry in extract_entries(raw, "products"):
        product = normalize_product(entry)
        if product is not None:
            products.append(product)
    return products


def _parse_created_at(value):
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = parse_datetime(value)
    except ValueError:
        return None
    if parsed is not None and timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def _normalize_item(raw) -> OrderItem | None:
    if not isinstance(raw, dict):
        return None
    product_id = coerce_identifier(raw.get("productId"))
    if product_id is None:
        return None
    return OrderItem(
        product_id=product_id,
        qty=to_int(raw.get("qty"), 0),
        price=to_decimal(raw.get("price"), Decimal("0")),
    )


def normalize_order(raw) -> Order | None:
    """Build one Order, or None when the id is unusable."""
    if not isinstance(raw, dict):
        return None

    identifier = coerce_identifier(raw.get("id"))
    if identifier is None:
        logger.debug("Skipping order entry without id")
        return None

    raw_items = raw.get("items")
    items = [
        item
        for item in (_normalize_item(entry) for entry in (raw_items if isinstance(raw_items, list) else []))
        if item is not None
    ]

    total = to_decimal(raw.get("total"))
    if total is None:
        total = sum((item.subtotal for item in items), Decimal("0"))

    status = raw.get("status") or OrderStatus.PENDING
    customer_info = raw.get("customerInfo")

    return Order(
        id=identifier,
        created_at=_parse_created_at(raw.get("createAt") or raw.get("createdAt")),
        items=items,
        total=total,
        status=str(status),
        customer_info=customer_info if isinstance(customer_info, dict) else {},
    )


def normalize_orders(raw) -> list[Order]:
    orders = []
    for entry in extract_entries(raw, "orders"):
        order = normalize_order(entry)
        if order is not None:
            orders.append(order)
    return orders
