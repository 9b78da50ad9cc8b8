"""Checkout: turn a cart into an order on the live backend."""

import logging
import time

from django.utils import timezone

from .cart import Cart
from .exceptions import ValidationFailed
from .formatting import is_valid_email, is_valid_phone, json_number
from .records import OrderStatus

logger = logging.getLogger(__name__)

REQUIRED_CUSTOMER_FIELDS = ("name", "email", "phone")


def validate_customer_info(data: dict) -> dict:
    """Clean customer details.

    Raises:
        ValidationFailed: If name, email or phone is missing or malformed
    """
    info = {field: str(data.get(field) or "").strip() for field in (*REQUIRED_CUSTOMER_FIELDS, "address")}

    errors = {field: "This field is required" for field in REQUIRED_CUSTOMER_FIELDS if not info[field]}
    if info["email"] and not is_valid_email(info["email"]):
        errors["email"] = "Enter a valid email address"
    if info["phone"] and not is_valid_phone(info["phone"]):
        errors["phone"] = "Enter a 9 or 10 digit phone number"
    if errors:
        raise ValidationFailed(errors)
    return info


def build_order_payload(cart: Cart, customer: dict, now=None) -> dict:
    """Order body in the shape the live backend stores.

    The id is the current epoch time in milliseconds, which always lands in
    the editable range.
    """
    now = now or timezone.now()
    return {
        "id": int(time.time() * 1000),
        "createAt": now.isoformat(),
        "items": [
            {
                "productId": line.product_id,
                "qty": line.quantity,
                "price": json_number(line.price),
            }
            for line in cart.items
        ],
        "total": json_number(cart.total_price),
        "status": OrderStatus.PENDING.value,
        "customerInfo": customer,
    }


async def place_order(orders, cart: Cart, data: dict):
    """Validate, create the order on the live backend, then empty the cart.

    The cart is only cleared once the backend accepted the order.

    Raises:
        ValidationFailed: On an empty cart or bad customer details
        AllTargetsFailed: If the live backend rejects the order
    """
    if not cart:
        raise ValidationFailed({"cart": "Cart is empty"})

    customer = validate_customer_info(data)
    payload = build_order_payload(cart, customer)
    result = await orders.create_order(payload)
    cart.clear()
    logger.info("Placed order %s with %d items", payload["id"], len(payload["items"]))
    return result
