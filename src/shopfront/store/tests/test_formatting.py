"""Tests for display helpers and records."""

from decimal import Decimal

import pytest

from shopfront.store.formatting import (
    format_thb,
    is_valid_email,
    is_valid_phone,
    json_number,
    stock_status,
    to_decimal,
    to_int,
)
from shopfront.store.records import Order, OrderItem, Product


@pytest.mark.parametrize("amount, expected", [
    (Decimal("1234.5"), "฿1,234.5"),
    (1000, "฿1,000"),
    ("99.99", "฿99.99"),
    (0, "฿0"),
    (None, "฿0"),
    (-50, "-฿50"),
])
def test_format_thb(amount, expected):
    assert format_thb(amount) == expected


@pytest.mark.parametrize("stock, expected", [
    (0, "out-of-stock"),
    (-2, "out-of-stock"),
    (None, "out-of-stock"),
    (9, "low-stock"),
    (10, "in-stock"),
])
def test_stock_status(stock, expected):
    assert stock_status(stock) == expected


def test_to_decimal_rejects_junk():
    assert to_decimal("12.50") == Decimal("12.50")
    assert to_decimal("abc") is None
    assert to_decimal("NaN") is None
    assert to_decimal(True) is None
    assert to_decimal("", Decimal("0")) == Decimal("0")


def test_to_int():
    assert to_int("12") == 12
    assert to_int("7.9") == 7
    assert to_int("Infinity", 3) == 3
    assert to_int(None, 1) == 1


def test_json_number():
    assert json_number(Decimal("2500")) == 2500
    assert isinstance(json_number(Decimal("2500")), int)
    assert json_number(Decimal("1490.50")) == 1490.5


@pytest.mark.parametrize("email, valid", [
    ("somchai@example.com", True),
    ("no-at-sign.com", False),
    ("two words@example.com", False),
    ("", False),
])
def test_is_valid_email(email, valid):
    assert is_valid_email(email) is valid


@pytest.mark.parametrize("phone, valid", [
    ("0812345678", True),
    ("081-234-5678", True),
    ("021234567", True),
    ("12345", False),
    ("08123456789", False),
    ("phone", False),
])
def test_is_valid_phone(phone, valid):
    assert is_valid_phone(phone) is valid


class TestRecordShapes:
    """Records render back to the backend wire shape."""

    def test_product_as_dict_adds_source_fields(self):
        product = Product(id=42, name="Kettle", price=Decimal("450"), stock=3)

        data = product.as_dict()

        assert data["imageAlt"] == "Kettle"
        assert data["price"] == 450
        assert data["stockStatus"] == "low-stock"
        assert data["source"] == "mock"
        assert data["editable"] is False

    def test_order_payload_uses_backend_keys(self):
        order = Order(
            id=120,
            items=[OrderItem(product_id=150, qty=2, price=Decimal("2500"))],
            total=Decimal("5000"),
            customer_info={"name": "Malee"},
        )

        payload = order.as_payload()

        assert payload["createAt"] is None
        assert payload["items"] == [{"productId": 150, "qty": 2, "price": 2500}]
        assert payload["customerInfo"] == {"name": "Malee"}
        assert order.as_dict()["editable"] is True
