"""Tests for response normalizers.

Covers:
- The three accepted payload shapes (wrapped, bare list, legacy map)
- Per-entry skipping of unusable records
- Default values for optional product and order fields
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from shopfront.store.normalizers import (
    coerce_identifier,
    extract_entries,
    normalize_order,
    normalize_orders,
    normalize_product,
    normalize_products,
)
from shopfront.store.records import PLACEHOLDER_IMAGE, OrderStatus


class TestPayloadShapes:
    """The same records come out whichever shape a backend answers in."""

    entries = [
        {"id": 1, "name": "Rice Cooker", "price": 990},
        {"id": 2, "name": "Desk Fan", "price": 1490},
    ]

    def test_wrapped_list(self):
        products = normalize_products({"products": self.entries})

        assert [p.id for p in products] == [1, 2]

    def test_bare_list(self):
        products = normalize_products(self.entries)

        assert [p.id for p in products] == [1, 2]

    def test_legacy_keyed_map(self):
        products = normalize_products({"0": self.entries[0], "1": self.entries[1]})

        assert [p.id for p in products] == [1, 2]

    def test_legacy_map_ignores_id_key_and_scalars(self):
        raw = {"id": {"id": 99, "name": "Ghost", "price": 1}, "0": self.entries[0], "meta": "v2"}

        assert extract_entries(raw, "products") == [self.entries[0]]

    def test_orders_wrapped_under_orders_key(self):
        orders = normalize_orders({"orders": [{"id": 120, "items": []}]})

        assert [o.id for o in orders] == [120]

    @pytest.mark.parametrize("raw", [None, "", "oops", 42, True, {}, [], {"products": "nope"}, [1, "two", None]])
    def test_garbage_gives_empty_list(self, raw):
        assert normalize_products(raw) == []
        assert normalize_orders(raw) == []


class TestNormalizeProduct:
    """Tests for single product normalization."""

    def test_missing_optional_fields_get_defaults(self):
        product = normalize_product({"id": 7, "name": "Kettle", "price": "450"})

        assert product.price == Decimal("450")
        assert product.image == PLACEHOLDER_IMAGE
        assert product.category == "Uncategorized"
        assert product.currency == "THB"
        assert product.stock == 0
        assert product.image_alt == "Kettle"

    @pytest.mark.parametrize("raw", [
        {"name": "No id", "price": 10},
        {"id": 3, "price": 10},
        {"id": 3, "name": "", "price": 10},
        {"id": 3, "name": "No price"},
        {"id": 3, "name": "Bad price", "price": "abc"},
        {"id": 3, "name": "Infinite", "price": "Infinity"},
        {"id": True, "name": "Bool id", "price": 10},
    ])
    def test_unusable_entry_is_skipped(self, raw):
        assert normalize_product(raw) is None

    def test_bad_entry_does_not_drop_the_batch(self):
        products = normalize_products([
            {"id": 1, "name": "Good", "price": 10},
            {"id": 2, "name": "Bad"},
            "not a dict",
            {"id": 3, "name": "Also good", "price": 20},
        ])

        assert [p.id for p in products] == [1, 3]

    def test_string_numeric_id_becomes_int(self):
        product = normalize_product({"id": "150", "name": "Blender", "price": 2500})

        assert product.id == 150

    def test_bad_stock_defaults_to_zero(self):
        product = normalize_product({"id": 1, "name": "Fan", "price": 10, "stock": "lots"})

        assert product.stock == 0

    def test_non_string_text_fields_are_stringified(self):
        product = normalize_product({"id": 1, "name": "Fan", "price": 10, "category": 5, "description": ["x"]})

        assert product.category == "5"
        assert product.description == "['x']"


class TestNormalizeOrder:
    """Tests for single order normalization."""

    def test_full_order(self):
        order = normalize_order({
            "id": 120,
            "createAt": "2025-01-07T05:30:00Z",
            "items": [{"productId": 150, "qty": 2, "price": 2500}],
            "total": 5000,
            "status": "shipped",
            "customerInfo": {"name": "Malee"},
        })

        assert order.id == 120
        assert order.created_at == datetime(2025, 1, 7, 5, 30, tzinfo=timezone.utc)
        assert order.items[0].product_id == 150
        assert order.total == Decimal("5000")
        assert order.status == OrderStatus.SHIPPED
        assert order.customer_info == {"name": "Malee"}

    def test_total_defaults_to_sum_of_items(self):
        order = normalize_order({
            "id": 81,
            "items": [{"productId": 1, "qty": 2, "price": 100}, {"productId": 2, "qty": 1, "price": 50}],
        })

        assert order.total == Decimal("250")

    def test_status_defaults_to_pending(self):
        assert normalize_order({"id": 81}).status == "pending"

    def test_naive_timestamp_is_treated_as_utc(self):
        order = normalize_order({"id": 81, "createAt": "2025-01-07T05:30:00"})

        assert order.created_at.tzinfo is not None
        assert order.created_at.utcoffset().total_seconds() == 0

    @pytest.mark.parametrize("value", ["not a date", "2025-13-45T99:00:00", 12345, None])
    def test_unparseable_timestamp_is_none(self, value):
        assert normalize_order({"id": 81, "createAt": value}).created_at is None

    def test_items_without_product_id_are_dropped(self):
        order = normalize_order({"id": 81, "items": [{"qty": 1}, {"productId": 4, "qty": 1, "price": 5}, "junk"]})

        assert [item.product_id for item in order.items] == [4]

    def test_order_without_id_is_skipped(self):
        assert normalize_order({"items": []}) is None


class TestCoerceIdentifier:
    @pytest.mark.parametrize("value, expected", [
        (5, 5),
        ("5", 5),
        (" 81 ", 81),
        (80.0, 80),
        ("ORD-00120", "ORD-00120"),
        ("", None),
        (None, None),
        (False, None),
        ([1], None),
    ])
    def test_coerce(self, value, expected):
        assert coerce_identifier(value) == expected
