"""Tests for dashboard aggregates.

All dates are pinned with an explicit ``now``; local time is Asia/Bangkok
(UTC+7) under the test settings.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from shopfront.store.dashboard import (
    editability_counts,
    filter_orders,
    filter_products,
    inventory_stats,
    is_this_week,
    is_today,
    order_stats,
    overview,
    peak_hours,
    product_categories,
    sales_kpis,
    status_counts,
    top_products,
)
from shopfront.store.normalizers import normalize_orders, normalize_products
from shopfront.store.tests.fakes import LIVE_ORDERS, LIVE_PRODUCTS, SEED_ORDERS, SEED_PRODUCTS

# 17:00 in Bangkok on Tuesday 7 January 2025
NOW = datetime(2025, 1, 7, 10, 0, tzinfo=timezone.utc)

EXTRA_ORDERS = [
    {
        "id": 130,
        "createAt": "2025-01-07T06:10:00Z",
        "items": [{"productId": 151, "qty": 3, "price": 5900}],
        "total": 17700,
        "status": "success",
    },
    {
        "id": 131,
        "createAt": "2024-12-20T06:10:00Z",
        "items": [{"productId": 150, "qty": 1, "price": 2500}],
        "total": 2500,
        "status": "failed",
    },
]


@pytest.fixture
def orders():
    return normalize_orders(SEED_ORDERS) + normalize_orders(LIVE_ORDERS) + normalize_orders(EXTRA_ORDERS)


@pytest.fixture
def products():
    return normalize_products(SEED_PRODUCTS) + normalize_products(LIVE_PRODUCTS)[1:]


class TestDateWindows:
    def test_is_today_uses_local_date(self):
        # 23:30 UTC on the 6th is 06:30 on the 7th in Bangkok
        assert is_today(datetime(2025, 1, 6, 23, 30, tzinfo=timezone.utc), NOW) is True
        assert is_today(datetime(2025, 1, 6, 16, 0, tzinfo=timezone.utc), NOW) is False

    def test_undated_is_never_today(self):
        assert is_today(None, NOW) is False
        assert is_this_week(None, NOW) is False

    def test_iso_week_across_year_boundary(self):
        new_year = datetime(2025, 1, 1, 5, 0, tzinfo=timezone.utc)

        # Monday 30 December 2024 starts ISO week 1 of 2025
        assert is_this_week(datetime(2024, 12, 30, 5, 0, tzinfo=timezone.utc), new_year) is True
        assert is_this_week(datetime(2024, 12, 29, 5, 0, tzinfo=timezone.utc), new_year) is False

    def test_same_week_number_different_year(self):
        assert is_this_week(datetime(2024, 1, 9, 5, 0, tzinfo=timezone.utc), NOW) is False


class TestOrderAggregates:
    def test_order_stats(self, orders):
        stats = order_stats(orders)

        assert stats["total_orders"] == 4
        assert stats["total_revenue"] == Decimal("19680")
        assert stats["pending_orders"] == 1
        assert stats["failed_orders"] == 1
        assert stats["success_rate"] == 75.0

    def test_order_stats_empty(self):
        assert order_stats([])["success_rate"] == 0.0

    def test_sales_kpis(self, orders):
        kpis = sales_kpis(orders, NOW)

        assert kpis["todays_sales"] == Decimal("17700")
        assert kpis["this_week_sales"] == Decimal("19680")
        assert kpis["todays_successful_orders"] == 1

    def test_status_counts(self, orders):
        counts = status_counts(orders)

        assert counts["all"] == 4
        assert counts["success"] == 2
        assert counts["pending"] == 1
        assert counts["failed"] == 1
        assert counts["shipped"] == 0

    def test_editability_counts(self, orders):
        assert editability_counts(orders) == {"editable": 3, "read_only": 1}

    def test_filter_orders(self, orders):
        assert [o.id for o in filter_orders(orders, "pending")] == [120]
        assert len(filter_orders(orders, "all")) == 4


class TestPeakHours:
    def test_tie_lists_every_peak(self, orders):
        peak = peak_hours(orders, NOW)

        # 12:30 and 13:10 local
        assert peak["peak_hours"] == [12, 13]
        assert peak["peak_time_text"] == "Peak: 12:00, 13:00"
        assert peak["max_count"] == 1

    def test_single_peak(self, orders):
        peak = peak_hours([o for o in orders if o.id == 130], NOW)

        assert peak["peak_time_text"] == "Peak: 13:00–14:00"

    def test_no_orders_today(self):
        peak = peak_hours([], NOW)

        assert peak["peak_time_text"] == "No data"
        assert peak["peak_vs_average"] == 0


class TestProductAggregates:
    def test_top_products_by_quantity(self, orders, products):
        top = top_products(orders, products)

        assert [(entry["product_id"], entry["sales"]) for entry in top] == [(151, 3), (5, 2)]
        assert top[0]["name"] == "Air Purifier"
        assert top[0]["revenue"] == Decimal("17700")

    def test_top_products_unknown_name(self, orders):
        top = top_products(orders, [])

        assert top[0]["name"] == "Product #151"

    def test_inventory_stats(self, products):
        stats = inventory_stats(products)

        assert stats["total_products"] == 5
        assert stats["total_stock"] == 20 + 3 + 0 + 40 + 8
        assert stats["low_stock"] == 3

    def test_categories(self, products):
        assert product_categories(products) == ["Home", "Kitchen"]

    def test_filter_products(self, products):
        assert [p.id for p in filter_products(products, search="RICE")] == [5]
        assert [p.id for p in filter_products(products, category="Home")] == [12, 151]
        assert [p.id for p in filter_products(products, search="fan", category="Kitchen")] == []


def test_overview_has_every_section(orders, products):
    data = overview(products, orders, NOW)

    assert set(data) == {
        "orders", "kpis", "peak", "hourly_sales", "top_products",
        "inventory", "status_counts", "editability",
    }
    assert len(data["hourly_sales"]) == 24
    assert data["hourly_sales"][13] == {"hour": "13:00", "sales": Decimal("17700"), "orders": 1}
