"""Admin dashboard aggregates.

Pure functions over merged ``Product``/``Order`` lists. ``now`` defaults to
the current local time so "today" and "this week" follow ``TIME_ZONE``.
"""

from collections import Counter
from decimal import Decimal

from django.utils import timezone

from .formatting import is_low_stock
from .mutability import is_editable
from .records import OrderStatus

TOP_PRODUCTS_LIMIT = 5


def _local(value):
    return timezone.localtime(value) if value is not None else None


def _now(now=None):
    return timezone.localtime(now) if now is not None else timezone.localtime()


def is_today(value, now=None) -> bool:
    local = _local(value)
    return local is not None and local.date() == _now(now).date()


def is_this_week(value, now=None) -> bool:
    """Same ISO year and ISO week as ``now``."""
    local = _local(value)
    if local is None:
        return False
    return local.isocalendar()[:2] == _now(now).isocalendar()[:2]


def _successful(orders):
    return [order for order in orders if order.status == OrderStatus.SUCCESS]


def order_stats(orders) -> dict:
    total = len(orders)
    failed = sum(1 for order in orders if order.status == OrderStatus.FAILED)
    return {
        "total_orders": total,
        "total_revenue": sum((order.total for order in _successful(orders)), Decimal("0")),
        "pending_orders": sum(1 for order in orders if order.status == OrderStatus.PENDING),
        "failed_orders": failed,
        "success_rate": round((total - failed) / total * 100, 1) if total else 0.0,
    }


def status_counts(orders) -> dict:
    counts = Counter(str(order.status) for order in orders)
    return {"all": len(orders), **{status: counts.get(status, 0) for status in OrderStatus.values}}


def editability_counts(records) -> dict:
    editable = sum(1 for record in records if is_editable(record.id))
    return {"editable": editable, "read_only": len(records) - editable}


def sales_kpis(orders, now=None) -> dict:
    successful = _successful(orders)
    today = [order for order in successful if is_today(order.created_at, now)]
    return {
        "todays_sales": sum((order.total for order in today), Decimal("0")),
        "this_week_sales": sum(
            (order.total for order in successful if is_this_week(order.created_at, now)),
            Decimal("0"),
        ),
        "todays_successful_orders": len(today),
    }


def _todays_orders(orders, now=None):
    return [order for order in orders if is_today(order.created_at, now)]


def peak_hours(orders, now=None) -> dict:
    """Hourly order counts for today and the busiest hour(s)."""
    hourly = [0] * 24
    for order in _todays_orders(orders, now):
        hourly[_local(order.created_at).hour] += 1

    max_count = max(hourly)
    peaks = [hour for hour, count in enumerate(hourly) if count == max_count and count > 0]

    if not peaks:
        text = "No data"
    elif len(peaks) == 1:
        text = f"Peak: {peaks[0]:02d}:00–{peaks[0] + 1:02d}:00"
    else:
        text = "Peak: " + ", ".join(f"{hour:02d}:00" for hour in peaks)

    average = sum(hourly) / 24
    peak_vs_average = round((max_count - average) / average * 100) if max_count and average else 0

    return {
        "hourly_orders": [{"hour": hour, "count": count} for hour, count in enumerate(hourly)],
        "peak_hours": peaks,
        "peak_time_text": text,
        "max_count": max_count,
        "average_per_hour": average,
        "peak_vs_average": peak_vs_average,
    }


def hourly_sales(orders, now=None) -> list[dict]:
    buckets = [{"hour": f"{hour:02d}:00", "sales": Decimal("0"), "orders": 0} for hour in range(24)]
    for order in _todays_orders(orders, now):
        bucket = buckets[_local(order.created_at).hour]
        bucket["orders"] += 1
        if order.status == OrderStatus.SUCCESS:
            bucket["sales"] += order.total
    return buckets


def top_products(orders, products, limit: int = TOP_PRODUCTS_LIMIT) -> list[dict]:
    """Best sellers by quantity across successful orders."""
    names = {str(product.id): product.name for product in products}
    sales = {}
    for order in _successful(orders):
        for item in order.items:
            key = str(item.product_id)
            entry = sales.setdefault(
                key,
                {"product_id": item.product_id, "name": names.get(key, f"Product #{key}"), "sales": 0, "revenue": Decimal("0")},
            )
            entry["sales"] += item.qty
            entry["revenue"] += item.subtotal
    return sorted(sales.values(), key=lambda entry: entry["sales"], reverse=True)[:limit]


def inventory_stats(products, low_stock_threshold: int = 10) -> dict:
    return {
        "total_products": len(products),
        "total_stock": sum(product.stock for product in products),
        "total_value": sum((product.price * product.stock for product in products), Decimal("0")),
        "low_stock": sum(1 for product in products if is_low_stock(product.stock, low_stock_threshold)),
    }


def product_categories(products) -> list[str]:
    return sorted({product.category for product in products if product.category})


def filter_products(products, search: str = "", category: str = "all") -> list:
    """Case-insensitive search over name and description, plus exact category."""
    needle = (search or "").strip().lower()
    return [
        product
        for product in products
        if (not needle or needle in product.name.lower() or needle in product.description.lower())
        and (category in ("", "all") or product.category == category)
    ]


def filter_orders(orders, status: str = "all") -> list:
    if status in ("", "all"):
        return list(orders)
    return [order for order in orders if order.status == status]


def overview(products, orders, now=None, low_stock_threshold: int = 10) -> dict:
    """Everything the overview tab shows, in one dict."""
    return {
        "orders": order_stats(orders),
        "kpis": sales_kpis(orders, now),
        "peak": peak_hours(orders, now),
        "hourly_sales": hourly_sales(orders, now),
        "top_products": top_products(orders, products),
        "inventory": inventory_stats(products, low_stock_threshold),
        "status_counts": status_counts(orders),
        "editability": editability_counts(orders),
    }
