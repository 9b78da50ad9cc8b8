"""Store service layer.

Product and order operations on top of the two backends. Views should call
these services instead of talking to the backends directly.

Usage:
    from shopfront.store.services import get_store

    store = get_store()
    page = await store.products.list_products(ProductQuery(q="kettle"))
    result = await store.orders.update_order_status("ORD-00120", "shipped")
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable

import httpx
from django.core.paginator import Paginator
from django.utils import timezone

from .client import SourceClient
from .conf import StoreConfig, get_store_config
from .dashboard import filter_products
from .dispatcher import MutationDispatcher, MutationResult, MutationTarget
from .exceptions import (
    MalformedPayload,
    RecordNotFound,
    SourceUnavailable,
    ValidationFailed,
)
from .fetcher import DualSourceFetcher, fetch_one
from .formatting import json_number, to_decimal, to_int
from .merge import merge_records, record_key
from .mutability import get_source, parse_identifier, require_editable
from .normalizers import normalize_order, normalize_orders, normalize_product, normalize_products
from .records import DEFAULT_CURRENCY, PLACEHOLDER_IMAGE, Order, OrderStatus, Product

logger = logging.getLogger(__name__)


@dataclass
class ApiResult:
    """Typed result handed to the presentation layer."""

    data: Any
    success: bool = True
    message: str = ""
    timestamp: datetime = field(default_factory=timezone.now)


@dataclass
class ProductQuery:
    """Storefront product filters and page selection."""

    q: str = ""
    category: str = ""
    page: int = 1
    limit: int | None = None

    def as_params(self) -> dict:
        """Filter parameters with empty values left out.

        Pagination stays local: the merged list is paged after de-duplication.
        """
        params = {"q": self.q, "category": self.category}
        return {key: value for key, value in params.items() if value}


@dataclass
class ProductPage:
    """One page of merged products plus pagination info."""

    items: list[Product]
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool
    success: bool = True
    timestamp: datetime = field(default_factory=timezone.now)


@dataclass
class MergedRead:
    records: list
    answered: bool
    seed_count: int = 0
    live_count: int = 0
    used_fallback: bool = False


class DualSourceReader:
    """Fetch a resource from both backends, normalize and merge it.

    When the merged result is empty and ``fallback`` is set, one more read
    goes to the primary API alone before giving up.
    """

    def __init__(
        self,
        fetcher: DualSourceFetcher,
        primary: SourceClient,
        resource: str,
        normalizer: Callable[[Any], list],
        fallback: bool = False,
    ):
        self.fetcher = fetcher
        self.primary = primary
        self.resource = resource
        self.normalizer = normalizer
        self.fallback = fallback

    async def read(self, params: dict | None = None) -> MergedRead:
        payload = await self.fetcher.fetch_resource(self.resource, params=params)

        seed_records = self.normalizer(payload.seed) if payload.seed is not None else []
        live_records = self.normalizer(payload.live) if payload.live is not None else []
        result = MergedRead(
            records=merge_records(seed_records, live_records),
            answered=payload.any_answered,
            seed_count=len(seed_records),
            live_count=len(live_records),
        )

        if not result.records and self.fallback:
            body = await fetch_one(self.primary, self.primary.source.collection_path(self.resource), params)
            if body is not None:
                result = replace(result, records=self.normalizer(body), answered=True, used_fallback=True)

        logger.info(
            "Merged %d %s (%d seed, %d live%s)",
            len(result.records),
            self.resource,
            result.seed_count,
            result.live_count,
            ", fallback" if result.used_fallback else "",
        )
        return result


def validate_product_form(data: dict) -> dict:
    """Clean a product create/update body.

    Raises:
        ValidationFailed: If name or category is empty, price <= 0 or stock < 0
    """
    errors = {}
    name = str(data.get("name") or "").strip()
    category = str(data.get("category") or "").strip()
    price = to_decimal(data.get("price"))
    stock = to_int(data.get("stock"), 0)

    if not name:
        errors["name"] = "Product name is required"
    if not category:
        errors["category"] = "Category is required"
    if price is None or price <= 0:
        errors["price"] = "Price must be greater than zero"
    if stock < 0:
        errors["stock"] = "Stock cannot be negative"
    if errors:
        raise ValidationFailed(errors)

    return {
        "name": name,
        "description": str(data.get("description") or ""),
        "category": category,
        "brand": str(data.get("brand") or ""),
        "price": json_number(price),
        "stock": stock,
        "currency": data.get("currency") or DEFAULT_CURRENCY,
        "imageAlt": data.get("imageAlt") or name,
        "image": data.get("image") or PLACEHOLDER_IMAGE,
    }


def _first_product(body) -> Product | None:
    product = normalize_product(body)
    if product is None:
        products = normalize_products(body)
        product = products[0] if products else None
    return product


def _first_order(body) -> Order | None:
    order = normalize_order(body)
    if order is None:
        orders = normalize_orders(body)
        order = orders[0] if orders else None
    return order


def _same_identifier(record_id, wanted) -> bool:
    """Match ids exactly, then by numeric part (``"ORD-00042"`` matches 42)."""
    if record_key(record_id) == record_key(wanted):
        return True
    number = parse_identifier(wanted)
    return number is not None and parse_identifier(record_id) == number


class _BaseService:
    def __init__(self, store: "Store"):
        self.config = store.config
        self.seed = store.seed
        self.live = store.live
        self.primary = store.primary
        self.fetcher = store.fetcher
        self.dispatcher = store.dispatcher


class ProductService(_BaseService):
    """Product reads (merged) and writes (live backend, mirrored to seed)."""

    resource = "products"

    def __init__(self, store: "Store"):
        super().__init__(store)
        self.reader = DualSourceReader(
            self.fetcher,
            self.primary,
            self.resource,
            normalize_products,
            fallback=self.resource in self.config.fallback_resources,
        )

    async def all_products(self, params: dict | None = None) -> MergedRead:
        return await self.reader.read(params)

    async def list_products(self, query: ProductQuery | None = None) -> ProductPage:
        """Merged, filtered and paginated product listing."""
        query = query or ProductQuery()
        limit = query.limit if query.limit and query.limit > 0 else self.config.page_size

        merged = await self.reader.read(query.as_params())
        products = filter_products(merged.records, search=query.q, category=query.category or "all")

        paginator = Paginator(products, limit)
        page = paginator.get_page(query.page)
        return ProductPage(
            items=list(page.object_list),
            page=page.number,
            limit=limit,
            total=paginator.count,
            total_pages=paginator.num_pages if paginator.count else 0,
            has_next=page.has_next(),
            has_prev=page.has_previous(),
            success=merged.answered,
        )

    async def search_products(self, q: str, **filters) -> ProductPage:
        return await self.list_products(ProductQuery(q=q, **filters))

    async def products_by_category(self, category: str, **params) -> ProductPage:
        return await self.list_products(ProductQuery(category=category, **params))

    async def get_product(self, product_id) -> ApiResult:
        """Single product from the primary API.

        Raises:
            RecordNotFound: If the primary API has no such product
        """
        path = self.primary.source.item_path(self.resource, product_id)
        try:
            body = await self.primary.get(path)
        except (SourceUnavailable, MalformedPayload) as e:
            logger.error("Error loading product %s: %s", product_id, e)
            raise RecordNotFound("product", product_id, [str(e)]) from e

        product = _first_product(body)
        if product is None:
            raise RecordNotFound("product", product_id)
        return ApiResult(data=product)

    async def _find_live(self, product_id) -> tuple[Product | None, str | None]:
        try:
            body = await self.live.get(self.live.source.item_path(self.resource, product_id))
        except (SourceUnavailable, MalformedPayload) as e:
            return None, str(e)
        return _first_product(body), None

    async def _find_seed(self, product_id) -> tuple[Product | None, str | None]:
        try:
            body = await self.seed.get(self.seed.source.collection_path(self.resource))
        except (SourceUnavailable, MalformedPayload) as e:
            return None, str(e)
        key = record_key(product_id)
        match = next((p for p in normalize_products(body) if record_key(p.id) == key), None)
        return match, None

    async def find_product(self, product_id) -> ApiResult:
        """Look a product up in both backends at once, live answer preferred.

        Raises:
            RecordNotFound: If neither backend has it
        """
        (live_product, live_error), (seed_product, seed_error) = await asyncio.gather(
            self._find_live(product_id),
            self._find_seed(product_id),
        )

        if live_product is not None:
            return ApiResult(data=live_product, message=f"Found in {self.live.label} API")
        if seed_product is not None:
            return ApiResult(data=seed_product, message=f"Found in {self.seed.label} API")

        reasons = [error for error in (live_error, seed_error) if error]
        raise RecordNotFound("product", product_id, reasons)

    async def _single_source_list(self, params: dict, limit: int, what: str) -> ApiResult:
        try:
            body = await self.primary.get(self.primary.source.collection_path(self.resource), params=params)
        except (SourceUnavailable, MalformedPayload) as e:
            logger.error("Error loading %s products: %s", what, e)
            return ApiResult(data=[], success=False)
        return ApiResult(data=normalize_products(body)[:limit])

    async def featured_products(self, limit: int = 8) -> ApiResult:
        return await self._single_source_list({"featured": "true", "limit": limit}, limit, "featured")

    async def related_products(self, product_id, limit: int = 4) -> ApiResult:
        result = await self._single_source_list({"related": product_id, "limit": limit}, limit, "related")
        key = record_key(product_id)
        result.data = [product for product in result.data if record_key(product.id) != key]
        return result

    def _targets(self, product_id) -> list[MutationTarget]:
        # Live backend first; the seed backend may or may not accept writes
        return [
            MutationTarget(self.live, self.live.source.item_path(self.resource, product_id)),
            MutationTarget(self.seed, self.seed.source.item_path(self.resource, product_id)),
        ]

    async def create_product(self, data: dict) -> MutationResult:
        payload = validate_product_form(data)
        target = MutationTarget(self.live, self.live.source.collection_path(self.resource))
        return await self.dispatcher.create(target, payload, subject="product")

    async def update_product(self, product_id, data: dict) -> MutationResult:
        """Update a live product on every backend that accepts it.

        Raises:
            ReadOnlyViolation: For seed-range ids, before any request
            ValidationFailed: If the body does not pass the product form rules
            AllTargetsFailed: If no backend accepted the update
        """
        require_editable(product_id, "product", "edited")
        payload = validate_product_form(data)
        return await self.dispatcher.dispatch(
            "PUT",
            self._targets(product_id),
            payload=payload,
            action="update",
            subject=f"product {product_id}",
        )

    async def delete_product(self, product_id) -> MutationResult:
        """Delete a live product from every backend that accepts it.

        Raises:
            ReadOnlyViolation: For seed-range ids, before any request
            AllTargetsFailed: If no backend accepted the delete
        """
        require_editable(product_id, "product", "deleted")
        return await self.dispatcher.dispatch(
            "DELETE",
            self._targets(product_id),
            action="delete",
            subject=f"product {product_id}",
        )

    async def sync_product(self, product_id) -> MutationResult:
        """Copy a seed product into the live backend.

        Raises:
            SourceUnavailable: If the seed backend cannot be read
            RecordNotFound: If the seed catalog has no such product
            AllTargetsFailed: If the live backend rejects the create
        """
        body = await self.seed.get(self.seed.source.collection_path(self.resource))
        key = record_key(product_id)
        product = next((p for p in normalize_products(body) if record_key(p.id) == key), None)
        if product is None:
            raise RecordNotFound("product", product_id, [f"not in {self.seed.label} API"])

        target = MutationTarget(self.live, self.live.source.collection_path(self.resource))
        result = await self.dispatcher.create(target, product.as_payload(), subject=f"product {product_id}")
        return replace(
            result,
            message=f"Synced product {product_id} from {self.seed.label} to {self.live.label} API",
        )


class OrderService(_BaseService):
    """Order reads (merged) and writes (live backend only)."""

    resource = "orders"

    def __init__(self, store: "Store"):
        super().__init__(store)
        self.reader = DualSourceReader(
            self.fetcher,
            self.primary,
            self.resource,
            normalize_orders,
            fallback=self.resource in self.config.fallback_resources,
        )

    async def list_orders(self) -> ApiResult:
        merged = await self.reader.read()
        return ApiResult(
            data=merged.records,
            success=merged.answered,
            message=f"Loaded {len(merged.records)} orders total",
        )

    async def get_order(self, order_id) -> ApiResult:
        """Look an order up: seed collection for seed-range ids, then live.

        Raises:
            RecordNotFound: If no backend has it
        """
        reasons = []
        if not get_source(order_id).editable:
            try:
                body = await self.seed.get(self.seed.source.collection_path(self.resource))
            except (SourceUnavailable, MalformedPayload) as e:
                reasons.append(str(e))
            else:
                order = next((o for o in normalize_orders(body) if _same_identifier(o.id, order_id)), None)
                if order is not None:
                    return ApiResult(data=order, message=f"Found in {self.seed.label} data (read-only)")

        try:
            body = await self.live.get(self.live.source.item_path(self.resource, order_id))
        except (SourceUnavailable, MalformedPayload) as e:
            reasons.append(str(e))
        else:
            order = _first_order(body)
            if order is not None:
                return ApiResult(data=order, message=f"Found in {self.live.label} API (editable)")

        logger.error("Order %s not found: %s", order_id, reasons)
        raise RecordNotFound("order", order_id, reasons)

    def _target(self, order_id) -> list[MutationTarget]:
        return [MutationTarget(self.live, self.live.source.item_path(self.resource, order_id))]

    async def create_order(self, data: dict) -> MutationResult:
        target = MutationTarget(self.live, self.live.source.collection_path(self.resource))
        result = await self.dispatcher.create(target, data, subject="order")
        return replace(result, message=f"Created new order in {self.live.label} API")

    async def update_order(self, order_id, data: dict) -> MutationResult:
        require_editable(order_id, "order", "edited")
        result = await self.dispatcher.dispatch(
            "PUT",
            self._target(order_id),
            payload=data,
            action="update",
            subject=f"order {order_id}",
        )
        return replace(result, message=f"Updated order {order_id} in {self.live.label} API")

    async def update_order_status(self, order_id, status: str) -> MutationResult:
        """Change an order's status.

        Raises:
            ReadOnlyViolation: For seed-range ids, before any request
            ValidationFailed: If status is not an OrderStatus value
            AllTargetsFailed: If the live backend rejects the update
        """
        require_editable(order_id, "order", "edited")
        if status not in OrderStatus.values:
            raise ValidationFailed({"status": f"Invalid status: {status}. Must be one of {OrderStatus.values}"})

        result = await self.dispatcher.dispatch(
            "PUT",
            self._target(order_id),
            payload={"status": status},
            action="update",
            subject=f"order {order_id}",
        )
        return replace(result, message=f"Updated order {order_id} status to {status}")

    async def delete_order(self, order_id) -> MutationResult:
        require_editable(order_id, "order", "deleted")
        result = await self.dispatcher.dispatch(
            "DELETE",
            self._target(order_id),
            action="delete",
            subject=f"order {order_id}",
        )
        return replace(result, message=f"Deleted order {order_id} from {self.live.label} API")


class Store:
    """Backends, fetcher, dispatcher and services built from one StoreConfig."""

    def __init__(self, config: StoreConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self.seed = SourceClient(config.seed, config.timeout, transport)
        self.live = SourceClient(config.live, config.timeout, transport)
        self.primary = SourceClient(config.primary, config.timeout, transport)
        self.fetcher = DualSourceFetcher(self.seed, self.live)
        self.dispatcher = MutationDispatcher()
        self.products = ProductService(self)
        self.orders = OrderService(self)

    async def check_health(self) -> dict[str, bool]:
        seed_ok, live_ok = await asyncio.gather(self.seed.check_health(), self.live.check_health())
        return {self.seed.source.name: seed_ok, self.live.source.name: live_ok}


def get_store(transport: httpx.AsyncBaseTransport | None = None) -> Store:
    """Build a Store from the ``STORE`` setting."""
    return Store(get_store_config(), transport=transport)
