"""JSON views for the storefront and the admin dashboard.

Storefront (mounted at /shop/):
- Product listing, detail, featured and related products
- Cart (view, add, update, remove, clear) and checkout

Dashboard (mounted at /dashboard/):
- Overview aggregates
- Orders: list, create, detail, update, status, delete
- Products: list, create, update, delete, sync from seed

Every handler is async; store errors become ``{"error", "type"}`` bodies
with the status code carried by the exception.
"""

import asyncio
import functools
import json
import logging
from decimal import Decimal

from django.core.paginator import Paginator
from django.core.serializers.json import DjangoJSONEncoder
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from .cart import Cart
from .checkout import place_order
from .dashboard import (
    editability_counts,
    filter_orders,
    filter_products,
    overview,
    product_categories,
    status_counts,
)
from .exceptions import StoreError, ValidationFailed
from .formatting import json_number, to_int
from .merge import sort_newest_first
from .normalizers import coerce_identifier
from .records import Order, Product
from .services import ApiResult, ProductQuery, get_store

logger = logging.getLogger(__name__)


class StoreJSONEncoder(DjangoJSONEncoder):
    """Money as JSON numbers rather than strings."""

    def default(self, o):
        if isinstance(o, Decimal):
            return json_number(o)
        return super().default(o)


def json_response(data, status=200) -> JsonResponse:
    return JsonResponse(data, status=status, encoder=StoreJSONEncoder, safe=False)


def serialize(data):
    if isinstance(data, (Product, Order)):
        return data.as_dict()
    if isinstance(data, list):
        return [serialize(item) for item in data]
    return data


def result_body(result) -> dict:
    """Body for an ApiResult or MutationResult."""
    if isinstance(result, ApiResult):
        return {
            "data": serialize(result.data),
            "success": result.success,
            "message": result.message,
            "timestamp": result.timestamp,
        }
    return {
        "data": result.data,
        "success": True,
        "message": result.message,
        "succeeded": list(result.succeeded),
        "failures": result.failures,
    }


def pagination_body(page) -> dict:
    paginator = page.paginator
    return {
        "page": page.number,
        "limit": paginator.per_page,
        "total": paginator.count,
        "totalPages": paginator.num_pages if paginator.count else 0,
        "hasNext": page.has_next(),
        "hasPrev": page.has_previous(),
    }


def error_response(exc: StoreError) -> JsonResponse:
    body = {"error": str(exc), "type": exc.error_type}
    if isinstance(exc, ValidationFailed):
        body["errors"] = exc.errors
    return json_response(body, status=exc.status_code)


def store_errors(handler):
    """Turn StoreError raised by a handler into a JSON error response."""

    @functools.wraps(handler)
    async def wrapper(*args, **kwargs):
        try:
            return await handler(*args, **kwargs)
        except StoreError as e:
            logger.info("%s: %s", e.__class__.__name__, e)
            return error_response(e)

    return wrapper


def parse_body(request) -> dict:
    """Decode a JSON object body.

    Raises:
        ValidationFailed: If the body is not a JSON object
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except json.JSONDecodeError:
        raise ValidationFailed({"body": "Invalid JSON"})
    if not isinstance(data, dict):
        raise ValidationFailed({"body": "Expected a JSON object"})
    return data


def _product_id(value):
    identifier = coerce_identifier(value)
    if identifier is None:
        raise ValidationFailed({"productId": "productId required"})
    return identifier


# Storefront


class ProductListView(View):
    """GET /shop/products/?q=&category=&page=&limit="""

    @store_errors
    async def get(self, request):
        query = ProductQuery(
            q=request.GET.get("q", "").strip(),
            category=request.GET.get("category", "").strip(),
            page=to_int(request.GET.get("page"), 1),
            limit=to_int(request.GET.get("limit"), 0) or None,
        )
        page = await get_store().products.list_products(query)
        return json_response({
            "data": serialize(page.items),
            "pagination": {
                "page": page.page,
                "limit": page.limit,
                "total": page.total,
                "totalPages": page.total_pages,
                "hasNext": page.has_next,
                "hasPrev": page.has_prev,
            },
            "success": page.success,
            "timestamp": page.timestamp,
        })


class ProductDetailView(View):
    """GET /shop/products/<id>/ - looks in both backends."""

    @store_errors
    async def get(self, request, product_id):
        result = await get_store().products.find_product(coerce_identifier(product_id))
        return json_response(result_body(result))


class FeaturedProductsView(View):
    @store_errors
    async def get(self, request):
        limit = to_int(request.GET.get("limit"), 8) or 8
        result = await get_store().products.featured_products(limit)
        return json_response(result_body(result))


class RelatedProductsView(View):
    @store_errors
    async def get(self, request, product_id):
        limit = to_int(request.GET.get("limit"), 4) or 4
        result = await get_store().products.related_products(coerce_identifier(product_id), limit)
        return json_response(result_body(result))


@method_decorator(csrf_exempt, name="dispatch")
class CartView(View):
    """GET /shop/cart/"""

    async def get(self, request):
        return json_response(Cart(request.session).as_dict())


@method_decorator(csrf_exempt, name="dispatch")
class CartAddView(View):
    """Add a product to the cart.

    POST /shop/cart/add/
    {
        "productId": 81,
        "quantity": 2
    }
    """

    @store_errors
    async def post(self, request):
        data = parse_body(request)
        product_id = _product_id(data.get("productId"))
        quantity = to_int(data.get("quantity"), 1)

        result = await get_store().products.find_product(product_id)
        cart = Cart(request.session)
        cart.add(result.data, quantity)
        return json_response(cart.as_dict())


@method_decorator(csrf_exempt, name="dispatch")
class CartUpdateView(View):
    """POST /shop/cart/update/ {"productId": 81, "quantity": 3}"""

    @store_errors
    async def post(self, request):
        data = parse_body(request)
        cart = Cart(request.session)
        cart.set_quantity(_product_id(data.get("productId")), to_int(data.get("quantity"), 0))
        return json_response(cart.as_dict())


@method_decorator(csrf_exempt, name="dispatch")
class CartRemoveView(View):
    @store_errors
    async def post(self, request):
        data = parse_body(request)
        cart = Cart(request.session)
        cart.remove(_product_id(data.get("productId")))
        return json_response(cart.as_dict())


@method_decorator(csrf_exempt, name="dispatch")
class CartClearView(View):
    async def post(self, request):
        cart = Cart(request.session)
        cart.clear()
        return json_response(cart.as_dict())


@method_decorator(csrf_exempt, name="dispatch")
class CheckoutView(View):
    """Place an order for the cart contents.

    POST /shop/checkout/
    {
        "name": "Somchai",
        "email": "somchai@example.com",
        "phone": "0812345678",
        "address": "Bangkok"
    }
    """

    @store_errors
    async def post(self, request):
        data = parse_body(request)
        result = await place_order(get_store().orders, Cart(request.session), data)
        return json_response(result_body(result), status=201)


# Dashboard


class DashboardOverviewView(View):
    """GET /dashboard/overview/"""

    @store_errors
    async def get(self, request):
        store = get_store()
        products_read, orders_result = await asyncio.gather(
            store.products.all_products(),
            store.orders.list_orders(),
        )
        products = products_read.records
        orders = orders_result.data
        return json_response({
            "productsCount": len(products),
            "ordersCount": len(orders),
            "productsSuccess": products_read.answered,
            "ordersSuccess": orders_result.success,
            "overview": overview(products, orders, low_stock_threshold=store.config.low_stock_threshold),
        })


@method_decorator(csrf_exempt, name="dispatch")
class DashboardOrderListView(View):
    """GET /dashboard/orders/?status=&page= ; POST creates an order."""

    @store_errors
    async def get(self, request):
        store = get_store()
        result = await store.orders.list_orders()
        orders = sort_newest_first(result.data)
        filtered = filter_orders(orders, request.GET.get("status", "all"))

        page = Paginator(filtered, store.config.dashboard_orders_per_page).get_page(request.GET.get("page"))
        return json_response({
            "data": serialize(list(page.object_list)),
            "pagination": pagination_body(page),
            "statusCounts": status_counts(orders),
            "editability": editability_counts(orders),
            "success": result.success,
            "message": result.message,
        })

    @store_errors
    async def post(self, request):
        result = await get_store().orders.create_order(parse_body(request))
        return json_response(result_body(result), status=201)


@method_decorator(csrf_exempt, name="dispatch")
class DashboardOrderDetailView(View):
    """GET, PUT and DELETE /dashboard/orders/<id>/"""

    @store_errors
    async def get(self, request, order_id):
        result = await get_store().orders.get_order(coerce_identifier(order_id))
        return json_response(result_body(result))

    @store_errors
    async def put(self, request, order_id):
        result = await get_store().orders.update_order(coerce_identifier(order_id), parse_body(request))
        return json_response(result_body(result))

    @store_errors
    async def delete(self, request, order_id):
        result = await get_store().orders.delete_order(coerce_identifier(order_id))
        return json_response(result_body(result))


@method_decorator(csrf_exempt, name="dispatch")
class DashboardOrderStatusView(View):
    """POST /dashboard/orders/<id>/status/ {"status": "shipped"}"""

    @store_errors
    async def post(self, request, order_id):
        data = parse_body(request)
        result = await get_store().orders.update_order_status(
            coerce_identifier(order_id),
            str(data.get("status") or ""),
        )
        return json_response(result_body(result))


@method_decorator(csrf_exempt, name="dispatch")
class DashboardProductListView(View):
    """GET /dashboard/products/?q=&category=&page= ; POST creates a product."""

    @store_errors
    async def get(self, request):
        store = get_store()
        merged = await store.products.all_products()
        products = merged.records
        filtered = filter_products(
            products,
            search=request.GET.get("q", ""),
            category=request.GET.get("category", "all"),
        )

        page = Paginator(filtered, store.config.dashboard_products_per_page).get_page(request.GET.get("page"))
        return json_response({
            "data": serialize(list(page.object_list)),
            "pagination": pagination_body(page),
            "categories": product_categories(products),
            "editability": editability_counts(products),
            "success": merged.answered,
        })

    @store_errors
    async def post(self, request):
        result = await get_store().products.create_product(parse_body(request))
        return json_response(result_body(result), status=201)


@method_decorator(csrf_exempt, name="dispatch")
class DashboardProductDetailView(View):
    """PUT and DELETE /dashboard/products/<id>/"""

    @store_errors
    async def put(self, request, product_id):
        result = await get_store().products.update_product(coerce_identifier(product_id), parse_body(request))
        return json_response(result_body(result))

    @store_errors
    async def delete(self, request, product_id):
        result = await get_store().products.delete_product(coerce_identifier(product_id))
        return json_response(result_body(result))


@method_decorator(csrf_exempt, name="dispatch")
class DashboardProductSyncView(View):
    """POST /dashboard/products/<id>/sync/ - copy a seed product to the live backend."""

    @store_errors
    async def post(self, request, product_id):
        result = await get_store().products.sync_product(coerce_identifier(product_id))
        return json_response(result_body(result), status=201)
