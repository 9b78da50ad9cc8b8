"""Context processors for the store."""

from .cart import Cart


def cart_context(request):
    """Add cart totals to templates."""
    if not hasattr(request, "session"):
        return {}
    cart = Cart(request.session)
    return {
        "cart_total_items": cart.total_items,
        "cart_total_price": cart.total_price,
    }
