"""URL routes for the storefront and the admin dashboard."""

from django.urls import path

from . import views

shop_urlpatterns = [
    path("products/", views.ProductListView.as_view(), name="product-list"),
    path("products/featured/", views.FeaturedProductsView.as_view(), name="product-featured"),
    path("products/<str:product_id>/", views.ProductDetailView.as_view(), name="product-detail"),
    path("products/<str:product_id>/related/", views.RelatedProductsView.as_view(), name="product-related"),
    path("cart/", views.CartView.as_view(), name="cart"),
    path("cart/add/", views.CartAddView.as_view(), name="cart-add"),
    path("cart/update/", views.CartUpdateView.as_view(), name="cart-update"),
    path("cart/remove/", views.CartRemoveView.as_view(), name="cart-remove"),
    path("cart/clear/", views.CartClearView.as_view(), name="cart-clear"),
    path("checkout/", views.CheckoutView.as_view(), name="checkout"),
]

dashboard_urlpatterns = [
    path("overview/", views.DashboardOverviewView.as_view(), name="overview"),
    path("orders/", views.DashboardOrderListView.as_view(), name="order-list"),
    path("orders/<str:order_id>/", views.DashboardOrderDetailView.as_view(), name="order-detail"),
    path("orders/<str:order_id>/status/", views.DashboardOrderStatusView.as_view(), name="order-status"),
    path("products/", views.DashboardProductListView.as_view(), name="product-list"),
    path("products/<str:product_id>/", views.DashboardProductDetailView.as_view(), name="product-detail"),
    path("products/<str:product_id>/sync/", views.DashboardProductSyncView.as_view(), name="product-sync"),
]
