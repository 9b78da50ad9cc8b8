"""URL configuration for Shopfront."""

from django.urls import include, path

from shopfront.core.views import health_check
from shopfront.store.urls import dashboard_urlpatterns, shop_urlpatterns

urlpatterns = [
    # Health check
    path("health/", health_check, name="health_check"),

    # Storefront
    path("shop/", include((shop_urlpatterns, "store"), namespace="store")),

    # Admin dashboard
    path("dashboard/", include((dashboard_urlpatterns, "dashboard"), namespace="dashboard")),
]
