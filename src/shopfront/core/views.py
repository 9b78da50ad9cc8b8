"""Core views for Shopfront."""

from django.http import JsonResponse

from shopfront.store.services import get_store


async def health_check(request):
    """Health check endpoint for container orchestration.

    Healthy while at least one backend answers; both down is a 503.
    """
    backends = await get_store().check_health()

    if any(backends.values()):
        return JsonResponse({"status": "healthy", "backends": backends})
    return JsonResponse({"status": "unhealthy", "backends": backends}, status=503)
