"""Test settings for Shopfront project."""

from .base import *  # noqa: F401,F403

DEBUG = True

SECRET_KEY = "test-secret-key-not-for-production"

ALLOWED_HOSTS = ["testserver"]

MIDDLEWARE = [m for m in MIDDLEWARE if m != "whitenoise.middleware.WhiteNoiseMiddleware"]  # noqa: F405

STATICFILES_DIRS = []

STORE = {
    "SEED": {
        "NAME": "mock",
        "LABEL": "Mock",
        "BASE_URL": "http://seed.test",
        "PATHS": {"products": "/products", "orders": "/orders"},
    },
    "LIVE": {
        "NAME": "real",
        "LABEL": "Real",
        "BASE_URL": "http://live.test",
        "PATHS": {"products": "/products", "orders": "/orders"},
    },
    "API_URL": "http://live.test",
    "TIMEOUT": 2.0,
    "FALLBACK_RESOURCES": ("products",),
}
