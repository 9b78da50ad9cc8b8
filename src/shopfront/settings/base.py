"""Base settings for Shopfront project."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
SRC_DIR = BASE_DIR / "src"

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get("SECRET_KEY")

# Debug mode - override in dev.py
DEBUG = False

ALLOWED_HOSTS = []

# Application definition
DJANGO_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
]

# Local apps
LOCAL_APPS = [
    "shopfront.core",
    "shopfront.store",
]

INSTALLED_APPS = DJANGO_APPS + LOCAL_APPS

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "shopfront.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
                "shopfront.store.context_processors.cart_context",
            ],
        },
    },
]

WSGI_APPLICATION = "shopfront.wsgi.application"
ASGI_APPLICATION = "shopfront.asgi.application"

# No local database: catalog and orders live in the remote backends
DATABASES = {}

# Cart lives in a signed cookie, no session table required
SESSION_ENGINE = "django.contrib.sessions.backends.signed_cookies"
MESSAGE_STORAGE = "django.contrib.messages.storage.cookie.CookieStorage"

# Internationalization
LANGUAGE_CODE = "th"
TIME_ZONE = os.environ.get("SHOP_TIMEZONE", "Asia/Bangkok")
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
STATICFILES_DIRS = [BASE_DIR / "static"]

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Shop configuration
SHOP_NAME = os.environ.get("SHOP_NAME", "Shopfront")

SHOP_SEED_API_URL = os.environ.get(
    "SHOP_SEED_API_URL",
    "https://f0de5f29-9d77-419c-8be9-169ccb882360.mock.pstmn.io",
)
SHOP_LIVE_API_URL = os.environ.get("SHOP_LIVE_API_URL", "http://54.169.154.143:3470")

# Backend configuration, read through shopfront.store.conf
STORE = {
    "SEED": {
        "NAME": "mock",
        "LABEL": "Mock",
        "BASE_URL": SHOP_SEED_API_URL,
        "PATHS": {
            "products": "/ecomerce",
            "orders": "/ecommerce-orders",
        },
    },
    "LIVE": {
        "NAME": "real",
        "LABEL": "Real",
        "BASE_URL": SHOP_LIVE_API_URL,
        "PATHS": {
            "products": "/ecommerce-products",
            "orders": "/ecommerce-orders",
        },
    },
    "API_URL": os.environ.get("SHOP_API_URL", SHOP_LIVE_API_URL),
    "TIMEOUT": float(os.environ.get("SHOP_API_TIMEOUT", "10.0")),
    "FALLBACK_RESOURCES": ("products",),
}

# Logging configuration
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {message}",
            "style": "{",
        },
        "json": {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": os.environ.get("DJANGO_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        "shopfront": {
            "handlers": ["console"],
            "level": "DEBUG",
            "propagate": False,
        },
    },
}
