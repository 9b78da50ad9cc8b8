"""ASGI config for Shopfront.

The store views are async; serve them under an ASGI server in production.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "shopfront.settings.prod")

application = get_asgi_application()
