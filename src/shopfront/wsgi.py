"""WSGI config for Shopfront."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "shopfront.settings.prod")

application = get_wsgi_application()
