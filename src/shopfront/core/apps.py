"""Core app configuration."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the core application."""

    name = "shopfront.core"
    verbose_name = "Shopfront Core"
