from django.apps import AppConfig


class StoreConfig(AppConfig):
    name = "shopfront.store"
    verbose_name = "Store"
