"""Store configuration.

Backend locations and store tuning live in the ``STORE`` settings dict.
``get_store_config()`` merges it over the defaults below and returns a frozen
``StoreConfig`` that clients, the fetcher, the dispatcher and the services
receive at construction.
"""

from dataclasses import dataclass, field

from django.conf import settings

DEFAULT_PATHS = {
    "products": "/products",
    "orders": "/orders",
}


@dataclass(frozen=True)
class SourceConfig:
    """One backend: its key, display label, base URL and resource paths."""

    name: str
    label: str
    base_url: str
    paths: dict = field(default_factory=lambda: dict(DEFAULT_PATHS))

    def collection_path(self, resource: str) -> str:
        return self.paths.get(resource, f"/{resource}")

    def item_path(self, resource: str, identifier) -> str:
        return f"{self.collection_path(resource).rstrip('/')}/{identifier}"


@dataclass(frozen=True)
class StoreConfig:
    """Reconciliation layer configuration."""

    seed: SourceConfig
    live: SourceConfig
    primary: SourceConfig
    timeout: float = 10.0
    fallback_resources: tuple = ("products",)
    page_size: int = 20
    dashboard_products_per_page: int = 20
    dashboard_orders_per_page: int = 10
    low_stock_threshold: int = 10


def get_config():
    """Get store configuration from settings."""
    defaults = {
        "SEED": {
            "NAME": "mock",
            "LABEL": "Mock",
            "BASE_URL": "",
            "PATHS": dict(DEFAULT_PATHS),
        },
        "LIVE": {
            "NAME": "real",
            "LABEL": "Real",
            "BASE_URL": "",
            "PATHS": dict(DEFAULT_PATHS),
        },
        "API_URL": None,
        "TIMEOUT": 10.0,
        "FALLBACK_RESOURCES": ("products",),
        "PAGE_SIZE": 20,
        "DASHBOARD_PRODUCTS_PER_PAGE": 20,
        "DASHBOARD_ORDERS_PER_PAGE": 10,
        "LOW_STOCK_THRESHOLD": 10,
    }

    user_config = getattr(settings, "STORE", {})
    config = {**defaults, **user_config}
    for key in ("SEED", "LIVE"):
        config[key] = {**defaults[key], **user_config.get(key, {})}
    return config


def _source_from_config(source: dict) -> SourceConfig:
    return SourceConfig(
        name=source["NAME"],
        label=source["LABEL"],
        base_url=source["BASE_URL"],
        paths={**DEFAULT_PATHS, **source.get("PATHS", {})},
    )


def get_store_config() -> StoreConfig:
    """Build a StoreConfig from the ``STORE`` setting."""
    config = get_config()
    seed = _source_from_config(config["SEED"])
    live = _source_from_config(config["LIVE"])

    # The primary API is the live backend unless API_URL points elsewhere
    api_url = config["API_URL"] or live.base_url
    primary = SourceConfig(name=live.name, label=live.label, base_url=api_url, paths=live.paths)

    return StoreConfig(
        seed=seed,
        live=live,
        primary=primary,
        timeout=float(config["TIMEOUT"]),
        fallback_resources=tuple(config["FALLBACK_RESOURCES"]),
        page_size=int(config["PAGE_SIZE"]),
        dashboard_products_per_page=int(config["DASHBOARD_PRODUCTS_PER_PAGE"]),
        dashboard_orders_per_page=int(config["DASHBOARD_ORDERS_PER_PAGE"]),
        low_stock_threshold=int(config["LOW_STOCK_THRESHOLD"]),
    )
