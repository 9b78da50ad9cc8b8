"""Shared pytest fixtures for shopfront.store tests."""

import pytest

from shopfront.store.services import get_store
from shopfront.store.tests.fakes import (
    LIVE_ORDERS,
    LIVE_PRODUCTS,
    LIVE_URL,
    PREFIXED_SEED_ORDERS,
    SEED_ORDERS,
    SEED_PRODUCTS,
    SEED_URL,
    FakeBackends,
)


@pytest.fixture
def backends():
    """Fake backends with no routes."""
    return FakeBackends()


@pytest.fixture
def catalog(backends):
    """Fake backends serving the sample products and orders from both sides."""
    backends.add("GET", f"{SEED_URL}/products", json=SEED_PRODUCTS)
    backends.add("GET", f"{LIVE_URL}/products", json=LIVE_PRODUCTS)
    backends.add("GET", f"{SEED_URL}/orders", json=SEED_ORDERS)
    backends.add("GET", f"{LIVE_URL}/orders", json=LIVE_ORDERS)
    return backends


@pytest.fixture
def store(backends):
    """Store wired to the fake backends."""
    return get_store(transport=backends.transport)


@pytest.fixture
def use_store(monkeypatch, store):
    """Make the views build their store on the fake backends."""
    monkeypatch.setattr("shopfront.store.views.get_store", lambda: store)
    monkeypatch.setattr("shopfront.core.views.get_store", lambda: store)
    return store


@pytest.fixture
def prefixed_orders(backends):
    """Seed orders keyed ``ORD-000NN`` next to the live sample orders."""
    backends.add("GET", f"{SEED_URL}/orders", json=PREFIXED_SEED_ORDERS)
    backends.add("GET", f"{LIVE_URL}/orders", json=LIVE_ORDERS)
    return backends
