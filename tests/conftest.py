"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest

from factories import FakeClock, make_client, make_product
from service_billing.models.billing import Client, ServiceProduct
from service_billing.services.management import ServiceManagement
from service_billing.store.memory import InMemoryBillingStore


@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at 2024-04-01 12:00 UTC."""
    return FakeClock(datetime(2024, 4, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> InMemoryBillingStore:
    """Create a fresh store for each test."""
    return InMemoryBillingStore()


@pytest.fixture
def management(store: InMemoryBillingStore, clock: FakeClock) -> ServiceManagement:
    """Service façade over the in-memory store."""
    return ServiceManagement(store, clock=clock)


@pytest.fixture
def sample_client(store: InMemoryBillingStore) -> Client:
    """A client already in the store."""
    return store.add_client(make_client())


@pytest.fixture
def sample_product(store: InMemoryBillingStore) -> ServiceProduct:
    """A monthly product already in the store."""
    return store.add_product(make_product(setup_fee="50.00"))


@pytest.fixture
def seed() -> int:
    """Seed for reproducible sample data."""
    return 42
