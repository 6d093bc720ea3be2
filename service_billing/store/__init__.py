"""Persistence boundary: one repository interface, one backend per deployment."""

from service_billing.config import ServiceBillingConfig
from service_billing.store.base import BillingRepository, DocumentStore
from service_billing.store.json_file import JsonFileBillingStore
from service_billing.store.memory import InMemoryBillingStore


def create_store(config: ServiceBillingConfig) -> DocumentStore:
    """Build the backend named by ``config.store.backend``."""
    backend = config.store.backend
    if backend == "json":
        return JsonFileBillingStore(config.store.json_path, pretty=config.store.pretty_json)
    if backend == "postgres":
        from service_billing.store.postgres import PostgresBillingStore

        return PostgresBillingStore(config.postgres.connection_string)
    return InMemoryBillingStore()


__all__ = [
    "BillingRepository",
    "DocumentStore",
    "InMemoryBillingStore",
    "JsonFileBillingStore",
    "create_store",
]
