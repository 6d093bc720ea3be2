"""Repository boundary shared by every persistence backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import replace
from typing import Any, Protocol

from service_billing.exceptions import EntityNotFoundError
from service_billing.models.billing import (
    Client,
    PaymentHistory,
    ServiceConfig,
    ServiceGroup,
    ServiceOrder,
    ServiceProduct,
)

# collection name -> (model, display name used in error messages)
COLLECTIONS: dict[str, tuple[type, str]] = {
    "groups": (ServiceGroup, "Group"),
    "products": (ServiceProduct, "Product"),
    "orders": (ServiceOrder, "Order"),
    "clients": (Client, "Client"),
    "payments": (PaymentHistory, "Payment"),
    "config": (ServiceConfig, "Config"),
}

CONFIG_ID = "default"


class BillingRepository(Protocol):
    """Everything the service layer needs from a store."""

    def atomic(self) -> AbstractContextManager[None]: ...

    def list_groups(self) -> list[ServiceGroup]: ...
    def get_group(self, group_id: str) -> ServiceGroup: ...
    def add_group(self, group: ServiceGroup) -> ServiceGroup: ...
    def update_group(self, group_id: str, changes: dict[str, Any]) -> ServiceGroup: ...
    def delete_group(self, group_id: str) -> None: ...

    def list_products(self) -> list[ServiceProduct]: ...
    def list_products_by_group(self, group_id: str) -> list[ServiceProduct]: ...
    def get_product(self, product_id: str) -> ServiceProduct: ...
    def add_product(self, product: ServiceProduct) -> ServiceProduct: ...
    def update_product(self, product_id: str, changes: dict[str, Any]) -> ServiceProduct: ...
    def delete_product(self, product_id: str) -> None: ...

    def list_orders(self) -> list[ServiceOrder]: ...
    def list_orders_by_client(self, client_id: str) -> list[ServiceOrder]: ...
    def list_orders_by_product(self, product_id: str) -> list[ServiceOrder]: ...
    def get_order(self, order_id: str) -> ServiceOrder: ...
    def add_order(self, order: ServiceOrder) -> ServiceOrder: ...
    def update_order(self, order_id: str, changes: dict[str, Any]) -> ServiceOrder: ...
    def delete_order(self, order_id: str) -> None: ...

    def list_clients(self) -> list[Client]: ...
    def get_client(self, client_id: str) -> Client: ...
    def add_client(self, client: Client) -> Client: ...

    def save_payment(self, payment: PaymentHistory) -> PaymentHistory: ...
    def list_payments_by_client(self, client_id: str) -> list[PaymentHistory]: ...
    def delete_payments_by_order(self, order_id: str) -> int: ...

    def get_config(self) -> ServiceConfig | None: ...
    def save_config(self, config: ServiceConfig) -> ServiceConfig: ...


class DocumentStore(ABC):
    """Implements ``BillingRepository`` on top of five document primitives.

    Subclasses only decide where documents live; every collection is a
    mapping of id to model instance.
    """

    @abstractmethod
    def _all(self, collection: str) -> list[Any]:
        """All documents of a collection, in insertion order."""

    @abstractmethod
    def _find(self, collection: str, doc_id: str) -> Any | None:
        """One document or ``None``."""

    @abstractmethod
    def _put(self, collection: str, doc_id: str, doc: Any) -> None:
        """Insert or replace a document."""

    @abstractmethod
    def _remove(self, collection: str, doc_id: str) -> bool:
        """Delete a document; return whether it existed."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Scope whose writes are applied together or not at all."""

    # Generic helpers
    def _get(self, collection: str, doc_id: str) -> Any:
        doc = self._find(collection, doc_id)
        if doc is None:
            raise EntityNotFoundError(f"{COLLECTIONS[collection][1]} {doc_id} not found")
        return doc

    def _update(self, collection: str, doc_id: str, changes: dict[str, Any]) -> Any:
        updated = replace(self._get(collection, doc_id), **changes)
        self._put(collection, doc_id, updated)
        return updated

    def _delete(self, collection: str, doc_id: str) -> None:
        if not self._remove(collection, doc_id):
            raise EntityNotFoundError(f"{COLLECTIONS[collection][1]} {doc_id} not found")

    # Groups
    def list_groups(self) -> list[ServiceGroup]:
        return self._all("groups")

    def get_group(self, group_id: str) -> ServiceGroup:
        return self._get("groups", group_id)

    def add_group(self, group: ServiceGroup) -> ServiceGroup:
        self._put("groups", group.id, group)
        return group

    def update_group(self, group_id: str, changes: dict[str, Any]) -> ServiceGroup:
        return self._update("groups", group_id, changes)

    def delete_group(self, group_id: str) -> None:
        self._delete("groups", group_id)

    # Products
    def list_products(self) -> list[ServiceProduct]:
        return self._all("products")

    def list_products_by_group(self, group_id: str) -> list[ServiceProduct]:
        return [p for p in self._all("products") if p.group_id == group_id]

    def get_product(self, product_id: str) -> ServiceProduct:
        return self._get("products", product_id)

    def add_product(self, product: ServiceProduct) -> ServiceProduct:
        self._put("products", product.id, product)
        return product

    def update_product(self, product_id: str, changes: dict[str, Any]) -> ServiceProduct:
        return self._update("products", product_id, changes)

    def delete_product(self, product_id: str) -> None:
        self._delete("products", product_id)

    # Orders
    def list_orders(self) -> list[ServiceOrder]:
        return self._all("orders")

    def list_orders_by_client(self, client_id: str) -> list[ServiceOrder]:
        return [o for o in self._all("orders") if o.client_id == client_id]

    def list_orders_by_product(self, product_id: str) -> list[ServiceOrder]:
        return [o for o in self._all("orders") if o.product_id == product_id]

    def get_order(self, order_id: str) -> ServiceOrder:
        return self._get("orders", order_id)

    def add_order(self, order: ServiceOrder) -> ServiceOrder:
        self._put("orders", order.id, order)
        return order

    def update_order(self, order_id: str, changes: dict[str, Any]) -> ServiceOrder:
        return self._update("orders", order_id, changes)

    def delete_order(self, order_id: str) -> None:
        self._delete("orders", order_id)

    # Clients
    def list_clients(self) -> list[Client]:
        return self._all("clients")

    def get_client(self, client_id: str) -> Client:
        return self._get("clients", client_id)

    def add_client(self, client: Client) -> Client:
        self._put("clients", client.id, client)
        return client

    # Recorded payments
    def save_payment(self, payment: PaymentHistory) -> PaymentHistory:
        if payment.id is None:
            raise ValueError("Recorded payments need an id")
        self._put("payments", payment.id, payment)
        return payment

    def list_payments_by_client(self, client_id: str) -> list[PaymentHistory]:
        payments = [p for p in self._all("payments") if p.client_id == client_id]
        return sorted(payments, key=lambda p: p.date, reverse=True)

    def delete_payments_by_order(self, order_id: str) -> int:
        """Delete every payment recorded against an order; return how many."""
        payments = [p for p in self._all("payments") if p.order_id == order_id]
        for payment in payments:
            self._remove("payments", payment.id)
        return len(payments)

    # Catalog settings
    def get_config(self) -> ServiceConfig | None:
        return self._find("config", CONFIG_ID)

    def save_config(self, config: ServiceConfig) -> ServiceConfig:
        self._put("config", CONFIG_ID, config)
        return config

    def summary(self) -> dict[str, int]:
        """Return document counts per collection."""
        return {name: len(self._all(name)) for name in COLLECTIONS}
