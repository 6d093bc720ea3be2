"""Administrative service catalog, orders and client billing."""

import logging
import uuid
from dataclasses import fields, replace
from datetime import date, datetime, timezone
from typing import Any, Callable

from service_billing.billing.cycles import next_due_date
from service_billing.billing.ledger import (
    aggregate_financial,
    generate_payment_history,
    merge_recorded_payments,
    summarize_client_services,
)
from service_billing.billing.status import (
    CANCEL,
    REACTIVATE,
    SUSPEND,
    BulkTransition,
    BulkTransitionResult,
    check_transition,
)
from service_billing.exceptions import (
    BulkTransitionError,
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
    ServiceBillingError,
    ValidationError,
)
from service_billing.models.base import Address
from service_billing.models.billing import (
    BillingCycle,
    Client,
    ClientFinancial,
    ClientServiceSummary,
    NotificationSettings,
    OrderStatus,
    PaymentHistory,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    ServiceConfig,
    ServiceGroup,
    ServiceOrder,
    ServiceProduct,
)
from service_billing.store.base import BillingRepository
from service_billing.store.serialization import from_dict
from service_billing.validation import parse_amount, parse_choice, parse_date

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at"})


def _check_changes(model: type, changes: dict[str, Any]) -> None:
    known = {f.name for f in fields(model)}
    errors = {name: "unknown field" for name in changes if name not in known}
    errors.update({name: "field cannot be changed" for name in changes if name in IMMUTABLE_FIELDS})
    if errors:
        raise ValidationError(errors)


class ServiceManagement:
    """Catalog, order and client billing operations over one repository.

    Build one instance at startup and hand it to whatever needs it.

    Parameters
    ----------
    repository : BillingRepository
        Backing store for every collection.
    clock : Callable[[], datetime] | None
        Source of "now" (defaults to the current UTC time).
    """

    def __init__(
        self,
        repository: BillingRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.repository = repository
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _now(self) -> datetime:
        return self._clock()

    def _today(self) -> date:
        return self._now().date()

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    # Groups
    def get_groups(self) -> list[ServiceGroup]:
        return self.repository.list_groups()

    def create_group(self, name: str, description: str = "", is_active: bool = True) -> ServiceGroup:
        if not name or not name.strip():
            raise ValidationError({"name": "name is required"})
        now = self._now()
        group = ServiceGroup(
            id=self._new_id(),
            name=name.strip(),
            description=description,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        self.repository.add_group(group)
        logger.info("Created service group %s (%s)", group.id, group.name)
        return group

    def update_group(self, group_id: str, **changes: Any) -> ServiceGroup:
        _check_changes(ServiceGroup, changes)
        return self.repository.update_group(group_id, {**changes, "updated_at": self._now()})

    def delete_group(self, group_id: str) -> None:
        """Delete a group; refused while any product belongs to it."""
        if self.repository.list_products_by_group(group_id):
            raise InvalidEntityStateError(f"Group {group_id} still has products")
        self.repository.delete_group(group_id)
        logger.info("Deleted service group %s", group_id)

    # Products
    def get_products(self) -> list[ServiceProduct]:
        return self.repository.list_products()

    def get_products_by_group(self, group_id: str) -> list[ServiceProduct]:
        return self.repository.list_products_by_group(group_id)

    def create_product(
        self,
        name: str,
        price: Any,
        billing_cycle: BillingCycle | str,
        setup_fee: Any = None,
        group_id: str | None = None,
        **extra: Any,
    ) -> ServiceProduct:
        """Add a product to the catalog.

        ``price`` and ``setup_fee`` accept form strings (``"R$ 49,90"``).
        ``extra`` may set any other product field (description, features, ...).
        """
        if not name or not name.strip():
            raise ValidationError({"name": "name is required"})
        _check_changes(ServiceProduct, extra)
        self._check_references({"group_id": group_id})

        now = self._now()
        product = ServiceProduct(
            id=self._new_id(),
            name=name.strip(),
            price=parse_amount(price, "price"),
            billing_cycle=self._cycle(billing_cycle),
            setup_fee=parse_amount(setup_fee, "setup_fee") if setup_fee not in (None, "") else None,
            group_id=group_id,
            created_at=now,
            updated_at=now,
            **extra,
        )
        self.repository.add_product(product)
        logger.info("Created product %s (%s, %s %s)", product.id, product.name, product.price, product.billing_cycle.value)
        return product

    def update_product(self, product_id: str, **changes: Any) -> ServiceProduct:
        """Edit a product. Existing orders keep the terms they were sold with."""
        _check_changes(ServiceProduct, changes)
        changes = self._normalize_terms(changes)
        self._check_references(changes)
        product = self.repository.update_product(product_id, {**changes, "updated_at": self._now()})
        logger.info("Updated product %s: %s", product_id, sorted(changes))
        return product

    def delete_product(self, product_id: str) -> None:
        """Delete a product; refused while any order references it."""
        if self.repository.list_orders_by_product(product_id):
            raise InvalidEntityStateError(f"Product {product_id} has orders and cannot be deleted")
        self.repository.delete_product(product_id)
        logger.info("Deleted product %s", product_id)

    # Orders
    def get_orders(self) -> list[ServiceOrder]:
        return self.repository.list_orders()

    def get_orders_by_client(self, client_id: str) -> list[ServiceOrder]:
        return self.repository.list_orders_by_client(client_id)

    def get_orders_by_product(self, product_id: str) -> list[ServiceOrder]:
        return self.repository.list_orders_by_product(product_id)

    def create_order(
        self,
        client_id: str,
        product_id: str,
        status: OrderStatus | str = OrderStatus.ACTIVE,
        price: Any = None,
        setup_fee: Any = None,
        billing_cycle: BillingCycle | str | None = None,
        notes: str = "",
        custom_fields: dict[str, Any] | None = None,
    ) -> ServiceOrder:
        """Subscribe a client to a product.

        Price, setup fee and cycle default to the product's current terms
        and are locked into the order.
        """
        status = parse_choice(OrderStatus, status, "status")
        if status not in (OrderStatus.PENDING, OrderStatus.ACTIVE):
            raise InvalidEntityStateError(f"New orders cannot start as {status.value}")

        try:
            product = self.repository.get_product(product_id)
            self.repository.get_client(client_id)
        except EntityNotFoundError as e:
            raise ReferentialIntegrityError(str(e)) from e

        cycle = self._cycle(billing_cycle) if billing_cycle else product.billing_cycle
        now = self._now()
        order = ServiceOrder(
            id=self._new_id(),
            product_id=product.id,
            client_id=client_id,
            status=status,
            price=parse_amount(price, "price") if price not in (None, "") else product.price,
            setup_fee=parse_amount(setup_fee, "setup_fee") if setup_fee not in (None, "") else product.setup_fee,
            billing_cycle=cycle,
            next_due_date=next_due_date(now.date(), cycle, now.date()),
            notes=notes,
            custom_fields=custom_fields or {},
            created_at=now,
            updated_at=now,
        )
        self.repository.add_order(order)
        logger.info(
            "Created order %s: client %s, product %s, %s %s",
            order.id,
            client_id,
            product.name,
            order.price,
            cycle.value,
            extra={"client_id": client_id, "order_id": order.id},
        )
        return order

    def update_order(self, order_id: str, **changes: Any) -> ServiceOrder:
        """Edit an order's terms. A status change must be a valid transition."""
        _check_changes(ServiceOrder, changes)
        changes = self._normalize_terms(changes)
        self._check_references(changes)
        if "status" in changes:
            changes["status"] = parse_choice(OrderStatus, changes["status"], "status")
            check_transition(self.repository.get_order(order_id).status, changes["status"])
        if "next_due_date" in changes:
            changes["next_due_date"] = parse_date(changes["next_due_date"], "next_due_date")
        order = self.repository.update_order(order_id, {**changes, "updated_at": self._now()})
        logger.info("Updated order %s: %s", order_id, sorted(changes))
        return order

    def update_order_status(self, order_id: str, status: OrderStatus | str) -> ServiceOrder:
        status = parse_choice(OrderStatus, status, "status")
        order = self.repository.get_order(order_id)
        check_transition(order.status, status)
        updated = self.repository.update_order(order_id, {"status": status, "updated_at": self._now()})
        logger.info(
            "Order %s: %s -> %s",
            order_id,
            order.status.value,
            status.value,
            extra={"client_id": order.client_id, "order_id": order_id},
        )
        return updated

    def delete_order(self, order_id: str) -> None:
        """Hard-delete an order and the payments recorded against it."""
        with self.repository.atomic():
            self.repository.delete_order(order_id)
            removed = self.repository.delete_payments_by_order(order_id)
        logger.warning(
            "Deleted order %s and %d recorded payments",
            order_id,
            removed,
            extra={"order_id": order_id},
        )

    # Clients
    def get_clients(self) -> list[Client]:
        return self.repository.list_clients()

    def create_client(
        self,
        name: str,
        email: str,
        phone: str = "",
        document: str = "",
        address: Address | None = None,
    ) -> Client:
        errors = {}
        if not name or not name.strip():
            errors["name"] = "name is required"
        if not email or "@" not in email:
            errors["email"] = "invalid e-mail"
        if errors:
            raise ValidationError(errors)

        client = Client(
            id=self._new_id(),
            name=name.strip(),
            email=email.strip(),
            phone=phone,
            document=document,
            address=address,
            created_at=self._now(),
        )
        self.repository.add_client(client)
        logger.info("Created client %s (%s)", client.id, client.name)
        return client

    # Ledger
    def get_client_payment_history(self, client_id: str) -> list[PaymentHistory]:
        """Derived ledger of a client with recorded payments applied, newest first."""
        ledger = generate_payment_history(
            client_id,
            self.repository.list_orders_by_client(client_id),
            self.repository.list_products(),
            today=self._today(),
        )
        return merge_recorded_payments(ledger, self.repository.list_payments_by_client(client_id))

    def get_client_financial(self, client_id: str) -> ClientFinancial:
        return aggregate_financial(client_id, self.get_client_payment_history(client_id))

    def get_client_services(self, client_id: str) -> ClientServiceSummary:
        return summarize_client_services(
            client_id,
            self.repository.list_orders_by_client(client_id),
            today=self._today(),
        )

    def record_payment(
        self,
        order_id: str,
        amount: Any,
        date: Any,
        status: PaymentStatus | str,
        type: PaymentType | str = PaymentType.RECURRING,
        due_date: Any = None,
        payment_method: PaymentMethod | str | None = None,
        payment_date: Any = None,
        invoice_number: str | None = None,
        notes: str | None = None,
        payment_id: str | None = None,
    ) -> PaymentHistory:
        """Record or edit a payment line for an order.

        A recorded line replaces the derived ledger line with the same
        order, type and date.
        """
        order = self.repository.get_order(order_id)
        product = next((p for p in self.repository.list_products() if p.id == order.product_id), None)
        charge_date = parse_date(date, "date")

        payment = PaymentHistory(
            id=payment_id or self._new_id(),
            date=charge_date,
            amount=parse_amount(amount, "amount"),
            type=parse_choice(PaymentType, type, "type"),
            product_name=product.name if product else "",
            status=parse_choice(PaymentStatus, status, "status"),
            order_id=order.id,
            client_id=order.client_id,
            due_date=parse_date(due_date, "due_date") if due_date else charge_date,
            payment_method=parse_choice(PaymentMethod, payment_method, "payment_method") if payment_method else None,
            payment_date=parse_date(payment_date, "payment_date") if payment_date else None,
            invoice_number=invoice_number,
            notes=notes,
        )
        self.repository.save_payment(payment)
        logger.info(
            "Recorded %s payment %s for order %s (%s)",
            payment.status.value,
            payment.id,
            order_id,
            payment.amount,
            extra={"client_id": order.client_id, "order_id": order_id},
        )
        return payment

    def get_recorded_payments(self, client_id: str) -> list[PaymentHistory]:
        return self.repository.list_payments_by_client(client_id)

    # Bulk status transitions
    def suspend_client_services(self, client_id: str) -> BulkTransitionResult:
        """Suspend every active order of a client."""
        return self._apply_bulk(SUSPEND, client_id)

    def reactivate_client_services(self, client_id: str) -> BulkTransitionResult:
        """Reactivate every suspended order of a client."""
        return self._apply_bulk(REACTIVATE, client_id)

    def cancel_client_services(self, client_id: str) -> BulkTransitionResult:
        """Cancel every order of a client that is not cancelled yet."""
        return self._apply_bulk(CANCEL, client_id)

    def _apply_bulk(self, transition: BulkTransition, client_id: str) -> BulkTransitionResult:
        now = self._now()
        selected = transition.select(client_id, self.repository.list_orders_by_client(client_id))
        result = BulkTransitionResult(client_id=client_id, target_status=transition.target)

        with self.repository.atomic():
            for order in selected:
                try:
                    self.repository.update_order(order.id, {"status": transition.target, "updated_at": now})
                except ServiceBillingError as e:
                    logger.error(
                        "Could not %s order %s, rolling back: %s",
                        transition.name,
                        order.id,
                        e,
                        extra={"client_id": client_id, "order_id": order.id},
                    )
                    raise BulkTransitionError(
                        f"Could not {transition.name} order {order.id}: {e}", order_id=order.id
                    ) from e
                result.order_ids.append(order.id)

        logger.info(
            "%s: %d orders of client %s",
            transition.name.capitalize(),
            result.count,
            client_id,
            extra={"client_id": client_id},
        )
        return result

    # Catalog settings
    def get_config(self) -> ServiceConfig:
        """Catalog settings, stored with defaults on first access."""
        config = self.repository.get_config()
        if config is None:
            config = self.repository.save_config(ServiceConfig())
        return config

    def update_config(self, **changes: Any) -> ServiceConfig:
        unknown = {name: "unknown field" for name in changes if name not in {f.name for f in fields(ServiceConfig)}}
        if unknown:
            raise ValidationError(unknown)
        if "default_billing_cycle" in changes:
            changes["default_billing_cycle"] = self._cycle(changes["default_billing_cycle"])
        if isinstance(changes.get("notification_settings"), dict):
            changes["notification_settings"] = from_dict(NotificationSettings, changes["notification_settings"])
        return self.repository.save_config(replace(self.get_config(), **changes))

    # Helpers
    @staticmethod
    def _cycle(value: BillingCycle | str) -> BillingCycle:
        return parse_choice(BillingCycle, value, "billing_cycle")

    def _check_references(self, changes: dict[str, Any]) -> None:
        """Reject changes pointing at a product, client or group that does not exist."""
        try:
            if "product_id" in changes:
                self.repository.get_product(changes["product_id"])
            if "client_id" in changes:
                self.repository.get_client(changes["client_id"])
            if changes.get("group_id") is not None:
                self.repository.get_group(changes["group_id"])
        except EntityNotFoundError as e:
            raise ReferentialIntegrityError(str(e)) from e

    def _normalize_terms(self, changes: dict[str, Any]) -> dict[str, Any]:
        changes = dict(changes)
        if "price" in changes:
            changes["price"] = parse_amount(changes["price"], "price")
        if "setup_fee" in changes and changes["setup_fee"] not in (None, ""):
            changes["setup_fee"] = parse_amount(changes["setup_fee"], "setup_fee")
        elif "setup_fee" in changes:
            changes["setup_fee"] = None
        if "billing_cycle" in changes:
            changes["billing_cycle"] = self._cycle(changes["billing_cycle"])
        return changes
