"""Ledger and financial summary models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from service_billing.models.billing.enums import (
    ClientServiceStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)
from service_billing.models.billing.order import ServiceOrder


@dataclass
class PaymentHistory:
    """One ledger line, either derived from an order or recorded by an admin."""

    date: date  # When the charge is nominally due
    amount: Decimal
    type: PaymentType
    product_name: str  # Denormalized for display
    status: PaymentStatus
    order_id: str
    client_id: str
    due_date: date
    id: str | None = None  # Set only for recorded payments
    payment_method: PaymentMethod | None = None
    payment_date: date | None = None
    invoice_number: str | None = None
    notes: str | None = None


@dataclass
class ClientFinancial:
    """Aggregated financial position of one client."""

    client_id: str
    balance: Decimal
    total_paid: Decimal
    total_pending: Decimal
    total_overdue: Decimal
    last_payment_date: date | None = None
    next_due_date: date | None = None
    payment_history: list[PaymentHistory] = field(default_factory=list)
    pending_invoices: list[PaymentHistory] = field(default_factory=list)


@dataclass
class ClientServiceSummary:
    """Overview of a client's subscriptions."""

    client_id: str
    total_active_services: int
    total_spent: Decimal
    last_order_date: datetime | None
    next_due_date: date | None
    status: ClientServiceStatus
    orders: list[ServiceOrder] = field(default_factory=list)
