"""Service order model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from service_billing.models.billing.enums import BillingCycle, OrderStatus


@dataclass
class ServiceOrder:
    """A client's subscription to a service product.

    ``price``, ``setup_fee`` and ``billing_cycle`` are captured when the
    order is placed and may diverge from the product's current terms.
    """

    id: str
    product_id: str
    client_id: str
    status: OrderStatus
    price: Decimal
    billing_cycle: BillingCycle
    next_due_date: date
    created_at: datetime
    updated_at: datetime
    setup_fee: Decimal | None = None
    notes: str = ""
    custom_fields: dict[str, Any] = field(default_factory=dict)
