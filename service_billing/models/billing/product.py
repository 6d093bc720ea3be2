"""Service catalog models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from service_billing.models.billing.enums import BillingCycle


@dataclass
class ServiceGroup:
    """Catalog grouping of service products (hosting, e-mail, ...)."""

    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    is_active: bool = True


@dataclass
class ServiceProduct:
    """A sellable recurring offering.

    Editing a product never changes the price already locked in by
    existing orders.
    """

    id: str
    name: str
    price: Decimal  # Recurring charge per billing cycle
    billing_cycle: BillingCycle
    created_at: datetime
    updated_at: datetime
    description: str = ""
    group_id: str | None = None
    setup_fee: Decimal | None = None  # One-time charge at order creation
    is_active: bool = True
    features: list[str] = field(default_factory=list)
    stock_control: bool = False
    stock_quantity: int | None = None
    auto_setup: bool = False


@dataclass
class NotificationSettings:
    """Catalog notification switches."""

    email_enabled: bool = True
    sms_enabled: bool = False
    webhook_url: str | None = None


@dataclass
class ServiceConfig:
    """Catalog-wide settings."""

    auto_setup_enabled: bool = False
    stock_control_enabled: bool = False
    default_billing_cycle: BillingCycle = BillingCycle.MONTHLY
    payment_gateways: list[str] = field(default_factory=list)
    notification_settings: NotificationSettings = field(default_factory=NotificationSettings)
