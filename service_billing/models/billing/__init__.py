"""Billing domain models."""

from service_billing.models.billing.client import Client
from service_billing.models.billing.enums import (
    BillingCycle,
    ClientServiceStatus,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)
from service_billing.models.billing.order import ServiceOrder
from service_billing.models.billing.payment import (
    ClientFinancial,
    ClientServiceSummary,
    PaymentHistory,
)
from service_billing.models.billing.product import (
    NotificationSettings,
    ServiceConfig,
    ServiceGroup,
    ServiceProduct,
)

__all__ = [
    "BillingCycle",
    "Client",
    "ClientFinancial",
    "ClientServiceStatus",
    "ClientServiceSummary",
    "NotificationSettings",
    "OrderStatus",
    "PaymentHistory",
    "PaymentMethod",
    "PaymentStatus",
    "PaymentType",
    "ServiceConfig",
    "ServiceGroup",
    "ServiceOrder",
    "ServiceProduct",
]
