"""Domain models for service billing."""

from service_billing.models.base import Address

__all__ = ["Address"]
