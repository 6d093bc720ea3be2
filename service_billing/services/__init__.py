"""Application services and third-party clients."""

from service_billing.services.enotas import ENotasClient
from service_billing.services.ibge import IbgeClient
from service_billing.services.management import ServiceManagement

__all__ = ["ENotasClient", "IbgeClient", "ServiceManagement"]
