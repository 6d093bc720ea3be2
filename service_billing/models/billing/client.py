"""Client model."""

from dataclasses import dataclass
from datetime import datetime

from service_billing.models.base import Address


@dataclass
class Client:
    """Agency client (pessoa física or jurídica)."""

    id: str
    name: str
    email: str
    phone: str
    document: str  # CPF or CNPJ
    created_at: datetime
    address: Address | None = None
