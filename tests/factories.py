"""Model factories and test doubles shared by the test modules."""

from datetime import date, datetime, timezone
from decimal import Decimal

from service_billing.models.base import Address
from service_billing.models.billing import (
    BillingCycle,
    Client,
    OrderStatus,
    ServiceOrder,
    ServiceProduct,
)
from service_billing.models.fiscal import Company


class FakeClock:
    """Settable clock for ``ServiceManagement``."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_product(
    product_id: str = "prod-001",
    price: str = "100.00",
    billing_cycle: BillingCycle = BillingCycle.MONTHLY,
    setup_fee: str | None = None,
    name: str = "Hospedagem Profissional",
) -> ServiceProduct:
    """Build a catalog product."""
    now = datetime(2023, 1, 1, tzinfo=timezone.utc)
    return ServiceProduct(
        id=product_id,
        name=name,
        price=Decimal(price),
        billing_cycle=billing_cycle,
        setup_fee=Decimal(setup_fee) if setup_fee is not None else None,
        created_at=now,
        updated_at=now,
    )


def make_order(
    order_id: str = "order-001",
    client_id: str = "client-001",
    product_id: str = "prod-001",
    created: date = date(2024, 1, 15),
    price: str = "100.00",
    billing_cycle: BillingCycle = BillingCycle.MONTHLY,
    setup_fee: str | None = None,
    status: OrderStatus = OrderStatus.ACTIVE,
    next_due: date | None = None,
) -> ServiceOrder:
    """Build an order created at midday on ``created``."""
    created_at = datetime(created.year, created.month, created.day, 12, 0, tzinfo=timezone.utc)
    return ServiceOrder(
        id=order_id,
        product_id=product_id,
        client_id=client_id,
        status=status,
        price=Decimal(price),
        setup_fee=Decimal(setup_fee) if setup_fee is not None else None,
        billing_cycle=billing_cycle,
        next_due_date=next_due or created,
        created_at=created_at,
        updated_at=created_at,
    )


def make_client(client_id: str = "client-001", name: str = "Padaria Pão Quente Ltda") -> Client:
    """Build a client."""
    return Client(
        id=client_id,
        name=name,
        email="financeiro@paoquente.com.br",
        phone="+55 11 3333-4444",
        document="11.222.333/0001-81",
        created_at=datetime(2023, 6, 1, tzinfo=timezone.utc),
    )




def make_company(**overrides) -> Company:
    """Build a valid issuing company."""
    values = dict(
        cnpj="11.222.333/0001-81",
        municipal_registration="1234567",
        legal_name="Agência Digital Ltda",
        trade_name="Agência Digital",
        email="fiscal@agencia.com.br",
        phone="11999990000",
        address=Address(
            street="Rua Augusta",
            number="1500",
            neighborhood="Consolação",
            city="São Paulo",
            state="SP",
            postal_code="01304-001",
        ),
        ibge_state_code=35,
        ibge_city_code=3550308,
        municipal_service_code="01.07",
        service_list_item="1.07",
        cnae="6202300",
        iss_rate=Decimal("2.00"),
        service_description="Suporte técnico e hospedagem de sites",
    )
    values.update(overrides)
    return Company(**values)
