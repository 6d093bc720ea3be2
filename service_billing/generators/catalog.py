"""Sample clients, catalog and orders for demos and local development."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterator

from service_billing.billing.cycles import next_due_date
from service_billing.generators.base import BaseGenerator
from service_billing.models.base import Address
from service_billing.models.billing import (
    BillingCycle,
    Client,
    OrderStatus,
    ServiceGroup,
    ServiceOrder,
    ServiceProduct,
)


class ClientGenerator(BaseGenerator):
    """Generate agency clients, mostly companies."""

    COMPANY_SHARE = 0.7

    def generate(self) -> Client:
        """Generate a single client.

        Returns
        -------
        Client
            Generated client.
        """
        is_company = random.random() < self.COMPANY_SHARE
        return Client(
            id=self.fake.uuid4(),
            name=self.fake.company() if is_company else self.fake.name(),
            email=self.fake.company_email() if is_company else self.fake.free_email(),
            phone=self.fake.phone_number(),
            document=self.fake.cnpj() if is_company else self.fake.cpf(),
            address=Address(
                street=self.fake.street_name(),
                number=self.fake.building_number(),
                neighborhood=self.fake.bairro(),
                city=self.fake.city(),
                state=self.fake.estado_sigla(),
                postal_code=self.fake.postcode(),
            ),
            created_at=datetime.now(timezone.utc) - timedelta(days=random.randint(30, 900)),
        )

    def generate_batch(self, count: int) -> Iterator[Client]:
        for _ in range(count):
            yield self.generate()


class CatalogGenerator(BaseGenerator):
    """Generate the agency's service catalog."""

    # group -> [(product, monthly-equivalent price range, setup fee range, cycles)]
    CATALOG = {
        "Hospedagem": [
            ("Hospedagem Básica", (19, 39), None, [BillingCycle.MONTHLY, BillingCycle.ANNUAL]),
            ("Hospedagem Profissional", (49, 99), (0, 150), [BillingCycle.MONTHLY, BillingCycle.QUARTERLY]),
        ],
        "E-mail": [
            ("E-mail Corporativo", (9, 25), None, [BillingCycle.MONTHLY]),
        ],
        "Sites": [
            ("Manutenção de Site", (150, 400), (500, 2500), [BillingCycle.MONTHLY, BillingCycle.SEMIANNUAL]),
            ("Domínio .com.br", (40, 40), None, [BillingCycle.ANNUAL, BillingCycle.BIENNIAL]),
        ],
        "Marketing": [
            ("Gestão de Redes Sociais", (600, 1800), (300, 900), [BillingCycle.MONTHLY, BillingCycle.QUARTERLY]),
        ],
    }

    def generate(self) -> tuple[list[ServiceGroup], list[ServiceProduct]]:
        """Generate every group of ``CATALOG`` with its products."""
        groups: list[ServiceGroup] = []
        products: list[ServiceProduct] = []
        now = datetime.now(timezone.utc)

        for group_name, entries in self.CATALOG.items():
            group = ServiceGroup(
                id=self.fake.uuid4(),
                name=group_name,
                description=self.fake.sentence(nb_words=8),
                created_at=now,
                updated_at=now,
            )
            groups.append(group)

            for name, price_range, setup_range, cycles in entries:
                products.append(
                    ServiceProduct(
                        id=self.fake.uuid4(),
                        name=name,
                        description=self.fake.sentence(nb_words=10),
                        group_id=group.id,
                        price=Decimal(random.randint(*price_range)) - Decimal("0.10"),
                        setup_fee=Decimal(random.randint(*setup_range)) if setup_range else None,
                        billing_cycle=random.choice(cycles),
                        features=self.fake.words(nb=3),
                        created_at=now,
                        updated_at=now,
                    )
                )

        return groups, products


class OrderGenerator(BaseGenerator):
    """Generate service orders for existing clients and products."""

    STATUSES = [OrderStatus.ACTIVE, OrderStatus.SUSPENDED, OrderStatus.CANCELLED, OrderStatus.PENDING]
    STATUS_WEIGHTS = [0.75, 0.10, 0.10, 0.05]

    def generate_for_client(
        self,
        client: Client,
        products: list[ServiceProduct],
        max_orders: int = 3,
    ) -> list[ServiceOrder]:
        """Generate between one and ``max_orders`` orders for a client.

        Orders are placed after the client was created and carry the
        product's terms at that time.
        """
        orders = []
        today = datetime.now(timezone.utc).date()
        chosen = random.sample(products, k=min(len(products), random.randint(1, max_orders)))

        for product in chosen:
            age_days = max(1, (datetime.now(timezone.utc) - client.created_at).days)
            created_at = client.created_at + timedelta(days=random.randint(0, age_days))
            orders.append(
                ServiceOrder(
                    id=self.fake.uuid4(),
                    product_id=product.id,
                    client_id=client.id,
                    status=random.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0],
                    price=product.price,
                    setup_fee=product.setup_fee,
                    billing_cycle=product.billing_cycle,
                    next_due_date=next_due_date(created_at.date(), product.billing_cycle, today),
                    created_at=created_at,
                    updated_at=created_at,
                )
            )

        return orders
