"""Payment ledger derivation and per-client financial aggregation."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable

from service_billing.billing.cycles import cycle_boundaries, end_of_month
from service_billing.models.billing import (
    ClientFinancial,
    ClientServiceStatus,
    ClientServiceSummary,
    OrderStatus,
    PaymentHistory,
    PaymentStatus,
    PaymentType,
    ServiceOrder,
    ServiceProduct,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def generate_payment_history(
    client_id: str,
    orders: Iterable[ServiceOrder],
    products: Iterable[ServiceProduct],
    today: date | None = None,
) -> list[PaymentHistory]:
    """Derive the payment ledger of one client as of ``today``.

    Every order contributes one ``paid`` setup entry when it carries a setup
    fee, plus one recurring entry per cycle boundary from its creation date
    to the end of the current month. Boundaries on or before ``today`` are
    ``paid``, later ones ``pending``. Orders whose product is no longer in
    the catalog are skipped.

    Parameters
    ----------
    client_id : str
        Client whose orders are considered; other orders are ignored.
    orders : Iterable[ServiceOrder]
        Orders to derive entries from.
    products : Iterable[ServiceProduct]
        Catalog used to resolve product names.
    today : date | None
        Reference date (defaults to the current date).

    Returns
    -------
    list[PaymentHistory]
        Ledger entries, newest first.
    """
    today = today or date.today()
    horizon = end_of_month(today)
    products_by_id = {product.id: product for product in products}
    history: list[PaymentHistory] = []

    for order in orders:
        if order.client_id != client_id:
            continue

        product = products_by_id.get(order.product_id)
        if product is None:
            logger.debug("Skipping order %s: product %s not found", order.id, order.product_id)
            continue

        created = order.created_at.date()

        if order.setup_fee:
            history.append(
                PaymentHistory(
                    date=created,
                    amount=order.setup_fee,
                    type=PaymentType.SETUP,
                    product_name=product.name,
                    status=PaymentStatus.PAID,
                    order_id=order.id,
                    client_id=client_id,
                    due_date=created,
                )
            )

        for boundary in cycle_boundaries(created, order.billing_cycle, horizon):
            history.append(
                PaymentHistory(
                    date=boundary,
                    amount=order.price,
                    type=PaymentType.RECURRING,
                    product_name=product.name,
                    status=PaymentStatus.PAID if boundary <= today else PaymentStatus.PENDING,
                    order_id=order.id,
                    client_id=client_id,
                    due_date=boundary,
                )
            )

    history.sort(key=lambda entry: entry.date, reverse=True)
    return history


def merge_recorded_payments(
    ledger: Iterable[PaymentHistory],
    recorded: Iterable[PaymentHistory],
) -> list[PaymentHistory]:
    """Overlay payments recorded by an admin on a derived ledger.

    A recorded entry replaces the derived entry with the same order, type
    and date; recorded entries without a derived counterpart are kept as
    extra lines. The result is newest first.
    """
    by_key = {(p.order_id, p.type, p.date): p for p in recorded}
    merged = [by_key.pop((e.order_id, e.type, e.date), e) for e in ledger]
    merged.extend(by_key.values())
    merged.sort(key=lambda entry: entry.date, reverse=True)
    return merged


def _total(entries: list[PaymentHistory]) -> Decimal:
    return sum((entry.amount for entry in entries), ZERO)


def aggregate_financial(client_id: str, ledger: Iterable[PaymentHistory]) -> ClientFinancial:
    """Summarize a ledger into paid, pending and overdue totals.

    ``balance`` is ``total_paid - (total_pending + total_overdue)``.
    ``pending_invoices`` holds pending and overdue entries by ascending
    due date.
    """
    entries = list(ledger)
    paid = [e for e in entries if e.status == PaymentStatus.PAID]
    pending = [e for e in entries if e.status == PaymentStatus.PENDING]
    overdue = [e for e in entries if e.status == PaymentStatus.OVERDUE]

    total_paid = _total(paid)
    total_pending = _total(pending)
    total_overdue = _total(overdue)

    return ClientFinancial(
        client_id=client_id,
        balance=total_paid - (total_pending + total_overdue),
        total_paid=total_paid,
        total_pending=total_pending,
        total_overdue=total_overdue,
        last_payment_date=max((e.payment_date or e.date for e in paid), default=None),
        next_due_date=min((e.due_date for e in pending), default=None),
        payment_history=paid,
        pending_invoices=sorted(pending + overdue, key=lambda e: e.due_date),
    )


def summarize_client_services(
    client_id: str,
    orders: Iterable[ServiceOrder],
    today: date | None = None,
) -> ClientServiceSummary:
    """Build the subscription overview shown on a client's page."""
    today = today or date.today()
    client_orders = [o for o in orders if o.client_id == client_id]
    active = [o for o in client_orders if o.status == OrderStatus.ACTIVE]

    if not active:
        status = ClientServiceStatus.INACTIVE
    elif any(o.next_due_date < today for o in active):
        status = ClientServiceStatus.OVERDUE
    else:
        status = ClientServiceStatus.ACTIVE

    return ClientServiceSummary(
        client_id=client_id,
        total_active_services=len(active),
        total_spent=sum((o.price + (o.setup_fee or ZERO) for o in client_orders), ZERO),
        last_order_date=max((o.created_at for o in client_orders), default=None),
        next_due_date=min((o.next_due_date for o in active), default=None),
        status=status,
        orders=client_orders,
    )
