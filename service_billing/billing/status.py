"""Service order status transitions."""

from dataclasses import dataclass, field
from typing import Iterable

from service_billing.exceptions import InvalidEntityStateError
from service_billing.models.billing import OrderStatus, ServiceOrder

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.ACTIVE, OrderStatus.CANCELLED}),
    OrderStatus.ACTIVE: frozenset({OrderStatus.SUSPENDED, OrderStatus.CANCELLED}),
    OrderStatus.SUSPENDED: frozenset({OrderStatus.ACTIVE, OrderStatus.CANCELLED}),
    OrderStatus.CANCELLED: frozenset(),  # terminal
}


def can_transition(current: OrderStatus | str, target: OrderStatus | str) -> bool:
    """Return whether an order may move from ``current`` to ``target``."""
    return OrderStatus(target) in ALLOWED_TRANSITIONS[OrderStatus(current)]


def check_transition(current: OrderStatus | str, target: OrderStatus | str) -> None:
    """Raise ``InvalidEntityStateError`` unless the transition is allowed."""
    if not can_transition(current, target):
        raise InvalidEntityStateError(
            f"Cannot change order status from {OrderStatus(current).value} to {OrderStatus(target).value}"
        )


@dataclass(frozen=True)
class BulkTransition:
    """A status change applied to every matching order of a client."""

    name: str
    target: OrderStatus
    sources: frozenset[OrderStatus]

    def select(self, client_id: str, orders: Iterable[ServiceOrder]) -> list[ServiceOrder]:
        """Orders of ``client_id`` this transition applies to."""
        return [o for o in orders if o.client_id == client_id and o.status in self.sources]


SUSPEND = BulkTransition("suspend", OrderStatus.SUSPENDED, frozenset({OrderStatus.ACTIVE}))
REACTIVATE = BulkTransition("reactivate", OrderStatus.ACTIVE, frozenset({OrderStatus.SUSPENDED}))
CANCEL = BulkTransition(
    "cancel",
    OrderStatus.CANCELLED,
    frozenset({OrderStatus.PENDING, OrderStatus.ACTIVE, OrderStatus.SUSPENDED}),
)


@dataclass
class BulkTransitionResult:
    """Outcome of a bulk transition."""

    client_id: str
    target_status: OrderStatus
    order_ids: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.order_ids)
