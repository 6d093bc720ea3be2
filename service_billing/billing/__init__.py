"""Billing ledger calculator."""

from service_billing.billing.cycles import CYCLE_MONTHS, add_cycles, cycle_boundaries, next_due_date
from service_billing.billing.ledger import (
    aggregate_financial,
    generate_payment_history,
    merge_recorded_payments,
    summarize_client_services,
)
from service_billing.billing.status import (
    CANCEL,
    REACTIVATE,
    SUSPEND,
    BulkTransition,
    BulkTransitionResult,
    can_transition,
    check_transition,
)

__all__ = [
    "CANCEL",
    "CYCLE_MONTHS",
    "REACTIVATE",
    "SUSPEND",
    "BulkTransition",
    "BulkTransitionResult",
    "add_cycles",
    "aggregate_financial",
    "can_transition",
    "check_transition",
    "cycle_boundaries",
    "generate_payment_history",
    "merge_recorded_payments",
    "next_due_date",
    "summarize_client_services",
]
