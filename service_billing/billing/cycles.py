"""Calendar arithmetic for billing cycles.

Boundaries are always computed from the order's anchor date, never by
chaining single steps, so a day-of-month that does not exist in a target
month is clamped to that month's last day without drifting afterwards::

    2024-01-31 -> 2024-02-29 -> 2024-03-31 -> 2024-04-30
"""

from datetime import date
from typing import Iterator

from dateutil.relativedelta import relativedelta

from service_billing.models.billing.enums import BillingCycle

CYCLE_MONTHS: dict[BillingCycle, int] = {
    BillingCycle.MONTHLY: 1,
    BillingCycle.QUARTERLY: 3,
    BillingCycle.SEMIANNUAL: 6,
    BillingCycle.ANNUAL: 12,
    BillingCycle.BIENNIAL: 24,
}


def add_cycles(anchor: date, cycle: BillingCycle | str, count: int = 1) -> date:
    """Return the ``count``-th cycle boundary after ``anchor``."""
    months = CYCLE_MONTHS[BillingCycle(cycle)]
    return anchor + relativedelta(months=months * count)


def cycle_boundaries(anchor: date, cycle: BillingCycle | str, until: date) -> Iterator[date]:
    """Yield every boundary from ``anchor`` (inclusive) up to ``until``.

    Parameters
    ----------
    anchor : date
        First boundary, usually the order creation date.
    cycle : BillingCycle | str
        Billing cycle of the order.
    until : date
        Last date (inclusive) a boundary may fall on.
    """
    count = 0
    boundary = anchor
    while boundary <= until:
        yield boundary
        count += 1
        boundary = add_cycles(anchor, cycle, count)


def next_due_date(anchor: date, cycle: BillingCycle | str, today: date) -> date:
    """First boundary strictly after ``today`` (or the anchor itself if it is later)."""
    count = 0
    boundary = anchor
    while boundary <= today:
        count += 1
        boundary = add_cycles(anchor, cycle, count)
    return boundary


def end_of_month(day: date) -> date:
    """Last calendar day of ``day``'s month."""
    return day + relativedelta(day=31)
