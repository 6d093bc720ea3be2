#!/usr/bin/env python3
"""Print a client's financial snapshot and payment ledger.

Uses the store configured through the environment (``STORE_BACKEND``,
``STORE_JSON_PATH``, ``POSTGRES_*``).
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from service_billing.config import ServiceBillingConfig
from service_billing.exceptions import ServiceBillingError
from service_billing.logging import setup_logging
from service_billing.services import ServiceManagement
from service_billing.store import create_store

logger = logging.getLogger(__name__)


def print_statement(management: ServiceManagement, client_id: str) -> None:
    """Print the statement of one client."""
    financial = management.get_client_financial(client_id)
    services = management.get_client_services(client_id)

    print(f"\n{'='*60}")
    print(f"Client: {client_id} ({services.status.value})")
    print("=" * 60)
    print(f"  Active services: {services.total_active_services}")
    print(f"  Paid:            R$ {financial.total_paid:>12}")
    print(f"  Pending:         R$ {financial.total_pending:>12}")
    print(f"  Overdue:         R$ {financial.total_overdue:>12}")
    print(f"  Balance:         R$ {financial.balance:>12}")
    print(f"  Last payment:    {financial.last_payment_date or '-'}")
    print(f"  Next due:        {financial.next_due_date or '-'}")

    print("\n  Ledger:")
    for entry in management.get_client_payment_history(client_id):
        print(
            f"    {entry.date.isoformat()}  {entry.type.value:<9}  {entry.status.value:<7}  "
            f"R$ {entry.amount:>10}  {entry.product_name}"
        )


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Print client financial statements")
    parser.add_argument(
        "client_ids",
        nargs="*",
        help="Client ids (default: every client in the store)",
    )
    args = parser.parse_args()

    config = ServiceBillingConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    try:
        management = ServiceManagement(create_store(config))
        client_ids = args.client_ids or [client.id for client in management.get_clients()]
        for client_id in client_ids:
            print_statement(management, client_id)
    except ServiceBillingError as e:
        logger.error("Statement failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
