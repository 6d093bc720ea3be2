#!/usr/bin/env python3
"""Generate a sample billing dataset into a JSON store.

The file can be loaded with ``STORE_BACKEND=json STORE_JSON_PATH=<file>``
for local development and manual validation.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from service_billing.generators import CatalogGenerator, ClientGenerator, OrderGenerator
from service_billing.logging import setup_logging
from service_billing.store import JsonFileBillingStore

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate a sample billing dataset")
    parser.add_argument(
        "--clients",
        type=int,
        default=20,
        help="Number of clients to generate (default: 20)",
    )
    parser.add_argument(
        "--max-orders",
        type=int,
        default=3,
        help="Maximum orders per client (default: 3)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("local/billing.json"),
        help="JSON store file to write (default: local/billing.json)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Log level (default: INFO)",
    )
    args = parser.parse_args()

    setup_logging(args.log_level)

    if args.output.exists():
        args.output.unlink()
    store = JsonFileBillingStore(args.output, pretty=True)

    groups, products = CatalogGenerator(seed=args.seed).generate()
    client_gen = ClientGenerator(seed=args.seed)
    order_gen = OrderGenerator(seed=args.seed)

    with store.atomic():
        for group in groups:
            store.add_group(group)
        for product in products:
            store.add_product(product)
        for client in client_gen.generate_batch(args.clients):
            store.add_client(client)
            for order in order_gen.generate_for_client(client, products, args.max_orders):
                store.add_order(order)

    logger.info("Wrote %s to %s", store.summary(), args.output)


if __name__ == "__main__":
    main()
