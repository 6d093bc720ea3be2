"""Sample data generators."""

from service_billing.generators.catalog import CatalogGenerator, ClientGenerator, OrderGenerator

__all__ = ["CatalogGenerator", "ClientGenerator", "OrderGenerator"]
