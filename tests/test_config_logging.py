"""Tests for configuration and logging."""

import io
import json
import logging
import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from service_billing.config import (
    ENotasConfig,
    IbgeConfig,
    PostgresConfig,
    ServiceBillingConfig,
    StoreConfig,
)
from service_billing.exceptions import ConfigurationError
from service_billing.logging import JsonFormatter, setup_logging

ENV_VARS = [
    "STORE_BACKEND",
    "STORE_JSON_PATH",
    "PRETTY_JSON",
    "POSTGRES_HOST",
    "POSTGRES_PORT",
    "POSTGRES_DB",
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "ENOTAS_API_KEY",
    "ENOTAS_BASE_URL",
    "ENOTAS_ENVIRONMENT",
    "ENOTAS_TIMEOUT",
    "IBGE_BASE_URL",
    "IBGE_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


@pytest.fixture
def clean_env():
    """Environment without any service-billing variable."""
    env = {k: v for k, v in os.environ.items() if k not in ENV_VARS}
    with patch.dict(os.environ, env, clear=True):
        yield


class TestPostgresConfig:
    """Tests for PostgresConfig."""

    def test_default_values(self) -> None:
        config = PostgresConfig()

        assert config.host == "localhost"
        assert config.port == 5432
        assert config.database == "service_billing"

    def test_connection_string(self) -> None:
        """Test connection string property."""
        config = PostgresConfig(host="db", port=5433, database="billing", user="app", password="pw")

        assert config.connection_string == "postgresql://app:pw@db:5433/billing"


class TestStoreConfig:
    """Tests for StoreConfig."""

    def test_default_values(self) -> None:
        config = StoreConfig()

        assert config.backend == "memory"
        assert config.json_path == Path("data/billing.json")
        assert config.pretty_json is False

    def test_unknown_backend(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown store backend"):
            StoreConfig(backend="sqlite")


class TestRemoteConfigs:
    """Tests for the gateway configurations."""

    def test_enotas_defaults(self) -> None:
        config = ENotasConfig()

        assert config.api_key is None
        assert config.environment == "Homologacao"
        assert config.timeout == 30.0

    def test_ibge_defaults(self) -> None:
        assert IbgeConfig().base_url == "https://servicodados.ibge.gov.br/api/v1/localidades"


class TestServiceBillingConfig:
    """Tests for ServiceBillingConfig."""

    def test_default_values(self) -> None:
        config = ServiceBillingConfig()

        assert isinstance(config.store, StoreConfig)
        assert isinstance(config.postgres, PostgresConfig)
        assert isinstance(config.enotas, ENotasConfig)
        assert isinstance(config.ibge, IbgeConfig)
        assert config.log_level == "INFO"
        assert config.log_format == "standard"

    def test_from_env_default(self, clean_env) -> None:
        """Test creating config from environment with defaults."""
        config = ServiceBillingConfig.from_env()

        assert config.store.backend == "memory"
        assert config.postgres.host == "localhost"
        assert config.enotas.api_key is None
        assert config.log_level == "INFO"

    def test_from_env_custom(self, clean_env) -> None:
        """Test creating config from custom environment variables."""
        env_vars = {
            "STORE_BACKEND": "postgres",
            "STORE_JSON_PATH": "/data/billing.json",
            "PRETTY_JSON": "true",
            "POSTGRES_HOST": "db.supabase.co",
            "POSTGRES_PORT": "6543",
            "POSTGRES_DB": "postgres",
            "ENOTAS_API_KEY": "key-123",
            "ENOTAS_ENVIRONMENT": "Producao",
            "ENOTAS_TIMEOUT": "10",
            "IBGE_TIMEOUT": "5",
            "LOG_LEVEL": "DEBUG",
            "LOG_FORMAT": "json",
        }

        with patch.dict(os.environ, env_vars):
            config = ServiceBillingConfig.from_env()

        assert config.store.backend == "postgres"
        assert config.store.json_path == Path("/data/billing.json")
        assert config.store.pretty_json is True
        assert config.postgres.port == 6543
        assert config.enotas.api_key == "key-123"
        assert config.enotas.environment == "Producao"
        assert config.enotas.timeout == 10.0
        assert config.ibge.timeout == 5.0
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_from_env_empty_api_key(self, clean_env) -> None:
        with patch.dict(os.environ, {"ENOTAS_API_KEY": ""}):
            assert ServiceBillingConfig.from_env().enotas.api_key is None

    def test_from_env_bad_backend(self, clean_env) -> None:
        with patch.dict(os.environ, {"STORE_BACKEND": "redis"}):
            with pytest.raises(ConfigurationError):
                ServiceBillingConfig.from_env()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        setup_logging()

        assert logging.getLogger("service_billing").level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        """Test logging with invalid level defaults to INFO."""
        setup_logging(level="INVALID")

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        setup_logging(format_type="json")

        assert any(isinstance(h.formatter, JsonFormatter) for h in logging.getLogger().handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        logger = logging.getLogger()
        logger.addHandler(logging.StreamHandler())
        logger.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(logger.handlers) == 1

    def test_external_loggers_quieted(self) -> None:
        setup_logging(level="DEBUG")

        for name in ("urllib3", "requests", "psycopg", "faker"):
            assert logging.getLogger(name).level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, **kwargs) -> logging.LogRecord:
        values = dict(
            name="service_billing.test",
            level=logging.INFO,
            pathname="/path/to/file.py",
            lineno=42,
            msg="Order %s suspended",
            args=("order-001",),
            exc_info=None,
        )
        values.update(kwargs)
        return logging.LogRecord(**values)

    def test_format_basic(self) -> None:
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "service_billing.test"
        assert data["message"] == "Order order-001 suspended"
        assert "timestamp" in data

    def test_format_with_exception(self) -> None:
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(self._record(level=logging.ERROR, exc_info=exc_info)))

        assert data["level"] == "ERROR"
        assert "ValueError" in data["exception"]

    def test_format_with_billing_context(self) -> None:
        """Test that billing ids passed via extra become top-level keys."""
        record = self._record()
        record.client_id = "client-001"
        record.order_id = "order-001"
        record.unrelated = "ignored"

        data = json.loads(JsonFormatter().format(record))

        assert data["client_id"] == "client-001"
        assert data["order_id"] == "order-001"
        assert "unrelated" not in data
        assert "company_id" not in data


class TestLoggingIntegration:
    """Tests for records emitted by the package."""

    def test_json_line_per_record(self) -> None:
        stream = io.StringIO()
        setup_logging(format_type="json", stream=stream)

        logging.getLogger("service_billing.services.management").info(
            "Suspend: %d orders of client %s", 2, "client-001", extra={"client_id": "client-001"}
        )

        data = json.loads(stream.getvalue().splitlines()[-1])
        assert data["message"] == "Suspend: 2 orders of client client-001"
        assert data["client_id"] == "client-001"

    def test_level_filters_package_logs(self) -> None:
        stream = io.StringIO()
        setup_logging(level="WARNING", stream=stream)

        logging.getLogger("service_billing.store").info("hidden")
        logging.getLogger("service_billing.store").warning("shown")

        assert "hidden" not in stream.getvalue()
        assert "shown" in stream.getvalue()


class TestPackage:
    """Tests for the package __init__."""

    def test_version_exported(self) -> None:
        from service_billing import __version__

        assert isinstance(__version__, str)
