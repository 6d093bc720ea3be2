"""Tests for PostgresBillingStore with a mocked psycopg connection."""

import json
from unittest.mock import MagicMock

import psycopg
import pytest

from factories import make_order
from service_billing.exceptions import EntityNotFoundError, RemoteServiceError
from service_billing.models.billing import OrderStatus
from service_billing.store.postgres import PostgresBillingStore
from service_billing.store.serialization import to_dict


@pytest.fixture
def cursor() -> MagicMock:
    cur = MagicMock()
    cur.description = None
    cur.rowcount = 1
    cur.fetchall.return_value = []
    return cur


@pytest.fixture
def connection(cursor: MagicMock) -> MagicMock:
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    conn.transaction.return_value.__exit__.return_value = False
    return conn


@pytest.fixture
def store(connection: MagicMock, cursor: MagicMock) -> PostgresBillingStore:
    store = PostgresBillingStore(connection=connection)
    cursor.execute.reset_mock()
    return store


def _returns_rows(cursor: MagicMock, rows: list) -> None:
    cursor.description = [("data",)]
    cursor.fetchall.return_value = rows


class TestSchema:
    """Tests for table creation."""

    def test_creates_every_table(self, connection: MagicMock, cursor: MagicMock) -> None:
        PostgresBillingStore(connection=connection)

        statements = [c.args[0] for c in cursor.execute.call_args_list]
        assert len(statements) == len(PostgresBillingStore.TABLES)
        assert any("CREATE TABLE IF NOT EXISTS billing_orders" in s for s in statements)

    def test_schema_creation_can_be_skipped(self, connection: MagicMock, cursor: MagicMock) -> None:
        PostgresBillingStore(connection=connection, create_schema=False)
        cursor.execute.assert_not_called()

    def test_requires_connection(self) -> None:
        with pytest.raises(ValueError):
            PostgresBillingStore()


class TestDocuments:
    """Tests for reading and writing documents."""

    def test_add_upserts_json(self, store: PostgresBillingStore, cursor: MagicMock) -> None:
        order = make_order()

        store.add_order(order)

        sql, params = cursor.execute.call_args.args
        assert sql.startswith("INSERT INTO billing_orders")
        assert "ON CONFLICT (id) DO UPDATE" in sql
        assert params[0] == "order-001"
        assert json.loads(params[1]) == to_dict(order)

    def test_get(self, store: PostgresBillingStore, cursor: MagicMock) -> None:
        _returns_rows(cursor, [(to_dict(make_order()),)])

        order = store.get_order("order-001")

        assert order == make_order()
        assert cursor.execute.call_args.args[1] == ("order-001",)

    def test_get_missing(self, store: PostgresBillingStore, cursor: MagicMock) -> None:
        _returns_rows(cursor, [])

        with pytest.raises(EntityNotFoundError):
            store.get_order("missing")

    def test_list_in_insertion_order(self, store: PostgresBillingStore, cursor: MagicMock) -> None:
        _returns_rows(cursor, [(to_dict(make_order("o-1")),), (to_dict(make_order("o-2")),)])

        assert [o.id for o in store.list_orders()] == ["o-1", "o-2"]
        assert "ORDER BY position" in cursor.execute.call_args.args[0]

    def test_update(self, store: PostgresBillingStore, cursor: MagicMock) -> None:
        _returns_rows(cursor, [(to_dict(make_order()),)])

        updated = store.update_order("order-001", {"status": OrderStatus.CANCELLED})

        assert updated.status == OrderStatus.CANCELLED
        assert json.loads(cursor.execute.call_args.args[1][1])["status"] == "cancelled"

    def test_delete_missing(self, store: PostgresBillingStore, cursor: MagicMock) -> None:
        cursor.rowcount = 0

        with pytest.raises(EntityNotFoundError):
            store.delete_order("missing")

    def test_database_error(self, store: PostgresBillingStore, cursor: MagicMock) -> None:
        cursor.execute.side_effect = psycopg.OperationalError("connection lost")

        with pytest.raises(RemoteServiceError, match="PostgreSQL error"):
            store.list_clients()


class TestTransactions:
    """Tests for atomic() and connection handling."""

    def test_atomic_uses_transaction(self, store: PostgresBillingStore, connection: MagicMock) -> None:
        with store.atomic():
            store.add_order(make_order())

        connection.transaction.assert_called_once_with()
        connection.transaction.return_value.__exit__.assert_called_once()

    def test_atomic_propagates_errors(self, store: PostgresBillingStore, connection: MagicMock) -> None:
        with pytest.raises(RuntimeError):
            with store.atomic():
                raise RuntimeError("boom")

        exc_type = connection.transaction.return_value.__exit__.call_args.args[0]
        assert exc_type is RuntimeError

    def test_connect_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def refuse(*args, **kwargs):
            raise psycopg.OperationalError("refused")

        monkeypatch.setattr(psycopg, "connect", refuse)

        with pytest.raises(RemoteServiceError, match="Cannot connect"):
            PostgresBillingStore("postgresql://localhost/none")

    def test_close(self, store: PostgresBillingStore, connection: MagicMock) -> None:
        store.close()
        connection.close.assert_called_once_with()
