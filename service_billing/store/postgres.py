"""PostgreSQL store keeping each collection as a table of JSONB documents."""

import json
import logging
from contextlib import contextmanager
from typing import Any, Iterator

import psycopg

from service_billing.exceptions import RemoteServiceError
from service_billing.store.base import COLLECTIONS, DocumentStore
from service_billing.store.serialization import from_dict, to_dict

logger = logging.getLogger(__name__)

TABLE_PREFIX = "billing_"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
    id TEXT PRIMARY KEY,
    data JSONB NOT NULL,
    position BIGSERIAL
)
"""


class PostgresBillingStore(DocumentStore):
    """Document store on PostgreSQL (also serves Supabase deployments).

    Writes outside ``atomic()`` commit immediately (autocommit); inside it
    they share one transaction.
    """

    TABLES = {name: f"{TABLE_PREFIX}{name}" for name in COLLECTIONS}

    def __init__(
        self,
        connection_string: str | None = None,
        connection: Any = None,
        create_schema: bool = True,
    ) -> None:
        if connection is None:
            if connection_string is None:
                raise ValueError("Either connection_string or connection is required")
            try:
                connection = psycopg.connect(connection_string, autocommit=True)
            except psycopg.Error as e:
                raise RemoteServiceError(f"Cannot connect to PostgreSQL: {e}") from e
        self.conn = connection
        if create_schema:
            self.create_schema()

    def create_schema(self) -> None:
        """Create the collection tables if they do not exist."""
        for table in self.TABLES.values():
            self._execute(SCHEMA_SQL.format(table=table))

    def _execute(self, sql: str, params: tuple = ()) -> Any:
        try:
            with self.conn.cursor() as cur:
                cur.execute(sql, params)
                if cur.description is not None:
                    return cur.fetchall()
                return cur.rowcount
        except psycopg.Error as e:
            logger.error("Query failed: %s", e)
            raise RemoteServiceError(f"PostgreSQL error: {e}") from e

    def _all(self, collection: str) -> list[Any]:
        model = COLLECTIONS[collection][0]
        rows = self._execute(f"SELECT data FROM {self.TABLES[collection]} ORDER BY position")  # noqa: S608
        return [from_dict(model, row[0]) for row in rows]

    def _find(self, collection: str, doc_id: str) -> Any | None:
        model = COLLECTIONS[collection][0]
        rows = self._execute(
            f"SELECT data FROM {self.TABLES[collection]} WHERE id = %s",  # noqa: S608
            (doc_id,),
        )
        return from_dict(model, rows[0][0]) if rows else None

    def _put(self, collection: str, doc_id: str, doc: Any) -> None:
        self._execute(
            f"INSERT INTO {self.TABLES[collection]} (id, data) VALUES (%s, %s::jsonb) "  # noqa: S608
            "ON CONFLICT (id) DO UPDATE SET data = EXCLUDED.data",
            (doc_id, json.dumps(to_dict(doc), ensure_ascii=False)),
        )

    def _remove(self, collection: str, doc_id: str) -> bool:
        rowcount = self._execute(
            f"DELETE FROM {self.TABLES[collection]} WHERE id = %s",  # noqa: S608
            (doc_id,),
        )
        return rowcount > 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self.conn.transaction():
            yield

    def close(self) -> None:
        """Close the connection."""
        self.conn.close()
