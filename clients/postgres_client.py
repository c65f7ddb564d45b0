"""
PostgreSQL client with connection pooling and RLS user isolation.

Uses psycopg2 with ThreadedConnectionPool. User isolation enforced via
PostgreSQL Row Level Security - automatically reads user ID from contextvar
and sets app.current_user_id on each connection.

Security: No user context = see nothing (RLS blocks all rows). This is safe.
Invoices, items, credit notes and payments are all user-scoped tables;
admin bypass requires connecting as invoicing_admin with BYPASSRLS.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, List, Sequence, Tuple
from uuid import UUID

import psycopg2
import psycopg2.extras
import psycopg2.pool

from utils.user_context import _current_user_id

logger = logging.getLogger(__name__)


class PostgresClient:
    """
    PostgreSQL client with automatic RLS context from contextvar.

    Every checkout sets app.current_user_id from utils.user_context, so the
    invoicing tables only ever return the acting user's rows.
    - User context set → sees only their data (RLS filtered)
    - No user context → sees nothing (RLS blocks all rows)

    Usage:
        db = PostgresClient(database_url)

        # With user context (normal request flow)
        with user_context(user_id):
            invoices = db.execute("SELECT * FROM invoices")  # User's data only

        # Without user context
        invoices = db.execute("SELECT * FROM invoices")  # Empty - RLS blocks
    """

    # Class-level connection pools shared across instances
    _connection_pools: Dict[str, psycopg2.pool.ThreadedConnectionPool] = {}
    _pools_lock = threading.RLock()

    def __init__(self, database_url: str):
        self._database_url = database_url
        self._ensure_connection_pool()

    def _ensure_connection_pool(self) -> None:
        """Create connection pool if it doesn't exist."""
        with self._pools_lock:
            if self._database_url not in self._connection_pools:
                pool = psycopg2.pool.ThreadedConnectionPool(
                    minconn=2,
                    maxconn=20,
                    dsn=self._database_url,
                    connect_timeout=30,
                )

                self._connection_pools[self._database_url] = pool
                logger.info("Connection pool created")

    @contextmanager
    def get_connection(self):
        """Get connection with RLS context from contextvar."""
        if self._database_url not in self._connection_pools:
            self._ensure_connection_pool()

        pool = self._connection_pools[self._database_url]
        conn = None

        try:
            conn = pool.getconn()
            if conn is None:
                raise RuntimeError("Could not get connection from pool")

            user_id = _current_user_id.get()

            with conn.cursor() as cur:
                if user_id is not None:
                    cur.execute("SET app.current_user_id = %s", (str(user_id),))
                else:
                    # Set to empty string to clear context
                    # RLS policies use ::uuid cast which fails on empty string = no rows
                    cur.execute("SET app.current_user_id = ''")

            yield conn

        finally:
            if conn:
                pool.putconn(conn)

    def _convert_params(self, params: Tuple | Dict | None) -> Tuple | Dict | None:
        """Convert UUID objects to strings."""
        if params is None:
            return None

        def convert(value: Any) -> Any:
            if isinstance(value, UUID):
                return str(value)
            if isinstance(value, list):
                return [convert(v) for v in value]
            if isinstance(value, tuple):
                return tuple(convert(v) for v in value)
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            return value

        return convert(params)

    def execute(self, query: str, params: Tuple | Dict | None = None) -> List[Dict[str, Any]]:
        """
        Execute one statement, return list of row dicts. Empty list if no results.

        The transaction is committed before the connection goes back to
        the pool, for reads as well as writes.
        """
        params = self._convert_params(params)
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(query, params)
                rows = [dict(row) for row in cur.fetchall()] if cur.description else []
            conn.commit()
            return rows

    def execute_snapshot(
        self, queries: Sequence[Tuple[str, Tuple | Dict | None]]
    ) -> List[List[Dict[str, Any]]]:
        """
        Run several SELECTs in one REPEATABLE READ transaction.

        All queries see the same committed data, so rows loaded together
        (a document and its children) are consistent with each other.
        Returns one list of row dicts per query, in order.
        """
        with self.get_connection() as conn:
            # The RLS SET opened a transaction; isolation must be set at the start of a new one
            conn.commit()
            try:
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                    cur.execute("SET TRANSACTION ISOLATION LEVEL REPEATABLE READ READ ONLY")
                    results = []
                    for query, params in queries:
                        cur.execute(query, self._convert_params(params))
                        results.append([dict(row) for row in cur.fetchall()])
                    return results
            finally:
                conn.rollback()

    def close(self) -> None:
        """Close connection pool."""
        with self._pools_lock:
            if self._database_url in self._connection_pools:
                self._connection_pools[self._database_url].closeall()
                del self._connection_pools[self._database_url]

