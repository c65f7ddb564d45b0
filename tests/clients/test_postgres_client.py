"""Tests for PostgresClient over a mocked psycopg2 connection pool."""

from unittest.mock import MagicMock, call, patch
from uuid import uuid4

import psycopg2
import pytest

from clients.postgres_client import PostgresClient
from factories import TEST_USER_ID
from utils.user_context import user_context


@pytest.fixture
def conn():
    return MagicMock()


@pytest.fixture
def cursor(conn):
    return conn.cursor.return_value.__enter__.return_value


@pytest.fixture
def pool(conn):
    pool = MagicMock()
    pool.getconn.return_value = conn
    return pool


@pytest.fixture
def db(pool):
    with patch("clients.postgres_client.psycopg2.pool.ThreadedConnectionPool", return_value=pool):
        client = PostgresClient(f"postgresql://test/{uuid4()}")
    yield client
    client.close()


class TestPool:

    def test_pool_shared_per_url(self, pool):
        url = f"postgresql://test/{uuid4()}"
        with patch("clients.postgres_client.psycopg2.pool.ThreadedConnectionPool", return_value=pool) as factory:
            first = PostgresClient(url)
            PostgresClient(url)

        factory.assert_called_once()
        first.close()

    def test_close_closes_pool(self, db, pool):
        db.close()

        pool.closeall.assert_called_once()

    def test_connection_returned_to_pool(self, db, pool, conn):
        db.execute("SELECT 1")

        pool.putconn.assert_called_once_with(conn)


class TestRLSContext:

    def test_sets_user_context_from_contextvar(self, db, cursor):
        with user_context(TEST_USER_ID):
            db.execute("SELECT 1")

        assert cursor.execute.call_args_list[0] == call(
            "SET app.current_user_id = %s", (str(TEST_USER_ID),)
        )

    def test_clears_context_without_user_id(self, db, cursor):
        db.execute("SELECT 1")

        assert cursor.execute.call_args_list[0] == call("SET app.current_user_id = ''")


class TestExecute:

    def test_returns_list_of_dicts(self, db, cursor):
        cursor.fetchall.return_value = [{"id": 1, "invoice_number": "INV-1"}]

        assert db.execute("SELECT id, invoice_number FROM invoices") == [
            {"id": 1, "invoice_number": "INV-1"}
        ]

    def test_uuid_params_converted(self, db, cursor):
        invoice_id = uuid4()
        cursor.fetchall.return_value = []

        db.execute("SELECT * FROM invoices WHERE id = %s", (invoice_id,))

        assert cursor.execute.call_args == call(
            "SELECT * FROM invoices WHERE id = %s", (str(invoice_id),)
        )

    def test_statement_without_rows_commits(self, db, cursor, conn):
        cursor.description = None

        assert db.execute("UPDATE invoices SET status = 'void'") == []
        conn.commit.assert_called_once()

    def test_read_also_commits(self, db, cursor, conn):
        cursor.fetchall.return_value = []

        db.execute("SELECT id FROM invoices")

        conn.commit.assert_called_once()


class TestExecuteSnapshot:

    def test_one_result_list_per_query(self, db, cursor):
        cursor.fetchall.side_effect = [[{"id": 1}], [{"id": 2}, {"id": 3}]]

        results = db.execute_snapshot([
            ("SELECT id FROM invoices", None),
            ("SELECT id FROM payments", None),
        ])

        assert results == [[{"id": 1}], [{"id": 2}, {"id": 3}]]

    def test_isolation_set_at_start_of_fresh_transaction(self, db, cursor, conn):
        cursor.fetchall.return_value = []
        events = []
        conn.commit.side_effect = lambda: events.append("commit")
        cursor.execute.side_effect = lambda query, *args: events.append(query)

        db.execute_snapshot([("SELECT 1", None)])

        assert events[1:3] == ["commit", "SET TRANSACTION ISOLATION LEVEL REPEATABLE READ READ ONLY"]

    def test_params_converted(self, db, cursor):
        invoice_id = uuid4()
        cursor.fetchall.return_value = []

        db.execute_snapshot([("SELECT * FROM payments WHERE invoice_id = %s", (invoice_id,))])

        assert cursor.execute.call_args == call(
            "SELECT * FROM payments WHERE invoice_id = %s", (str(invoice_id),)
        )

    def test_rolls_back_after_read(self, db, cursor, conn):
        cursor.fetchall.return_value = []

        db.execute_snapshot([("SELECT 1", None)])

        conn.rollback.assert_called_once()

    def test_rolls_back_and_releases_on_error(self, db, cursor, conn, pool):
        def fail_on_select(query, *args):
            if query.startswith("SELECT"):
                raise psycopg2.OperationalError("connection lost")

        cursor.execute.side_effect = fail_on_select

        with pytest.raises(psycopg2.OperationalError):
            db.execute_snapshot([("SELECT 1", None)])

        conn.rollback.assert_called_once()
        pool.putconn.assert_called_once_with(conn)
