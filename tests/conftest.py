"""Shared fixtures for structgen tests.

The integration fixtures skip the whole session when no MySQL server is
configured through STRUCTGEN_TEST_MYSQL_* variables.
"""

from __future__ import annotations

import os
from typing import Callable

import pymysql
import pytest

from structgen.catalog import ColumnDescriptor
from structgen.loader import Configuration


# ---------------------------------------------------------------------------
# Column factory
# ---------------------------------------------------------------------------

@pytest.fixture
def make_column() -> Callable[..., ColumnDescriptor]:
    """Return a factory building ColumnDescriptors with sensible defaults.

    Usage in tests::

        col = make_column("orders", "order_id", "int", nullable=False, key="PRI")
    """
    def _make(
        table: str,
        column: str,
        data_type: str,
        nullable: bool = False,
        key: str = "",
        char_len: int | None = None,
    ) -> ColumnDescriptor:
        return ColumnDescriptor(
            table_name=table,
            column_name=column,
            is_nullable="YES" if nullable else "NO",
            data_type=data_type,
            character_maximum_length=char_len,
            numeric_precision=None,
            numeric_scale=None,
            column_type=data_type,
            column_key=key,
        )
    return _make


# ---------------------------------------------------------------------------
# Live MySQL — skip if not configured or unreachable
# ---------------------------------------------------------------------------

MYSQL_TEST_HOST = os.environ.get("STRUCTGEN_TEST_MYSQL_HOST", "")
MYSQL_TEST_PORT = int(os.environ.get("STRUCTGEN_TEST_MYSQL_PORT", "3306"))
MYSQL_TEST_USER = os.environ.get("STRUCTGEN_TEST_MYSQL_USER", "root")
MYSQL_TEST_PASSWORD = os.environ.get("STRUCTGEN_TEST_MYSQL_PASSWORD", "")
MYSQL_TEST_DATABASE = "structgen_test"


@pytest.fixture(scope="session")
def mysql_available():
    """Skip integration tests if no MySQL test server is reachable."""
    if not MYSQL_TEST_HOST:
        pytest.skip("STRUCTGEN_TEST_MYSQL_HOST not set")
    try:
        conn = pymysql.connect(
            host=MYSQL_TEST_HOST,
            port=MYSQL_TEST_PORT,
            user=MYSQL_TEST_USER,
            password=MYSQL_TEST_PASSWORD,
        )
    except pymysql.MySQLError as exc:
        pytest.skip(f"MySQL not reachable at {MYSQL_TEST_HOST}: {exc}")
    conn.close()


@pytest.fixture(scope="session")
def mysql_schema(mysql_available):
    """Create a throwaway schema with two tables, drop it afterwards."""
    conn = pymysql.connect(
        host=MYSQL_TEST_HOST,
        port=MYSQL_TEST_PORT,
        user=MYSQL_TEST_USER,
        password=MYSQL_TEST_PASSWORD,
        autocommit=True,
    )
    statements = [
        f"DROP DATABASE IF EXISTS {MYSQL_TEST_DATABASE}",
        f"CREATE DATABASE {MYSQL_TEST_DATABASE}",
        f"""CREATE TABLE {MYSQL_TEST_DATABASE}.orders (
            order_id INT NOT NULL PRIMARY KEY,
            customer_id INT NULL,
            note VARCHAR(64) NULL,
            created_at DATETIME NOT NULL
        )""",
        f"""CREATE TABLE {MYSQL_TEST_DATABASE}.customers (
            id BIGINT NOT NULL PRIMARY KEY,
            email VARCHAR(255) NOT NULL UNIQUE,
            balance DECIMAL(10, 2) NULL
        )""",
    ]
    try:
        with conn.cursor() as cur:
            for stmt in statements:
                cur.execute(stmt)
        yield MYSQL_TEST_DATABASE
        with conn.cursor() as cur:
            cur.execute(f"DROP DATABASE IF EXISTS {MYSQL_TEST_DATABASE}")
    finally:
        conn.close()


@pytest.fixture(scope="session")
def mysql_config(mysql_schema) -> Configuration:
    """Configuration pointing at the throwaway schema."""
    return Configuration(
        db_host=MYSQL_TEST_HOST,
        db_port=MYSQL_TEST_PORT,
        db_user=MYSQL_TEST_USER,
        db_password=MYSQL_TEST_PASSWORD,
        db_name=mysql_schema,
        pkg_name="models",
        sql_tag="sql",
    )
