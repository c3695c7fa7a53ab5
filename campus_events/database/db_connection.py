"""
PostgreSQL connection helper.
Provides get_db() for use by services.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2.extensions import connection
from psycopg2.extras import RealDictCursor


@contextmanager
def get_db(database_url: str) -> Iterator[connection]:
    """
    Open a connection whose cursors return rows as dictionaries.

    The transaction is committed when the block exits normally and rolled
    back if it raises. The connection is always closed.

    Usage:
        with get_db(settings.database_url) as conn:
            with conn.cursor() as cur:
                cur.execute(...)

    Raises:
        psycopg2.Error: If the connection fails.
    """
    try:
        conn = psycopg2.connect(database_url, cursor_factory=RealDictCursor)
    except psycopg2.Error as e:
        logging.error(f"Error connecting to database: {e}")
        raise

    try:
        with conn:
            yield conn
    finally:
        conn.close()
