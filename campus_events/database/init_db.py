"""
Apply schema.sql to the configured database.

Usage:
    python -m campus_events.database.init_db

Every statement uses IF NOT EXISTS, so running it again is harmless.
"""

import logging
import os
import sys

from campus_events.config import Settings, load_settings
from campus_events.database.db_connection import get_db

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schema.sql")


def init_db(settings: Settings) -> None:
    """Create all tables and indexes."""
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        schema = f.read()

    with get_db(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(schema)

    logging.info("Schema applied successfully.")


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")
    try:
        init_db(load_settings())
    except Exception:
        logging.exception("Schema initialisation FAILED")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
