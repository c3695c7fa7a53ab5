"""
Seed script: populates the database with a test user and sample events.

Usage:
    python -m campus_events.database.seed          # insert sample data
    python -m campus_events.database.seed --clear  # delete all users and events
"""

import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from campus_events.auth_service.credentials import hash_password
from campus_events.config import Settings, load_settings
from campus_events.database.db_connection import get_db

SAMPLE_USER = {
    "name": "Test User",
    "email": "test@university.ac.uk",
    "password": "password123",
}


def sample_events(now: datetime) -> List[Dict[str, Any]]:
    """Sample events dated relative to `now`."""
    return [
        {
            "title": "Annual Tech & Innovation Fair",
            "description": "Showcase your projects and network with industry professionals. "
                           "Open to all students from any faculty. Refreshments provided.",
            "date": now + timedelta(days=7),
            "location": "Main Hall, Student Union Building",
            "category": "academic",
            "faculty": "Engineering",
            "capacity": 200,
        },
        {
            "title": "Inter-Faculty Football Tournament",
            "description": "Annual football competition between faculties. Form your team of 11 "
                           "and register at the sports office before the deadline.",
            "date": now + timedelta(days=14),
            "location": "University Sports Ground",
            "category": "sports",
            "faculty": "All",
            "capacity": 150,
        },
        {
            "title": "Graduate Careers & Networking Evening",
            "description": "Meet recruiters from over 20 top companies. Bring copies of your CV. "
                           "Smart casual dress code applies.",
            "date": now + timedelta(days=5),
            "location": "Business School Atrium",
            "category": "career",
            "faculty": "All",
            "capacity": 300,
        },
        {
            "title": "International Food Festival",
            "description": "A celebration of cultures with food, music and performances from "
                           "students around the world. Free entry for all students.",
            "date": now + timedelta(days=10),
            "location": "Campus Quad",
            "category": "social",
            "faculty": "All",
            "capacity": None,
        },
        {
            "title": "Machine Learning Workshop",
            "description": "Hands-on introduction to machine learning using Python and "
                           "scikit-learn. Laptops required. Beginners welcome.",
            "date": now + timedelta(days=3),
            "location": "Computer Lab 2B",
            "category": "academic",
            "faculty": "Computer Science",
            "capacity": 30,
        },
    ]


def clear(settings: Settings) -> None:
    with get_db(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute("TRUNCATE event_attendees, events, users RESTART IDENTITY;")
    logging.info("Database cleared")


def seed(settings: Settings) -> int:
    """
    Insert the sample user and events.

    Returns:
        int: Number of events created.
    """
    events = sample_events(datetime.now(timezone.utc).replace(tzinfo=None))

    with get_db(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO users (name, email, password_hash)
                VALUES (%s, %s, %s)
                RETURNING user_id;
                """,
                (SAMPLE_USER["name"], SAMPLE_USER["email"], hash_password(SAMPLE_USER["password"])),
            )
            user_id = cur.fetchone()["user_id"]

            for ev in events:
                cur.execute(
                    """
                    INSERT INTO events (
                        title, description, date, location,
                        category, faculty, organizer_id, capacity
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s);
                    """,
                    (ev["title"], ev["description"], ev["date"], ev["location"],
                     ev["category"], ev["faculty"], user_id, ev["capacity"]),
                )

    logging.info(f"Created test user: {SAMPLE_USER['email']} / {SAMPLE_USER['password']}")
    logging.info(f"Created {len(events)} sample events")
    return len(events)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the campus events database.")
    parser.add_argument("--clear", action="store_true", help="delete all users and events")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")

    try:
        settings = load_settings()
        if args.clear:
            clear(settings)
        else:
            seed(settings)
    except Exception:
        logging.exception("Seed error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
