"""
Event storage access: filtered listing, lookup, create, update, delete.

Every function opens its own connection and runs in a single transaction,
so a failed update leaves the event untouched.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from campus_events.config import Settings
from campus_events.database.db_connection import get_db
from campus_events.errors import NotFound, ValidationFailed
from campus_events.events_service.ownership import require_owner
from campus_events.events_service.validation import validate_event_fields

EVENT_NOT_FOUND = "Event not found."

# Organizer is resolved to name/email and attendees come back in join order.
EVENT_SELECT_SQL = """
    SELECT
        e.event_id, e.title, e.description, e.date, e.location,
        e.category, e.faculty, e.capacity, e.organizer_id,
        e.created_at, e.updated_at,
        u.name AS organizer_name, u.email AS organizer_email,
        ARRAY(
            SELECT a.user_id FROM event_attendees a
            WHERE a.event_id = e.event_id
            ORDER BY a.joined_at, a.user_id
        ) AS attendees
    FROM events e
    JOIN users u ON e.organizer_id = u.user_id
"""

FETCH_EVENT_SQL = EVENT_SELECT_SQL + " WHERE e.event_id = %s;"

LOCK_EVENT_SQL = "SELECT event_id, organizer_id, capacity FROM events WHERE event_id = %s FOR UPDATE;"

COUNT_ATTENDEES_SQL = "SELECT COUNT(*) AS attending FROM event_attendees WHERE event_id = %s;"


@dataclass
class EventFilters:
    search: Optional[str] = None
    category: Optional[str] = None
    faculty: Optional[str] = None
    date: Optional[datetime] = None


def to_json_date(dt: Optional[datetime]) -> Optional[str]:
    """Render a naive UTC datetime as e.g. 2030-01-01T00:00:00.000Z."""
    if dt is None:
        return None
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def serialize_event(row: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a row from EVENT_SELECT_SQL for JSON responses."""
    return {
        "_id": row["event_id"],
        "title": row["title"],
        "description": row["description"],
        "date": to_json_date(row["date"]),
        "location": row["location"],
        "category": row["category"],
        "faculty": row["faculty"],
        "organizer": {
            "_id": row["organizer_id"],
            "name": row["organizer_name"],
            "email": row["organizer_email"],
        },
        "attendees": list(row.get("attendees") or []),
        "capacity": row["capacity"],
        "createdAt": to_json_date(row.get("created_at")),
        "updatedAt": to_json_date(row.get("updated_at")),
    }


def build_filters(filters: EventFilters) -> Tuple[str, List[Any]]:
    """
    Translate filters into a WHERE clause and its parameters.

    The date filter covers the 24 hours starting at `filters.date`.
    """
    clauses: List[str] = []
    params: List[Any] = []

    if filters.search:
        clauses.append(
            "to_tsvector('english', e.title || ' ' || e.description) @@ plainto_tsquery('english', %s)"
        )
        params.append(filters.search)

    if filters.category:
        clauses.append("e.category = %s")
        params.append(filters.category)

    if filters.faculty:
        clauses.append("strpos(lower(e.faculty), lower(%s)) > 0")
        params.append(filters.faculty)

    if filters.date:
        clauses.append("e.date >= %s AND e.date < %s")
        params.extend([filters.date, filters.date + timedelta(days=1)])

    if not clauses:
        return "", params
    return " WHERE " + " AND ".join(clauses), params


def list_events(
    settings: Settings,
    filters: EventFilters,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Dict[str, Any]], int, int]:
    """
    Return one page of matching events sorted by date.

    Returns:
        tuple: (items, total, total_pages)
    """
    where, params = build_filters(filters)
    skip = (page - 1) * page_size

    with get_db(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(f"SELECT COUNT(*) AS total FROM events e{where};", params)
            total = cur.fetchone()["total"]

            cur.execute(
                f"{EVENT_SELECT_SQL}{where} ORDER BY e.date ASC, e.event_id ASC LIMIT %s OFFSET %s;",
                params + [page_size, skip],
            )
            items = [serialize_event(row) for row in cur.fetchall()]

    return items, total, math.ceil(total / page_size)


def get_event(settings: Settings, event_id: int) -> Dict[str, Any]:
    with get_db(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(FETCH_EVENT_SQL, (event_id,))
            row = cur.fetchone()

    if not row:
        raise NotFound(EVENT_NOT_FOUND)
    return serialize_event(row)


def create_event(settings: Settings, fields: Dict[str, Any], organizer_id: int) -> Dict[str, Any]:
    """
    Validate and insert a new event owned by `organizer_id`.

    Client-supplied organizer and attendees are ignored.

    Raises:
        ValidationFailed: Any field is missing or malformed.
    """
    clean, errors = validate_event_fields(fields)
    if errors:
        raise ValidationFailed(errors)

    sql = """
        INSERT INTO events (
            title, description, date, location,
            category, faculty, organizer_id, capacity
        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING event_id;
    """

    with get_db(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(sql, (
                clean["title"], clean["description"], clean["date"], clean["location"],
                clean["category"], clean["faculty"], organizer_id, clean["capacity"],
            ))
            event_id = cur.fetchone()["event_id"]

            cur.execute(FETCH_EVENT_SQL, (event_id,))
            row = cur.fetchone()

    return serialize_event(row)


def update_event(
    settings: Settings,
    event_id: int,
    fields: Dict[str, Any],
    acting_user_id: int,
) -> Dict[str, Any]:
    """
    Apply a partial update on behalf of the organizer.

    The event row is locked for the whole transaction, so the capacity
    check against the attendee count cannot race an RSVP.

    Raises:
        NotFound: No such event.
        Forbidden: The acting user is not the organizer.
        ValidationFailed: A supplied field is malformed, or the new capacity
            is below the current attendee count.
    """
    with get_db(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(LOCK_EVENT_SQL, (event_id,))
            ev = cur.fetchone()
            if not ev:
                raise NotFound(EVENT_NOT_FOUND)

            require_owner(ev, acting_user_id, "edit")

            clean, errors = validate_event_fields(fields, partial=True)
            if errors:
                raise ValidationFailed(errors)

            if clean.get("capacity") is not None:
                cur.execute(COUNT_ATTENDEES_SQL, (event_id,))
                attending = cur.fetchone()["attending"]
                if clean["capacity"] < attending:
                    raise ValidationFailed([{
                        "field": "capacity",
                        "message": f"Capacity cannot be below the current attendee count ({attending})",
                    }])

            if clean:
                # Keys come from validate_event_fields, never from the client.
                set_clause = ", ".join(f"{key} = %s" for key in clean)
                set_clause += ", updated_at = (NOW() AT TIME ZONE 'UTC')"
                cur.execute(
                    f"UPDATE events SET {set_clause} WHERE event_id = %s;",
                    list(clean.values()) + [event_id],
                )

            cur.execute(FETCH_EVENT_SQL, (event_id,))
            row = cur.fetchone()

    return serialize_event(row)


def delete_event(settings: Settings, event_id: int, acting_user_id: int) -> None:
    """
    Raises:
        NotFound: No such event.
        Forbidden: The acting user is not the organizer.
    """
    with get_db(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(LOCK_EVENT_SQL, (event_id,))
            ev = cur.fetchone()
            if not ev:
                raise NotFound(EVENT_NOT_FOUND)

            require_owner(ev, acting_user_id, "delete")

            cur.execute("DELETE FROM events WHERE event_id = %s;", (event_id,))
