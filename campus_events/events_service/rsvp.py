"""
RSVP toggling under an optional capacity ceiling.
"""

from typing import Any, Dict, Tuple

from campus_events.config import Settings
from campus_events.database.db_connection import get_db
from campus_events.errors import CapacityExceeded, NotFound
from campus_events.events_service.repository import (
    EVENT_NOT_FOUND,
    FETCH_EVENT_SQL,
    LOCK_EVENT_SQL,
    serialize_event,
)

REMOVE_ATTENDEE_SQL = "DELETE FROM event_attendees WHERE event_id = %s AND user_id = %s;"

# Inserts nothing once the event is full.
ADD_ATTENDEE_SQL = """
    INSERT INTO event_attendees (event_id, user_id)
    SELECT e.event_id, %s
    FROM events e
    WHERE e.event_id = %s
      AND (
          e.capacity IS NULL
          OR (SELECT COUNT(*) FROM event_attendees a WHERE a.event_id = e.event_id) < e.capacity
      );
"""


def toggle_rsvp(settings: Settings, event_id: int, user_id: int) -> Tuple[Dict[str, Any], bool]:
    """
    Remove the user from the attendees if present, otherwise add them.

    The event row stays locked until commit, so concurrent toggles on the
    same event run one after another and the conditional insert always sees
    the committed attendee count.

    Returns:
        tuple: (event, joined) where joined is False for a cancellation.

    Raises:
        NotFound: No such event.
        CapacityExceeded: Joining would exceed the event's capacity.
    """
    with get_db(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(LOCK_EVENT_SQL, (event_id,))
            if not cur.fetchone():
                raise NotFound(EVENT_NOT_FOUND)

            cur.execute(REMOVE_ATTENDEE_SQL, (event_id, user_id))
            joined = cur.rowcount == 0

            if joined:
                cur.execute(ADD_ATTENDEE_SQL, (user_id, event_id))
                if cur.rowcount == 0:
                    raise CapacityExceeded()

            cur.execute(FETCH_EVENT_SQL, (event_id,))
            row = cur.fetchone()

    return serialize_event(row), joined
