"""
Organizer-only access check for event mutations.
"""

from typing import Any, Mapping

from campus_events.errors import Forbidden


def require_owner(event: Mapping[str, Any], user_id: int, action: str = "edit") -> None:
    """Raise Forbidden unless `user_id` organised the raw events row `event`."""
    if str(event["organizer_id"]) != str(user_id):
        raise Forbidden(f"Not authorised to {action} this event.")
