"""
Events service routes: list, read, create, update, delete events, and RSVP.
Handles event lifecycle management and participation.
"""

import logging
from typing import Any, Dict, Tuple

from flask import Blueprint, Response, jsonify, request

from campus_events.auth_service.utils import verify_token_from_request
from campus_events.config import get_settings
from campus_events.errors import ApiError
from campus_events.events_service import repository
from campus_events.events_service.rsvp import toggle_rsvp
from campus_events.events_service.validation import parse_dt

events_bp = Blueprint("events", __name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


# --- REQUEST LOGGING ---
@events_bp.before_request
def before_request() -> None:
    logging.info(f"[Events] Incoming {request.method} {request.path}")


@events_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Events] Response {response.status}")
    return response


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _positive_int_arg(name: str, default: int) -> int:
    value = request.args.get(name, type=int)
    return value if value and value > 0 else default


def _error_response(e: ApiError) -> Tuple[Response, int]:
    return jsonify(e.to_dict()), e.status_code


def _server_error(message: str) -> Tuple[Response, int]:
    return jsonify({"success": False, "message": message}), 500


@events_bp.route("", methods=["GET"])
def list_events() -> Tuple[Response, int]:
    """
    List events sorted by date, with optional filters and pagination.

    Query:
    - search: full-text match on title and description
    - category: exact category
    - faculty: case-insensitive substring
    - date: events within 24 hours from this date
    - page, limit: 1-indexed pagination (defaults 1 and 10)

    Returns:
        200: { success, count, total, totalPages, currentPage, data }
        400: Unparseable date.
        500: Database error.
    """
    page = _positive_int_arg("page", DEFAULT_PAGE)
    limit = min(_positive_int_arg("limit", DEFAULT_LIMIT), MAX_LIMIT)

    date = None
    if request.args.get("date"):
        date = parse_dt(request.args["date"])
        if date is None:
            return jsonify({
                "success": False,
                "errors": [{"field": "date", "message": "Date must be a valid date"}],
            }), 400

    filters = repository.EventFilters(
        search=request.args.get("search") or None,
        category=request.args.get("category") or None,
        faculty=request.args.get("faculty") or None,
        date=date,
    )

    try:
        events, total, total_pages = repository.list_events(get_settings(), filters, page, limit)
    except Exception:
        logging.exception("Get events error")
        return _server_error("Server error fetching events.")

    return jsonify({
        "success": True,
        "count": len(events),
        "total": total,
        "totalPages": total_pages,
        "currentPage": page,
        "data": events,
    }), 200


@events_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id: int) -> Tuple[Response, int]:
    """
    Get a single event by ID.

    Returns:
        200: { success, data }
        404: Event not found.
    """
    try:
        event = repository.get_event(get_settings(), event_id)
    except ApiError as e:
        return _error_response(e)
    except Exception:
        logging.exception("Get event error")
        return _server_error("Server error fetching event.")

    return jsonify({"success": True, "data": event}), 200


@events_bp.route("", methods=["POST"])
def create_event() -> Tuple[Response, int]:
    """
    Create an event organised by the caller.

    Returns:
        201: { success, data }
        400: Validation errors.
        401: Missing or invalid token.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    try:
        event = repository.create_event(get_settings(), _json_body(), user["_id"])
    except ApiError as e:
        return _error_response(e)
    except Exception:
        logging.exception("Create event error")
        return _server_error("Server error creating event.")

    return jsonify({"success": True, "data": event}), 201


@events_bp.route("/<int:event_id>", methods=["PUT"])
def update_event(event_id: int) -> Tuple[Response, int]:
    """
    Update an event. Organizer only.

    Returns:
        200: { success, data }
        400: Validation errors.
        401: Missing or invalid token.
        403: Caller is not the organizer.
        404: Event not found.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    try:
        event = repository.update_event(get_settings(), event_id, _json_body(), user["_id"])
    except ApiError as e:
        return _error_response(e)
    except Exception:
        logging.exception(f"Update event error (event {event_id})")
        return _server_error("Server error updating event.")

    return jsonify({"success": True, "data": event}), 200


@events_bp.route("/<int:event_id>", methods=["DELETE"])
def delete_event(event_id: int) -> Tuple[Response, int]:
    """
    Delete an event. Organizer only.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    try:
        repository.delete_event(get_settings(), event_id, user["_id"])
    except ApiError as e:
        return _error_response(e)
    except Exception:
        logging.exception(f"Delete event error (event {event_id})")
        return _server_error("Server error deleting event.")

    return jsonify({"success": True, "message": "Event deleted successfully."}), 200


@events_bp.route("/<int:event_id>/rsvp", methods=["POST"])
def rsvp(event_id: int) -> Tuple[Response, int]:
    """
    Toggle the caller's RSVP.

    Returns:
        200: { success, rsvpd, message, data }
        400: Event is at full capacity.
        401: Missing or invalid token.
        404: Event not found.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    try:
        event, joined = toggle_rsvp(get_settings(), event_id, user["_id"])
    except ApiError as e:
        return _error_response(e)
    except Exception:
        logging.exception("RSVP error")
        return _server_error("Server error processing RSVP.")

    return jsonify({
        "success": True,
        "rsvpd": joined,
        "message": "RSVP confirmed!" if joined else "RSVP cancelled.",
        "data": event,
    }), 200
