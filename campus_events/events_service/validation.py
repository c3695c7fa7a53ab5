"""
Field validation for event create/update requests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

# --- CONSTANTS FOR VALIDATION ---
TITLE_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 2000
VALID_CATEGORIES = ["academic", "social", "sports", "career", "other"]
DEFAULT_FACULTY = "All"
CAPACITY_MAX = 2147483647  # PostgreSQL INTEGER
# The list filter spans [date, date + 1 day), which must stay representable.
LATEST_DATE = datetime.max - timedelta(days=1)

REQUIRED_FIELDS = ["title", "description", "date", "location", "category"]
EDITABLE_FIELDS = REQUIRED_FIELDS + ["faculty", "capacity"]

FieldErrors = List[Dict[str, str]]


def parse_dt(val: Any) -> Optional[datetime]:
    """
    Safely parse an ISO-8601 date or datetime string.

    Offset-aware values are converted to UTC; the result is always naive
    UTC, which is how dates are stored.

    Returns:
        datetime: The parsed datetime, or None if invalid or outside the
        supported range.
    """
    if not isinstance(val, str) or not val.strip():
        return None
    val = val.strip()
    try:
        # Handles 'YYYY-MM-DD', 'YYYY-MM-DDTHH:MM' and '...Z' or '...+00:00'
        if val.endswith("Z"):
            val = val[:-1] + "+00:00"
        dt = datetime.fromisoformat(val)
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    except (ValueError, TypeError, OverflowError):
        return None
    if dt > LATEST_DATE:
        return None
    return dt


def parse_capacity(val: Any) -> Tuple[Optional[int], bool]:
    """
    Returns:
        tuple: (capacity, ok). A missing/empty value means unbounded.
    """
    if val is None or val == "":
        return None, True
    if isinstance(val, bool):
        return None, False
    if isinstance(val, str) and val.strip().isdigit():
        val = int(val.strip())
    if isinstance(val, float) and val.is_integer():
        val = int(val)
    if isinstance(val, int) and 1 <= val <= CAPACITY_MAX:
        return val, True
    return None, False


def _text(data: Dict[str, Any], key: str) -> str:
    val = data.get(key)
    return val.strip() if isinstance(val, str) else ""


def validate_event_fields(data: Dict[str, Any], partial: bool = False) -> Tuple[Dict[str, Any], FieldErrors]:
    """
    Validate event fields from a request body.

    With partial=True (updates) only the keys present in `data` are checked,
    but a present required field still may not be blank. Keys outside
    EDITABLE_FIELDS are dropped.

    Returns:
        tuple: (clean_fields, errors)
    """
    clean: Dict[str, Any] = {}
    errors: FieldErrors = []

    def wanted(key: str) -> bool:
        return not partial or key in data

    if wanted("title"):
        title = _text(data, "title")
        if not title:
            errors.append({"field": "title", "message": "Title is required"})
        elif len(title) > TITLE_MAX_LENGTH:
            errors.append({"field": "title", "message": f"Title cannot exceed {TITLE_MAX_LENGTH} characters"})
        else:
            clean["title"] = title

    if wanted("description"):
        description = _text(data, "description")
        if not description:
            errors.append({"field": "description", "message": "Description is required"})
        elif len(description) > DESCRIPTION_MAX_LENGTH:
            errors.append({
                "field": "description",
                "message": f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters",
            })
        else:
            clean["description"] = description

    if wanted("date"):
        if not data.get("date"):
            errors.append({"field": "date", "message": "Date is required"})
        else:
            date = parse_dt(data.get("date"))
            if date is None:
                errors.append({"field": "date", "message": "Date must be a valid date"})
            else:
                clean["date"] = date

    if wanted("location"):
        location = _text(data, "location")
        if not location:
            errors.append({"field": "location", "message": "Location is required"})
        else:
            clean["location"] = location

    if wanted("category"):
        category = data.get("category")
        if not category:
            errors.append({"field": "category", "message": "Category is required"})
        elif category not in VALID_CATEGORIES:
            errors.append({"field": "category", "message": "Invalid category"})
        else:
            clean["category"] = category

    if "faculty" in data:
        clean["faculty"] = _text(data, "faculty") or DEFAULT_FACULTY
    elif not partial:
        clean["faculty"] = DEFAULT_FACULTY

    if "capacity" in data:
        capacity, ok = parse_capacity(data.get("capacity"))
        if not ok:
            errors.append({"field": "capacity", "message": "Capacity must be a positive number"})
        else:
            clean["capacity"] = capacity
    elif not partial:
        clean["capacity"] = None

    return clean, errors
