"""
Shared authentication helpers.
Provides token creation, verification, and the request-level auth check.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import jwt
from flask import Response, jsonify, request

from campus_events.config import Settings, get_settings
from campus_events.database.db_connection import get_db
from campus_events.errors import Unauthorized

JWT_ALGORITHM = "HS256"
INVALID_TOKEN_MESSAGE = "Invalid or expired token."


# --- JWT CREATION ---
def create_token(user_id: int, settings: Settings) -> str:
    """
    Generates a new JWT for a given user.

    Args:
        user_id (int): The unique ID of the user.
        settings (Settings): Supplies the signing key and lifetime.

    Returns:
        str: Encoded JWT string.
    """
    now = datetime.now(timezone.utc)

    payload = {
        "sub": str(user_id),
        "exp": now + settings.jwt_expires_in,
        "iat": now,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


# --- JWT VALIDATION ---
def verify_token(token: str, settings: Settings) -> int:
    """
    Validate a JWT and return the user id it was issued for.

    Raises:
        Unauthorized: Bad signature, malformed token, or expired.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
        return int(payload["sub"])
    except (jwt.InvalidTokenError, ValueError) as e:
        raise Unauthorized(INVALID_TOKEN_MESSAGE) from e


def public_user(row: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a users row for responses. Never includes the password hash."""
    return {"_id": row["user_id"], "name": row["name"], "email": row["email"]}


def _error(message: str, code: int) -> Tuple[None, Response, int]:
    return None, jsonify({"success": False, "message": message}), code


def verify_token_from_request() -> Tuple[Optional[Dict[str, Any]], Optional[Response], Optional[int]]:
    """
    Verify the bearer token in the Authorization header and load its user.

    Returns:
        tuple: (user, error_response, status_code)
               If successful, error_response and status_code are None.
               If failed, user is None.
    """
    settings = get_settings()
    auth = request.headers.get("Authorization", "")

    if not auth.startswith("Bearer "):
        return _error(Unauthorized.default_message, 401)

    token = auth.split(" ", 1)[1].strip()
    if not token:
        return _error(Unauthorized.default_message, 401)

    try:
        user_id = verify_token(token, settings)
    except Unauthorized as e:
        return _error(e.message, e.status_code)

    try:
        with get_db(settings.database_url) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT user_id, name, email FROM users WHERE user_id = %s;", (user_id,))
                row = cur.fetchone()
    except Exception:
        logging.exception("Auth lookup error")
        return _error("Server error verifying credentials.", 500)

    if not row:
        return _error("User no longer exists.", 401)

    return public_user(row), None, None
