"""
Authentication service route handlers.

Provides routes for:
- User registration
- User login

Credential checks live in `auth_service.credentials`; JWT logic in
`auth_service.utils`.
"""

import logging
from typing import Any, Dict, Tuple

from flask import Blueprint, Response, jsonify, request

from campus_events.auth_service.credentials import login as login_user
from campus_events.auth_service.credentials import register as register_user
from campus_events.config import get_settings
from campus_events.errors import ApiError

auth_bp = Blueprint("auth", __name__)


# --- REQUEST LOGGING ---
@auth_bp.before_request
def before_request() -> None:
    """
    Log every incoming request to the authentication service.
    Headers are left out so tokens never reach the logs.
    """
    logging.info(f"[Auth] Incoming {request.method} {request.path}")


@auth_bp.after_request
def after_request(response: Response) -> Response:
    """
    Log the response status code for every request.
    """
    logging.info(f"[Auth] Response {response.status}")
    return response


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# --- REGISTER ---
@auth_bp.route("/register", methods=["POST"])
def register() -> Tuple[Response, int]:
    """
    Register a new user.

    Expects a JSON body with:
    - name (str): At most 80 characters.
    - email (str): Unique email address.
    - password (str): Minimum 6 characters.

    Returns:
        201: { success, token, user }
        400: Validation errors or email already registered.
        500: Server-side error.
    """
    data = _json_body()

    try:
        user, token = register_user(get_settings(), data.get("name"), data.get("email"), data.get("password"))
    except ApiError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        logging.exception("Register error")
        return jsonify({"success": False, "message": "Server error during registration."}), 500

    return jsonify({"success": True, "token": token, "user": user}), 201


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT.

    Expects a JSON body with:
    - email (str)
    - password (str)

    Returns:
        200: { success, token, user }
        400: Malformed email or missing password.
        401: Invalid credentials (wrong password or unknown email).
        500: Database error.
    """
    data = _json_body()

    try:
        user, token = login_user(get_settings(), data.get("email"), data.get("password"))
    except ApiError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        logging.exception("Login error")
        return jsonify({"success": False, "message": "Server error during login."}), 500

    return jsonify({"success": True, "token": token, "user": user}), 200
