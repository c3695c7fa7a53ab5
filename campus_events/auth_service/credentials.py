"""
Registration and login.

Validation runs before any database access; passwords are hashed with
Argon2 and never leave this module in plaintext or hashed form.
"""

import re
from typing import Any, Dict, List, Tuple

import psycopg2.errors
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from campus_events.auth_service.utils import create_token, public_user
from campus_events.config import Settings
from campus_events.database.db_connection import get_db
from campus_events.errors import Conflict, Unauthorized, ValidationFailed

ph = PasswordHasher()

NAME_MAX_LENGTH = 80
PASSWORD_MIN_LENGTH = 6
EMAIL_MAX_LENGTH = 255
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

DUPLICATE_EMAIL_MESSAGE = "An account with that email already exists."
BAD_CREDENTIALS_MESSAGE = "Invalid email or password."


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(password: str, digest: str) -> bool:
    try:
        return ph.verify(digest, password)
    except (VerificationError, InvalidHashError):
        return False


def normalize_email(email: Any) -> str:
    return email.strip().lower() if isinstance(email, str) else ""


def _check_email(email: str, errors: List[Dict[str, str]]) -> None:
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_RE.match(email):
        errors.append({"field": "email", "message": "Please enter a valid email"})


def validate_registration(name: Any, email: Any, password: Any) -> Tuple[Dict[str, str], List[Dict[str, str]]]:
    """Return (clean_fields, errors) for a registration request."""
    errors: List[Dict[str, str]] = []

    name = name.strip() if isinstance(name, str) else ""
    if not name:
        errors.append({"field": "name", "message": "Name is required"})
    elif len(name) > NAME_MAX_LENGTH:
        errors.append({"field": "name", "message": f"Name cannot exceed {NAME_MAX_LENGTH} characters"})

    email = normalize_email(email)
    _check_email(email, errors)

    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        errors.append({
            "field": "password",
            "message": f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
        })

    return {"name": name, "email": email, "password": password}, errors


def validate_login(email: Any, password: Any) -> Tuple[Dict[str, str], List[Dict[str, str]]]:
    """Return (clean_fields, errors) for a login request."""
    errors: List[Dict[str, str]] = []

    email = normalize_email(email)
    _check_email(email, errors)

    if not isinstance(password, str) or not password:
        errors.append({"field": "password", "message": "Password is required"})

    return {"email": email, "password": password}, errors


def register(settings: Settings, name: Any, email: Any, password: Any) -> Tuple[Dict[str, Any], str]:
    """
    Create an account and issue its first token.

    Raises:
        ValidationFailed: Name, email, or password is malformed.
        Conflict: The email already has an account.
    """
    fields, errors = validate_registration(name, email, password)
    if errors:
        raise ValidationFailed(errors)

    pw_hash = hash_password(fields["password"])

    try:
        with get_db(settings.database_url) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 FROM users WHERE email = %s;", (fields["email"],))
                if cur.fetchone():
                    raise Conflict(DUPLICATE_EMAIL_MESSAGE)

                cur.execute(
                    """
                    INSERT INTO users (name, email, password_hash)
                    VALUES (%s, %s, %s)
                    RETURNING user_id, name, email;
                    """,
                    (fields["name"], fields["email"], pw_hash),
                )
                row = cur.fetchone()
    except psycopg2.errors.UniqueViolation as e:
        raise Conflict(DUPLICATE_EMAIL_MESSAGE) from e

    return public_user(row), create_token(row["user_id"], settings)


def login(settings: Settings, email: Any, password: Any) -> Tuple[Dict[str, Any], str]:
    """
    Check credentials and issue a token.

    Unknown email and wrong password fail identically.

    Raises:
        ValidationFailed: Email malformed or password empty.
        Unauthorized: Credentials do not match an account.
    """
    fields, errors = validate_login(email, password)
    if errors:
        raise ValidationFailed(errors)

    with get_db(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                "SELECT user_id, name, email, password_hash FROM users WHERE email = %s;",
                (fields["email"],),
            )
            row = cur.fetchone()

    if not row or not verify_password(fields["password"], row["password_hash"]):
        raise Unauthorized(BAD_CREDENTIALS_MESSAGE)

    return public_user(row), create_token(row["user_id"], settings)
