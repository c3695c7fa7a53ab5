"""
Application configuration.

Settings are read from the environment (and a .env file, if present) once
at process start and handed to the app factory. Route handlers fetch them
with get_settings() and pass them explicitly to the services.
"""

import os
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Tuple

from dotenv import load_dotenv
from flask import current_app

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([a-z]*)\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    alias: step
    for step, aliases in (
        (timedelta(seconds=1), ("", "s", "sec", "secs", "second", "seconds")),
        (timedelta(minutes=1), ("m", "min", "mins", "minute", "minutes")),
        (timedelta(hours=1), ("h", "hr", "hrs", "hour", "hours")),
        (timedelta(days=1), ("d", "day", "days")),
        (timedelta(weeks=1), ("w", "week", "weeks")),
        (timedelta(days=365.25), ("y", "yr", "yrs", "year", "years")),
    )
    for alias in aliases
}


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration."""

    jwt_secret: str
    database_url: str
    jwt_expires_in: timedelta = timedelta(days=7)
    cors_origins: Tuple[str, ...] = ("*",)
    port: int = 5000


def parse_duration(value: str) -> timedelta:
    """
    Parse a token lifetime such as "7d", "12h", "2 days", "1w" or "3600".

    A bare number is seconds.

    Raises:
        ValueError: If the value is not a positive duration.
    """
    match = _DURATION_RE.match(value or "")
    if not match or int(match.group(1)) <= 0:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    step = _DURATION_UNITS.get(unit.lower())
    if step is None:
        raise ValueError(f"Invalid duration: {value!r}")
    try:
        return int(amount) * step
    except OverflowError:
        raise ValueError(f"Invalid duration: {value!r}") from None


def load_settings() -> Settings:
    """
    Build Settings from environment variables.

    Raises:
        RuntimeError: If JWT_SECRET or DATABASE_URL is missing.
    """
    load_dotenv()

    jwt_secret = os.getenv("JWT_SECRET")
    if not jwt_secret:
        raise RuntimeError("JWT_SECRET is missing. Set it in .env")

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL is not set. Please set the environment variable.")

    origins = tuple(o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip())

    return Settings(
        jwt_secret=jwt_secret,
        database_url=database_url,
        jwt_expires_in=parse_duration(os.getenv("JWT_EXPIRES_IN", "7d")),
        cors_origins=origins or ("*",),
        port=int(os.getenv("PORT", 5000)),
    )


def get_settings() -> Settings:
    """Return the Settings attached to the running app."""
    return current_app.config["SETTINGS"]
