"""
Id helpers.

Jobs, applications, submissions, reviews and projects use integer primary
keys. Principals (users, employers, admins) use UUID hex strings so that an
id names one account across all three tables; job.employerId and the token
subject may refer to any of them. Every id is a string on the wire.
"""
import uuid
from typing import Any


def parse_id(value: Any) -> int | None:
    """Return the integer id for a well-formed id value, else None.

    Accepts ints and strings of digits; rejects booleans, zero, negatives and
    anything else.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        s = value.strip()
        if s.isascii() and s.isdigit() and int(s) > 0:
            return int(s)
    return None


def new_principal_id() -> str:
    return uuid.uuid4().hex


def parse_principal_id(value: Any) -> str | None:
    """Canonical (32 lowercase hex) form of a user/employer/admin id, else None."""
    if not isinstance(value, str):
        return None
    try:
        return uuid.UUID(value.strip()).hex
    except ValueError:
        return None


def id_str(value: Any) -> str | None:
    """Wire form of an id (None stays None)."""
    return None if value is None else str(value)
