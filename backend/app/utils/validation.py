"""
Validation utilities for input validation and error handling.
"""
import math
import re
from typing import Any
from fastapi import HTTPException

from .error_handlers import get_error_message

VALID_ROLES = ("user", "employer", "admin")
VALID_JOB_STATUSES = ("active", "closed", "draft", "expired")


def validate_email(email: str) -> str:
    """Validate email format."""
    if not email or not isinstance(email, str):
        raise HTTPException(status_code=400, detail="Email is required")

    email = email.strip().lower()
    if len(email) > 255:
        raise HTTPException(status_code=400, detail="Email too long (max 255 characters)")

    # Basic email regex
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    if not re.match(pattern, email):
        raise HTTPException(status_code=400, detail="Invalid email format")

    return email


def validate_password(password: str) -> None:
    """bcrypt only sees the first 72 bytes, so longer passwords are refused."""
    if not password or not isinstance(password, str) or len(password.encode("utf-8")) > 72:
        raise HTTPException(status_code=400, detail=get_error_message("weak_password"))


def validate_role(role: str | None) -> str:
    """Validate user role. An omitted role means a plain job seeker."""
    if role is None:
        return "user"

    if not isinstance(role, str) or role.strip() not in VALID_ROLES:
        raise HTTPException(status_code=400, detail=get_error_message("invalid_role"))

    return role.strip()


def validate_job_status(status: str | None) -> str:
    """Validate job status; None falls back to 'active'."""
    if status is None:
        return "active"

    if not isinstance(status, str) or status.strip() not in VALID_JOB_STATUSES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status value. Must be one of: {', '.join(VALID_JOB_STATUSES)}"
        )

    return status.strip()


def is_blank(value: Any) -> bool:
    """True for None, whitespace-only strings and empty lists/dicts. Zero is not blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def as_string_list(value: Any) -> list[str]:
    """Coerce a single value or a list into a list of trimmed, non-empty strings."""
    items = value if isinstance(value, (list, tuple)) else [value]
    cleaned = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            cleaned.append(text)
    return cleaned


def coerce_number(value: Any) -> float | None:
    """
    Best-effort numeric coercion for form/JSON input.

    Returns None for anything that is not a finite, non-negative number
    (booleans included, even though Python treats them as ints).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def sanitize_filename(filename: str) -> str:
    """Sanitize filename to prevent directory traversal and other attacks."""
    if not filename:
        raise HTTPException(status_code=400, detail="Filename is required")

    # Remove any path separators
    filename = filename.replace("/", "_").replace("\\", "_")

    # Remove any null bytes
    filename = filename.replace("\x00", "")

    # Remove directory traversal sequences
    filename = filename.replace("..", "_")

    # Remove leading dots to prevent hidden files
    filename = filename.lstrip(".")

    # Ensure it's not too long
    if len(filename) > 200:
        raise HTTPException(status_code=400, detail="Filename too long")

    # Ensure it has some content
    if not filename or filename == "_":
        raise HTTPException(status_code=400, detail="Invalid filename")

    return filename


def is_bare_filename(filename: str) -> bool:
    """True when `filename` names a file directly inside a directory (no separators or dot-dirs)."""
    if not filename or filename in {".", ".."}:
        return False
    return not any(ch in filename for ch in ("/", "\\", "\x00"))
