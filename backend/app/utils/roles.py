from fastapi import Depends, HTTPException

from .dependencies import get_current_user
from .error_handlers import get_error_message

ROLES = frozenset({"user", "employer", "admin"})


def require_roles(*accepted: str, detail_key: str = "forbidden"):
    """Build a gate that passes only tokens whose role is in `accepted`."""
    unknown = set(accepted) - ROLES
    if unknown:
        raise ValueError(f"Unknown roles: {sorted(unknown)}")
    if not accepted:
        raise ValueError("At least one role is required")
    accepted_roles = frozenset(accepted)

    def check_role(user=Depends(get_current_user)):
        if user.get("role") not in accepted_roles:
            raise HTTPException(status_code=403, detail=get_error_message(detail_key))
        return user

    check_role.accepted_roles = accepted_roles
    return check_role


employer_only = require_roles("employer", "admin", detail_key="employer_required")
