import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError

from .error_handlers import get_error_message
from .jwt import decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported with our envelope and a 401
# (HTTPBearer's own error is a 403).
_bearer = HTTPBearer(auto_error=False)


def get_current_user(credentials: HTTPAuthorizationCredentials | None = Depends(_bearer)) -> dict:
    """
    Authenticated gate: decode the bearer token and return its claims
    (`sub`, `email`, `role`). Touches no persisted state.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=401,
            detail=get_error_message("missing_token"),
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_access_token(credentials.credentials)
    except ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise HTTPException(
            status_code=401,
            detail=get_error_message("session_expired"),
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except JWTError as e:
        logger.info("Rejected invalid token: %s", e)
        raise HTTPException(
            status_code=401,
            detail=get_error_message("invalid_token"),
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    return claims
