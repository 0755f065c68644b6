from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt

from ..config import ACCESS_TOKEN_EXPIRE_HOURS, SECRET_KEY

ALGORITHM = "HS256"


def create_access_token(data: dict, *, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def token_for_user(user) -> str:  # noqa: ANN001
    return create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})


def decode_access_token(token: str) -> dict:
    """
    Verify signature and expiry and return the claims.

    Raises `jose.JWTError` (ExpiredSignatureError included) on any failure.
    """
    claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    if not claims.get("sub") or not claims.get("role"):
        raise JWTError("Token is missing identity claims")
    return claims
