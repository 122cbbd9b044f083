"""Authentication helpers.

- Passwords are stored as bcrypt hashes (cost 12).
- Sessions are stateless HS256 bearer tokens (PyJWT) signed with `AUTH_SECRET`;
  the token subject is the user id.
- Route handlers depend on `get_current_user_id` (401 when missing/invalid) or
  `get_optional_user_id` (anonymous allowed).
"""

from datetime import timedelta

import bcrypt
import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from common.logging import get_logger

from .models import utcnow
from .settings import get_settings

logger = get_logger(__name__)

ALGORITHM = "HS256"

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(user_id: str, settings=None) -> str:
    """Issue a signed bearer token for `user_id`.

    Args:
        user_id: Subject of the token (`users.id`).
        settings: Optional settings override (defaults to process settings).

    Returns:
        str: Encoded JWT.
    """
    settings = settings or get_settings()
    now = utcnow()
    payload = {
        "sub": user_id,
        "iss": settings.auth_url,
        "iat": now,
        "exp": now + timedelta(seconds=settings.token_ttl_seconds),
    }
    return jwt.encode(payload, settings.auth_secret, algorithm=ALGORITHM)


def decode_access_token(token: str, settings=None) -> str | None:
    """Return the user id carried by `token`, or None if it is invalid or expired."""
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.auth_secret,
            algorithms=[ALGORITHM],
            issuer=settings.auth_url,
        )
    except jwt.PyJWTError as exc:
        logger.info("Rejected bearer token: %s", exc)
        return None
    return payload.get("sub")


def get_optional_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


def get_current_user_id(user_id: str | None = Depends(get_optional_user_id)) -> str:
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id
