"""Password hashing, bearer tokens and the current-user dependency."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from core.config import JWT_ALGORITHM, JWT_EXPIRES_DAYS, JWT_SECRET
from core.exceptions import AuthenticationError
from core.logger import get_logger
from database import models
from database.deps import get_db_write

logger = get_logger("core.security")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        logger.warning("Stored password hash could not be parsed")
        return False


def create_access_token(user_id: int, email: str, expires_in: Optional[timedelta] = None) -> str:
    """Issue a signed HS256 token carrying the user id in `sub`."""
    now = datetime.now(timezone.utc)
    exp = now + (expires_in if expires_in is not None else timedelta(days=JWT_EXPIRES_DAYS))
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a token.

    Raises:
        AuthenticationError: If the token is expired or otherwise invalid.
    """
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token") from exc


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db_write),
) -> models.User:
    """Resolve the dietitian behind the `Authorization: Bearer` header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Bearer token not found")

    payload = decode_access_token(authorization.split(" ", 1)[1].strip())
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid token") from exc

    user = db.get(models.User, user_id)
    if user is None:
        raise AuthenticationError("User for token no longer exists")
    return user
