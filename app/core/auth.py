from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.models.user import User
from app.repositories.user_repository import UserRepository


def create_access_token(user_id: UUID, expires_in: timedelta | None = None) -> str:
    """Issue a signed JWT carrying the user id in the ``userId`` claim."""
    if expires_in is None:
        expires_in = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    payload = {
        "userId": str(user_id),
        "exp": datetime.now(UTC) + expires_in,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> UUID:
    """Return the user id encoded in ``token``.

    Raises:
        jwt.InvalidTokenError: If the token is malformed, expired or badly signed.
        KeyError: If the ``userId`` claim is missing.
        ValueError: If the claim is not a UUID.
    """
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    return UUID(payload["userId"])


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """Resolve the calling user from the ``Authorization: Bearer`` header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Not authorized, no token")

    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    try:
        user_id = decode_access_token(auth_header[7:])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired") from None
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Not authorized, token failed") from None

    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Not authorized, user not found")
    return user
