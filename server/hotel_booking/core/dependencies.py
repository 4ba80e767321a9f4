"""FastAPI dependencies for database access and bearer authentication."""

import logging
from typing import Optional

import jwt
from fastapi import Depends, Header
from jwt import PyJWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import Session
from .config import settings
from .database import get_db
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


def create_session_token(user_id: int) -> str:
    """Sign a session token carrying the ``userId`` claim."""
    return jwt.encode({"userId": user_id}, settings.jwt_secret, algorithm=JWT_ALGORITHM)


async def get_current_user_id(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: AsyncSession = Depends(get_db),
) -> int:
    """
    Authentication dependency that resolves a Bearer token to a user id.

    The token must be a valid signed JWT and must belong to a stored session.

    Args:
        authorization: Authorization header with Bearer token
        db: Database session

    Returns:
        int: Authenticated user id

    Raises:
        AuthenticationError: If the header is missing or malformed, the
            token is invalid, or no session holds it
    """
    if not authorization:
        raise AuthenticationError("Authorization header missing")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError("Invalid authorization header format")

    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
    except PyJWTError as e:
        logger.info("Rejected bearer token", extra={"error": str(e)})
        raise AuthenticationError("Token validation failed") from e

    user_id = payload.get("userId")
    if not isinstance(user_id, int):
        raise AuthenticationError("Invalid token payload")

    stmt = select(Session).where(Session.token == token)
    result = await db.execute(stmt)
    session = result.scalars().first()
    if not session or session.user_id != user_id:
        raise AuthenticationError("No session for token")

    return user_id


CurrentUserId = Depends(get_current_user_id)
DatabaseSession = Depends(get_db)
