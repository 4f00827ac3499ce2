"""FastAPI dependencies for API endpoints."""

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncSession

from feedtags.config.database import db_manager
from feedtags.exceptions import AuthenticationError
from feedtags.services.user_tag_service import UserTagService

USER_ID_HEADER = "X-User-ID"

_user_tag_service = UserTagService()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for database session.

    Yields an async SQLAlchemy session that commits when the endpoint
    returns and rolls back when it raises.

    Yields
    ------
    AsyncSession
        An async SQLAlchemy session for database operations.
    """
    async for session in db_manager.get_session():
        yield session


async def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER),
) -> int:
    """
    Dependency resolving the authenticated user.

    Authentication happens upstream; the authenticating proxy forwards
    the user's ID in the ``X-User-ID`` header.

    Raises
    ------
    AuthenticationError
        401 if the header is missing or not a positive integer.
    """
    if not x_user_id:
        raise AuthenticationError(message=f"Missing {USER_ID_HEADER} header")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise AuthenticationError(message=f"Invalid {USER_ID_HEADER} header") from None
    if user_id <= 0:
        raise AuthenticationError(message=f"Invalid {USER_ID_HEADER} header")
    return user_id


def get_user_tag_service() -> UserTagService:
    """Dependency returning the shared, stateless user tag service."""
    return _user_tag_service
