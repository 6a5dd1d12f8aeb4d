"""
Authentication dependencies for FastAPI route protection.

A bearer token is honoured only when its signature is valid, it has not
expired, and its ``jti`` still has a stored AccessToken row for the user.
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.db import get_app_db
from linkshelf.db_handlers import AccessTokenDBHandler, UserDBHandler
from linkshelf.exceptions import UnauthenticatedError
from linkshelf.models import User
from linkshelf.utils.auth import extract_token_claims

# HTTP Bearer token extraction; a missing header is reported by us as a 401 problem
security = HTTPBearer(auto_error=False)


async def _resolve_user(token: str, db: AsyncSession) -> User | None:
    claims = extract_token_claims(token)
    if claims is None:
        return None
    user_id, jti = claims

    token_row = await AccessTokenDBHandler().get_active(user_id, jti, db=db)
    if token_row is None:
        return None

    return await UserDBHandler().get(user_id, db=db)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_app_db),
) -> User:
    """
    Dependency to get the current authenticated user from the bearer token.
    """
    if credentials is None:
        raise UnauthenticatedError()

    user = await _resolve_user(credentials.credentials, db)
    if user is None:
        raise UnauthenticatedError()

    return user


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_app_db),
) -> User | None:
    """
    Optional dependency to get the current authenticated user.
    Returns None if no valid token is provided instead of raising an exception.
    """
    if credentials is None:
        return None

    return await _resolve_user(credentials.credentials, db)
