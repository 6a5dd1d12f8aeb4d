from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.db_handlers.base import BaseDBHandler
from linkshelf.models.access_token import AccessToken
from linkshelf.utils.logger import setup_logger

logger = setup_logger("db_handlers.access_token")


class AccessTokenDBHandler(BaseDBHandler[AccessToken]):
    def __init__(self):
        super().__init__(AccessToken)

    async def get_active(
        self, user_id: int, jti: str, *, db: AsyncSession
    ) -> AccessToken | None:
        """The stored token row matching a decoded bearer token, if not revoked."""
        stmt = select(AccessToken).filter(
            AccessToken.user_id == user_id, AccessToken.jti == jti
        )
        result = await db.execute(stmt)
        return result.scalars().first()

    async def revoke_all_for_user(self, user_id: int, *, db: AsyncSession) -> int:
        """Delete every token issued to the user. Returns the number revoked."""
        result = await db.execute(
            delete(AccessToken).where(AccessToken.user_id == user_id)
        )
        logger.info(f"Revoked {result.rowcount} token(s) of user {user_id}")
        return result.rowcount
