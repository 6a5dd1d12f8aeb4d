from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.db_handlers.base import BaseDBHandler
from linkshelf.models.user import User
from linkshelf.utils.logger import setup_logger

logger = setup_logger("db_handlers.user")


class UserDBHandler(BaseDBHandler[User]):
    def __init__(self):
        super().__init__(User)

    async def get_user_by_username(
        self, username: str, *, db: AsyncSession
    ) -> User | None:
        """Get a user by username."""
        try:
            stmt = select(User).filter(User.username == username)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user by username '{username}': {e}")
            raise

    async def get_user_by_email(
        self, email: str, *, db: AsyncSession
    ) -> User | None:
        """Get a user by email, ignoring case."""
        try:
            stmt = select(User).filter(func.lower(User.email) == email.lower())
            result = await db.execute(stmt)
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user by email '{email}': {e}")
            raise

    async def username_taken(
        self,
        username: str,
        *,
        exclude_id: int | None = None,
        db: AsyncSession,
    ) -> bool:
        stmt = select(User.id).filter(User.username == username)
        if exclude_id is not None:
            stmt = stmt.filter(User.id != exclude_id)
        result = await db.execute(stmt.limit(1))
        return result.first() is not None

    async def email_taken(self, email: str, *, db: AsyncSession) -> bool:
        stmt = select(User.id).filter(func.lower(User.email) == email.lower())
        result = await db.execute(stmt.limit(1))
        return result.first() is not None
