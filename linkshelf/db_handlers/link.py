from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from linkshelf.db_handlers.base import BaseDBHandler
from linkshelf.models import Link, VisibilityType
from linkshelf.utils.logger import setup_logger

logger = setup_logger("db_handlers.link")


def link_load_options() -> list:
    """Relationships every rendered link needs."""
    return [
        selectinload(Link.author),
        selectinload(Link.visibility),
        selectinload(Link.tags),
    ]


class LinkDBHandler(BaseDBHandler[Link]):
    def __init__(self):
        super().__init__(Link)

    async def get_by_slug(self, slug: str, *, db: AsyncSession) -> Link | None:
        try:
            stmt = (
                select(Link)
                .where(Link.slug == slug)
                .options(*link_load_options())
                .order_by(Link.id)
            )
            result = await db.execute(stmt)
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving link by slug '{slug}': {e}")
            raise

    async def get_by_hash(self, hash: str, *, db: AsyncSession) -> Link | None:
        try:
            stmt = select(Link).where(Link.hash == hash).options(*link_load_options())
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving link by hash '{hash}': {e}")
            raise

    async def reload(self, link_id: int, *, db: AsyncSession) -> Link:
        """Fetch a link again, overwriting any stale state held by the session."""
        stmt = (
            select(Link)
            .where(Link.id == link_id)
            .options(*link_load_options())
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one()

    async def slug_exists(
        self, slug: str, *, exclude_id: int | None = None, db: AsyncSession
    ) -> bool:
        stmt = select(Link.id).where(Link.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Link.id != exclude_id)
        result = await db.execute(stmt.limit(1))
        return result.first() is not None

    async def hash_exists(self, hash: str, *, db: AsyncSession) -> bool:
        result = await db.execute(select(Link.id).where(Link.hash == hash).limit(1))
        return result.first() is not None

    async def get_public_page(
        self, page: int, per_page: int, *, db: AsyncSession
    ) -> tuple[list[Link], int]:
        """One page of Public links, newest first."""
        stmt = (
            select(Link)
            .where(Link.visibility_id == VisibilityType.PUBLIC)
            .options(*link_load_options())
            .order_by(Link.created_at.desc(), Link.id.desc())
        )
        return await self.paginate(stmt, page=page, per_page=per_page, db=db)

    async def increment_views(self, link_id: int, *, db: AsyncSession) -> None:
        """Add one view with a single UPDATE so concurrent visits never lose a count."""
        await db.execute(
            update(Link).where(Link.id == link_id).values(views=Link.views + 1)
        )
