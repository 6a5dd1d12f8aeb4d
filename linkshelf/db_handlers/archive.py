from __future__ import annotations

from sqlalchemy import exists, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from linkshelf.db_handlers.base import BaseDBHandler
from linkshelf.models import Archive, ArchiveLink, VisibilityType
from linkshelf.utils.logger import setup_logger

logger = setup_logger("db_handlers.archive")


def archive_load_options() -> list:
    """Relationships every rendered archive needs."""
    return [
        selectinload(Archive.author),
        selectinload(Archive.visibility),
        selectinload(Archive.tags),
    ]


class ArchiveDBHandler(BaseDBHandler[Archive]):
    def __init__(self):
        super().__init__(Archive)

    async def get_by_slug(
        self, slug: str, *, db: AsyncSession
    ) -> Archive | None:
        try:
            stmt = (
                select(Archive)
                .where(Archive.slug == slug)
                .options(*archive_load_options())
                .order_by(Archive.id)
            )
            result = await db.execute(stmt)
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving archive by slug '{slug}': {e}")
            raise

    async def reload(self, archive_id: int, *, db: AsyncSession) -> Archive:
        """Fetch an archive again, refreshing ``views``, tags and ``links_count``."""
        stmt = (
            select(Archive)
            .where(Archive.id == archive_id)
            .options(*archive_load_options())
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one()

    async def slug_exists(
        self, slug: str, *, exclude_id: int | None = None, db: AsyncSession
    ) -> bool:
        stmt = select(Archive.id).where(Archive.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Archive.id != exclude_id)
        result = await db.execute(stmt.limit(1))
        return result.first() is not None

    async def get_public_page(
        self, page: int, per_page: int, *, db: AsyncSession
    ) -> tuple[list[Archive], int]:
        """One page of Public archives holding at least one link, newest first."""
        has_links = exists().where(ArchiveLink.archive_id == Archive.id)
        stmt = (
            select(Archive)
            .where(Archive.visibility_id == VisibilityType.PUBLIC, has_links)
            .options(*archive_load_options())
            .order_by(Archive.created_at.desc(), Archive.id.desc())
        )
        return await self.paginate(stmt, page=page, per_page=per_page, db=db)

    async def increment_views(self, archive_id: int, *, db: AsyncSession) -> None:
        await db.execute(
            update(Archive)
            .where(Archive.id == archive_id)
            .values(views=Archive.views + 1)
        )
