from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.db_handlers.base import BaseDBHandler
from linkshelf.db_handlers.link import link_load_options
from linkshelf.models import ArchiveLink, Link
from linkshelf.utils.logger import setup_logger

logger = setup_logger("db_handlers.archive_link")


class ArchiveLinkDBHandler(BaseDBHandler[ArchiveLink]):
    def __init__(self):
        super().__init__(ArchiveLink)

    async def is_member(
        self, archive_id: int, link_id: int, *, db: AsyncSession
    ) -> bool:
        return await self.exists(archive_id=archive_id, link_id=link_id, db=db)

    async def get_member_link(
        self, archive_id: int, hash: str, *, db: AsyncSession
    ) -> Link | None:
        """The link with ``hash`` among the members of the archive only."""
        stmt = (
            select(Link)
            .join(ArchiveLink, ArchiveLink.link_id == Link.id)
            .where(ArchiveLink.archive_id == archive_id, Link.hash == hash)
        )
        result = await db.execute(stmt)
        return result.scalars().first()

    async def get_recent_links(
        self, archive_id: int, limit: int, *, db: AsyncSession
    ) -> list[Link]:
        """Most recently attached links first."""
        stmt = (
            select(Link)
            .join(ArchiveLink, ArchiveLink.link_id == Link.id)
            .where(ArchiveLink.archive_id == archive_id)
            .options(*link_load_options())
            .order_by(ArchiveLink.created_at.desc(), ArchiveLink.id.desc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def remove_membership(
        self, archive_id: int, link_id: int, *, db: AsyncSession
    ) -> int:
        result = await db.execute(
            delete(ArchiveLink).where(
                ArchiveLink.archive_id == archive_id, ArchiveLink.link_id == link_id
            )
        )
        return result.rowcount

    async def remove_for_link(self, link_id: int, *, db: AsyncSession) -> None:
        await db.execute(delete(ArchiveLink).where(ArchiveLink.link_id == link_id))

    async def remove_for_archive(
        self, archive_id: int, *, db: AsyncSession
    ) -> None:
        await db.execute(
            delete(ArchiveLink).where(ArchiveLink.archive_id == archive_id)
        )
