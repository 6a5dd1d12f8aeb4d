from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.db_handlers.base import BaseDBHandler
from linkshelf.models import Archive, ArchiveTag, Link, LinkTag, Tag
from linkshelf.utils.logger import setup_logger

logger = setup_logger("db_handlers.tag")


# Join table and owner column for each taggable entity type.
_ASSOCIATIONS = {
    Link: (LinkTag, LinkTag.link_id, "link_id"),
    Archive: (ArchiveTag, ArchiveTag.archive_id, "archive_id"),
}


def association_for(entity: Link | Archive):
    try:
        return _ASSOCIATIONS[type(entity)]
    except KeyError:
        raise TypeError(f"{type(entity).__name__} cannot carry tags") from None


class TagDBHandler(BaseDBHandler[Tag]):
    def __init__(self):
        super().__init__(Tag)

    async def list_all(self, *, db: AsyncSession) -> list[Tag]:
        result = await db.execute(select(Tag).order_by(Tag.id))
        return list(result.scalars().all())

    async def existing_ids(
        self, tag_ids: Iterable[int], *, db: AsyncSession
    ) -> set[int]:
        """Subset of ``tag_ids`` that refer to stored tags."""
        ids = set(tag_ids)
        if not ids:
            return set()
        result = await db.execute(select(Tag.id).where(Tag.id.in_(ids)))
        return set(result.scalars().all())

    async def detach_all(self, entity: Link | Archive, *, db: AsyncSession) -> None:
        """Delete every tag association row of ``entity``."""
        table, owner_column, _ = association_for(entity)
        await db.execute(delete(table).where(owner_column == entity.id))

    async def attach(
        self, entity: Link | Archive, tag_ids: list[int], *, db: AsyncSession
    ) -> None:
        """Insert one association row per tag id."""
        if not tag_ids:
            return
        table, _, owner_key = association_for(entity)
        await db.execute(
            insert(table),
            [{"tag_id": tag_id, owner_key: entity.id} for tag_id in tag_ids],
        )
