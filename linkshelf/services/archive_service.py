from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.config import settings
from linkshelf.db import atomic
from linkshelf.db_handlers import ArchiveDBHandler, ArchiveLinkDBHandler, TagDBHandler
from linkshelf.models import Archive, User
from linkshelf.policies import ArchiveAction, authorize
from linkshelf.schemas import ArchivePayload
from linkshelf.services.tag_service import TagService
from linkshelf.utils.logger import setup_logger
from linkshelf.utils.text_processing import make_excerpt
from linkshelf.utils.validation import validate_payload

logger = setup_logger("archive_service")


class ArchiveService:
    def __init__(self):
        self.archive_handler = ArchiveDBHandler()
        self.tag_handler = TagDBHandler()
        self.archive_link_handler = ArchiveLinkDBHandler()
        self.tag_service = TagService()

    async def list_public(
        self, page: int, *, db: AsyncSession
    ) -> tuple[list[Archive], int]:
        """Public archives that hold at least one link."""
        return await self.archive_handler.get_public_page(
            page, settings.page_size, db=db
        )

    async def create(
        self, actor: User, payload: ArchivePayload, *, db: AsyncSession
    ) -> Archive:
        await self.tag_service.validate_references(
            payload.tags, payload.visibility, db=db
        )

        data = {
            "user_id": actor.id,
            "title": payload.title,
            "slug": await self.tag_service.unique_slug(Archive, payload.title, db=db),
            "visibility_id": payload.visibility,
        }
        if payload.description:
            data["description"] = payload.description
            data["excerpt"] = make_excerpt(payload.description)

        async with atomic(db):
            archive = await self.archive_handler.create(data, db=db)
            await self.tag_service.attach_tags(archive, payload.tags, db=db)

        logger.info(f"User {actor.id} created archive {archive.id}")
        return await self.archive_handler.reload(archive.id, db=db)

    async def show(
        self, actor: User | None, archive: Archive, *, db: AsyncSession
    ) -> Archive:
        """Return the archive after counting one view."""
        authorize(actor, ArchiveAction.VIEW, archive)
        async with atomic(db):
            await self.archive_handler.increment_views(archive.id, db=db)
        return await self.archive_handler.reload(archive.id, db=db)

    async def update(
        self, actor: User, archive: Archive, body: dict[str, Any], *, db: AsyncSession
    ) -> Archive:
        authorize(actor, ArchiveAction.UPDATE, archive)
        payload = validate_payload(ArchivePayload, body)
        await self.tag_service.validate_references(
            payload.tags, payload.visibility, db=db
        )

        changes = {
            "title": payload.title,
            "slug": await self.tag_service.unique_slug(
                Archive, payload.title, exclude_id=archive.id, db=db
            ),
            "visibility_id": payload.visibility,
        }
        if payload.description:
            changes["description"] = payload.description
            changes["excerpt"] = make_excerpt(payload.description)

        await self.tag_service.replace_tags(archive, payload.tags, changes, db=db)
        return await self.archive_handler.reload(archive.id, db=db)

    async def delete(self, actor: User, archive: Archive, *, db: AsyncSession) -> None:
        authorize(actor, ArchiveAction.DELETE, archive)
        async with atomic(db):
            await self.tag_handler.detach_all(archive, db=db)
            await self.archive_link_handler.remove_for_archive(archive.id, db=db)
            await self.archive_handler.remove(archive, db=db)
        logger.info(f"User {actor.id} deleted archive {archive.id}")
