from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.config import settings
from linkshelf.db import atomic
from linkshelf.db_handlers import ArchiveLinkDBHandler, LinkDBHandler, TagDBHandler
from linkshelf.models import Link, User
from linkshelf.policies import LinkAction, authorize
from linkshelf.schemas import LinkPayload
from linkshelf.services.tag_service import TagService
from linkshelf.utils.logger import setup_logger
from linkshelf.utils.text_processing import generate_hash, make_excerpt
from linkshelf.utils.validation import validate_payload

logger = setup_logger("link_service")

MAX_HASH_ATTEMPTS = 5


class LinkService:
    def __init__(self):
        self.link_handler = LinkDBHandler()
        self.tag_handler = TagDBHandler()
        self.archive_link_handler = ArchiveLinkDBHandler()
        self.tag_service = TagService()

    async def list_public(
        self, page: int, *, db: AsyncSession
    ) -> tuple[list[Link], int]:
        return await self.link_handler.get_public_page(
            page, settings.page_size, db=db
        )

    async def _new_hash(self, *, db: AsyncSession) -> str:
        for _ in range(MAX_HASH_ATTEMPTS):
            candidate = generate_hash()
            if not await self.link_handler.hash_exists(candidate, db=db):
                return candidate
            logger.warning(f"Link hash collision on '{candidate}', regenerating")
        raise RuntimeError("Could not generate a unique link hash")

    async def create(
        self, actor: User, payload: LinkPayload, *, db: AsyncSession
    ) -> Link:
        await self.tag_service.validate_references(
            payload.tags, payload.visibility, db=db
        )

        data = {
            "hash": await self._new_hash(db=db),
            "user_id": actor.id,
            "title": payload.title,
            "slug": await self.tag_service.unique_slug(Link, payload.title, db=db),
            "url": payload.url,
            "visibility_id": payload.visibility,
        }
        if payload.description:
            data["description"] = payload.description
            data["excerpt"] = make_excerpt(payload.description)

        async with atomic(db):
            link = await self.link_handler.create(data, db=db)
            await self.tag_service.attach_tags(link, payload.tags, db=db)

        logger.info(f"User {actor.id} created link {link.id} ({link.hash})")
        return await self.link_handler.reload(link.id, db=db)

    def show(self, actor: User | None, link: Link) -> Link:
        authorize(actor, LinkAction.VIEW, link)
        return link

    async def update(
        self, actor: User, link: Link, body: dict[str, Any], *, db: AsyncSession
    ) -> Link:
        authorize(actor, LinkAction.UPDATE, link)
        payload = validate_payload(LinkPayload, body)
        await self.tag_service.validate_references(
            payload.tags, payload.visibility, db=db
        )

        changes = {
            "title": payload.title,
            "slug": await self.tag_service.unique_slug(
                Link, payload.title, exclude_id=link.id, db=db
            ),
            "url": payload.url,
            "visibility_id": payload.visibility,
        }
        if payload.description:
            changes["description"] = payload.description
            changes["excerpt"] = make_excerpt(payload.description)

        await self.tag_service.replace_tags(link, payload.tags, changes, db=db)
        return await self.link_handler.reload(link.id, db=db)

    async def delete(self, actor: User, link: Link, *, db: AsyncSession) -> None:
        authorize(actor, LinkAction.DELETE, link)
        async with atomic(db):
            await self.tag_handler.detach_all(link, db=db)
            await self.archive_link_handler.remove_for_link(link.id, db=db)
            await self.link_handler.remove(link, db=db)
        logger.info(f"User {actor.id} deleted link {link.id}")

    async def visit(self, actor: User | None, link: Link, *, db: AsyncSession) -> str:
        """Count one view and return the destination URL."""
        authorize(actor, LinkAction.VISIT, link)
        async with atomic(db):
            await self.link_handler.increment_views(link.id, db=db)
        return link.url
