"""
Archive-Link membership.

Adding checks, in order: the actor owns the archive, the link exists, it is
not already a member, and it is either public or the actor's own. The unique
(archive_id, link_id) constraint settles concurrent adds of the same link.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.config import settings
from linkshelf.db import atomic
from linkshelf.db_handlers import ArchiveLinkDBHandler, LinkDBHandler
from linkshelf.exceptions import ConflictError, NotFoundError
from linkshelf.models import Archive, Link, User, VisibilityType
from linkshelf.models.base import utc_now
from linkshelf.policies import ArchiveAction, authorize, is_owner
from linkshelf.utils.logger import setup_logger

logger = setup_logger("membership_service")

LINK_NOT_FOUND = "Link not found"
ALREADY_MEMBER = "Cannot add link because already exist."
PRIVATE_LINK = "Cannot add link because link is private"


class MembershipService:
    def __init__(self):
        self.link_handler = LinkDBHandler()
        self.archive_link_handler = ArchiveLinkDBHandler()

    async def add_link(
        self, actor: User, archive: Archive, hash: str, *, db: AsyncSession
    ) -> None:
        authorize(actor, ArchiveAction.ADD_LINK, archive)

        link = await self.link_handler.get_by_attributes(hash=hash, db=db)
        if link is None:
            raise NotFoundError(LINK_NOT_FOUND)

        if await self.archive_link_handler.is_member(archive.id, link.id, db=db):
            raise ConflictError(ALREADY_MEMBER)

        if link.visibility_id == VisibilityType.PRIVATE and not is_owner(
            actor, link.user_id
        ):
            raise ConflictError(PRIVATE_LINK)

        # A rollback expires loaded instances, so keep the ids for logging.
        archive_id, link_id = archive.id, link.id
        try:
            async with atomic(db):
                await self.archive_link_handler.create(
                    {
                        "archive_id": archive_id,
                        "link_id": link_id,
                        "created_at": utc_now(),
                    },
                    db=db,
                )
        except IntegrityError:
            logger.info(
                f"Concurrent add of link {link_id} to archive {archive_id} lost the race"
            )
            raise ConflictError(ALREADY_MEMBER) from None

        logger.info(f"User {actor.id} added link {link_id} to archive {archive_id}")

    async def remove_link(
        self, actor: User, archive: Archive, hash: str, *, db: AsyncSession
    ) -> None:
        authorize(actor, ArchiveAction.DELETE_LINK, archive)

        link = await self.archive_link_handler.get_member_link(archive.id, hash, db=db)
        if link is None:
            raise NotFoundError(LINK_NOT_FOUND)

        async with atomic(db):
            await self.archive_link_handler.remove_membership(
                archive.id, link.id, db=db
            )
        logger.info(
            f"User {actor.id} removed link {link.id} from archive {archive.id}"
        )

    async def list_links(
        self, actor: User | None, archive: Archive, *, db: AsyncSession
    ) -> list[Link]:
        """Most recently added links; the links' own visibility is not re-checked."""
        authorize(actor, ArchiveAction.GET_LINKS, archive)
        return await self.archive_link_handler.get_recent_links(
            archive.id, settings.archive_links_limit, db=db
        )
