"""
Tag association lifecycle for links and archives.

Tags are attached through one join table per entity type. An update replaces
the whole set: old rows are deleted, new rows inserted and the entity's other
changed fields written, all in a single transaction.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.db import atomic
from linkshelf.db_handlers import ArchiveDBHandler, LinkDBHandler, TagDBHandler
from linkshelf.exceptions import ValidationProblem
from linkshelf.models import Archive, Link, Tag, Visibility
from linkshelf.utils.logger import setup_logger
from linkshelf.utils.text_processing import slugify

logger = setup_logger("tag_service")

EMPTY_SLUG = "untitled"


class TagService:
    def __init__(self):
        self.tag_handler = TagDBHandler()
        self._slug_handlers = {
            Link: LinkDBHandler(),
            Archive: ArchiveDBHandler(),
        }

    async def list_tags(self, *, db: AsyncSession) -> list[Tag]:
        return await self.tag_handler.list_all(db=db)

    async def validate_references(
        self, tag_ids: list[int], visibility_id: int, *, db: AsyncSession
    ) -> None:
        """
        Reject unknown or repeated tag ids and unknown visibility ids.

        Problems are keyed by position (``tags.0``, ``tags.1``, ...) so the
        client can point at the offending entry.
        """
        problems: dict[str, list[str]] = {}
        existing = await self.tag_handler.existing_ids(tag_ids, db=db)
        seen: set[int] = set()
        for index, tag_id in enumerate(tag_ids):
            key = f"tags.{index}"
            if tag_id in seen:
                problems.setdefault(key, []).append(
                    f"The {key} field has a duplicate value."
                )
            elif tag_id not in existing:
                problems.setdefault(key, []).append(f"The selected {key} is invalid.")
            seen.add(tag_id)

        if await db.get(Visibility, visibility_id) is None:
            problems["visibility"] = ["The selected visibility is invalid."]

        if problems:
            raise ValidationProblem(problems)

    async def unique_slug(
        self,
        entity_type: type[Link] | type[Archive],
        title: str,
        *,
        exclude_id: int | None = None,
        db: AsyncSession,
    ) -> str:
        """Slug of ``title`` made unique in the entity's table with -1, -2, ... suffixes."""
        handler = self._slug_handlers[entity_type]
        base = slugify(title) or EMPTY_SLUG
        candidate, suffix = base, 0
        while await handler.slug_exists(candidate, exclude_id=exclude_id, db=db):
            suffix += 1
            candidate = f"{base}-{suffix}"
        return candidate

    async def attach_tags(
        self, entity: Link | Archive, tag_ids: list[int], *, db: AsyncSession
    ) -> None:
        """Add associations for a freshly created entity; the caller owns the transaction."""
        await self.tag_handler.attach(entity, tag_ids, db=db)

    async def replace_tags(
        self,
        entity: Link | Archive,
        tag_ids: list[int],
        changes: dict[str, Any],
        *,
        db: AsyncSession,
    ) -> None:
        """
        Swap the entity's tag set for ``tag_ids`` and persist ``changes``.

        Either every step lands or none does. After this returns the entity's
        associations are exactly ``tag_ids``.
        """
        async with atomic(db):
            await self.tag_handler.detach_all(entity, db=db)
            await self.tag_handler.attach(entity, tag_ids, db=db)
            for field, value in changes.items():
                setattr(entity, field, value)
            db.add(entity)
            await db.flush()

        logger.info(
            f"Replaced tags of {type(entity).__name__} {entity.id} with {tag_ids}"
        )
