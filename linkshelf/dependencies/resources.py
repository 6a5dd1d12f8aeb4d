"""
Path-parameter resolvers. Each looks an entity up by its natural key and
raises a 404 problem when nothing matches.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.db import get_app_db
from linkshelf.db_handlers import ArchiveDBHandler, LinkDBHandler, UserDBHandler
from linkshelf.exceptions import NotFoundError
from linkshelf.models import Archive, Link, User


async def get_link_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_app_db),
    link_db_handler: LinkDBHandler = Depends(),
) -> Link:
    link = await link_db_handler.get_by_slug(slug, db=db)
    if link is None:
        raise NotFoundError("Link not found")
    return link


async def get_link_by_hash(
    hash: str,
    db: AsyncSession = Depends(get_app_db),
    link_db_handler: LinkDBHandler = Depends(),
) -> Link:
    link = await link_db_handler.get_by_hash(hash, db=db)
    if link is None:
        raise NotFoundError("Link not found")
    return link


async def get_archive_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_app_db),
    archive_db_handler: ArchiveDBHandler = Depends(),
) -> Archive:
    archive = await archive_db_handler.get_by_slug(slug, db=db)
    if archive is None:
        raise NotFoundError("Archive not found")
    return archive


async def get_user_by_username(
    username: str,
    db: AsyncSession = Depends(get_app_db),
    user_db_handler: UserDBHandler = Depends(),
) -> User:
    user = await user_db_handler.get_user_by_username(username, db=db)
    if user is None:
        raise NotFoundError("User not found")
    return user
