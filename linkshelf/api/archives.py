"""
Archive API routes: archive CRUD plus membership of links.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.config import settings
from linkshelf.db import get_app_db
from linkshelf.dependencies.auth import get_current_user, get_current_user_optional
from linkshelf.dependencies.resources import get_archive_by_slug
from linkshelf.dependencies.validation import json_body, parse_body
from linkshelf.models import Archive, User
from linkshelf.schemas import (
    ArchiveEnvelope,
    ArchivePayload,
    ArchiveRead,
    DeletedResponse,
    LinkCollection,
    LinkRead,
    Page,
    SuccessResponse,
)
from linkshelf.services.archive_service import ArchiveService
from linkshelf.services.membership_service import MembershipService
from linkshelf.utils.pagination import request_path

router = APIRouter(prefix="/archives", tags=["Archives"])


@router.get("", response_model=Page[ArchiveRead])
async def list_archives(
    request: Request,
    page: int = Query(1, ge=1, le=2**31 - 1, description="1-based page number"),
    db: AsyncSession = Depends(get_app_db),
    archive_service: ArchiveService = Depends(),
):
    """Public archives that contain at least one link."""
    archives, total = await archive_service.list_public(page, db=db)
    return Page[ArchiveRead].build(
        [ArchiveRead.from_archive(archive) for archive in archives],
        total=total,
        page=page,
        per_page=settings.page_size,
        path=request_path(request),
    )


@router.post("", response_model=ArchiveEnvelope, status_code=status.HTTP_201_CREATED)
async def create_archive(
    current_user: User = Depends(get_current_user),
    payload: ArchivePayload = Depends(parse_body(ArchivePayload)),
    db: AsyncSession = Depends(get_app_db),
    archive_service: ArchiveService = Depends(),
):
    archive = await archive_service.create(current_user, payload, db=db)
    return ArchiveEnvelope(archive=ArchiveRead.from_archive(archive))


@router.get("/links/{slug}", response_model=LinkCollection)
async def list_archive_links(
    archive: Archive = Depends(get_archive_by_slug),
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_app_db),
    membership_service: MembershipService = Depends(),
):
    """The ten most recently added links of the archive."""
    links = await membership_service.list_links(current_user, archive, db=db)
    return LinkCollection(data=[LinkRead.from_link(link) for link in links])


@router.get("/{slug}", response_model=ArchiveEnvelope)
async def show_archive(
    archive: Archive = Depends(get_archive_by_slug),
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_app_db),
    archive_service: ArchiveService = Depends(),
):
    archive = await archive_service.show(current_user, archive, db=db)
    return ArchiveEnvelope(archive=ArchiveRead.from_archive(archive))


@router.put("/{slug}", response_model=ArchiveEnvelope)
async def update_archive(
    current_user: User = Depends(get_current_user),
    archive: Archive = Depends(get_archive_by_slug),
    body: Any = Depends(json_body),
    db: AsyncSession = Depends(get_app_db),
    archive_service: ArchiveService = Depends(),
):
    archive = await archive_service.update(current_user, archive, body, db=db)
    return ArchiveEnvelope(archive=ArchiveRead.from_archive(archive))


@router.delete("/{slug}", response_model=DeletedResponse)
async def delete_archive(
    current_user: User = Depends(get_current_user),
    archive: Archive = Depends(get_archive_by_slug),
    db: AsyncSession = Depends(get_app_db),
    archive_service: ArchiveService = Depends(),
):
    await archive_service.delete(current_user, archive, db=db)
    return DeletedResponse(message="Archive deleted successfully")


@router.post(
    "/{slug}/add/{hash}",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_link_to_archive(
    hash: str,
    current_user: User = Depends(get_current_user),
    archive: Archive = Depends(get_archive_by_slug),
    db: AsyncSession = Depends(get_app_db),
    membership_service: MembershipService = Depends(),
):
    await membership_service.add_link(current_user, archive, hash, db=db)
    return SuccessResponse(message="Added new link to archive successfully.")


@router.delete("/{slug}/del/{hash}", response_model=SuccessResponse)
async def remove_link_from_archive(
    hash: str,
    current_user: User = Depends(get_current_user),
    archive: Archive = Depends(get_archive_by_slug),
    db: AsyncSession = Depends(get_app_db),
    membership_service: MembershipService = Depends(),
):
    await membership_service.remove_link(current_user, archive, hash, db=db)
    return SuccessResponse(message="Link deleted from archive successfully.")
