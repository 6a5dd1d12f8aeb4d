"""
Link API routes.

Links are addressed by slug for their owner's CRUD operations and by their
public hash for visits.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.config import settings
from linkshelf.db import get_app_db
from linkshelf.dependencies.auth import get_current_user, get_current_user_optional
from linkshelf.dependencies.resources import get_link_by_hash, get_link_by_slug
from linkshelf.dependencies.validation import json_body, parse_body
from linkshelf.models import Link, User
from linkshelf.schemas import (
    DeletedResponse,
    LinkEnvelope,
    LinkPayload,
    LinkRead,
    Page,
    VisitResponse,
)
from linkshelf.services.link_service import LinkService
from linkshelf.utils.pagination import request_path

router = APIRouter(tags=["Links"])


@router.get("/links", response_model=Page[LinkRead])
async def list_links(
    request: Request,
    page: int = Query(1, ge=1, le=2**31 - 1, description="1-based page number"),
    db: AsyncSession = Depends(get_app_db),
    link_service: LinkService = Depends(),
):
    """Public links, newest first, 20 per page."""
    links, total = await link_service.list_public(page, db=db)
    return Page[LinkRead].build(
        [LinkRead.from_link(link) for link in links],
        total=total,
        page=page,
        per_page=settings.page_size,
        path=request_path(request),
    )


@router.post(
    "/links", response_model=LinkEnvelope, status_code=status.HTTP_201_CREATED
)
async def create_link(
    current_user: User = Depends(get_current_user),
    payload: LinkPayload = Depends(parse_body(LinkPayload)),
    db: AsyncSession = Depends(get_app_db),
    link_service: LinkService = Depends(),
):
    link = await link_service.create(current_user, payload, db=db)
    return LinkEnvelope(link=LinkRead.from_link(link))


@router.get("/links/{slug}", response_model=LinkEnvelope)
async def show_link(
    link: Link = Depends(get_link_by_slug),
    current_user: User | None = Depends(get_current_user_optional),
    link_service: LinkService = Depends(),
):
    link = link_service.show(current_user, link)
    return LinkEnvelope(link=LinkRead.from_link(link))


@router.put("/links/{slug}", response_model=LinkEnvelope)
async def update_link(
    current_user: User = Depends(get_current_user),
    link: Link = Depends(get_link_by_slug),
    body: Any = Depends(json_body),
    db: AsyncSession = Depends(get_app_db),
    link_service: LinkService = Depends(),
):
    """Replace the link's fields and its whole tag set."""
    link = await link_service.update(current_user, link, body, db=db)
    return LinkEnvelope(link=LinkRead.from_link(link))


@router.delete("/links/{slug}", response_model=DeletedResponse)
async def delete_link(
    current_user: User = Depends(get_current_user),
    link: Link = Depends(get_link_by_slug),
    db: AsyncSession = Depends(get_app_db),
    link_service: LinkService = Depends(),
):
    await link_service.delete(current_user, link, db=db)
    return DeletedResponse(message="Link deleted successfully")


@router.get("/g/{hash}", response_model=VisitResponse)
async def visit_link(
    link: Link = Depends(get_link_by_hash),
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_app_db),
    link_service: LinkService = Depends(),
):
    """Count a visit and hand back the destination URL."""
    url = await link_service.visit(current_user, link, db=db)
    return VisitResponse(url=url)
