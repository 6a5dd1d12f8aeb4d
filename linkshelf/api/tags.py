from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.db import get_app_db
from linkshelf.schemas import TagCollection
from linkshelf.services.tag_service import TagService

router = APIRouter(tags=["Tags"])


@router.get("/tags", response_model=TagCollection)
async def list_tags(
    db: AsyncSession = Depends(get_app_db),
    tag_service: TagService = Depends(),
):
    """Every tag, ordered by id."""
    return TagCollection.from_tags(await tag_service.list_tags(db=db))
