"""
User profile API routes.

Profile reads are public; banner and profile updates are multipart forms
accepted only from the profile's owner.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.db import get_app_db
from linkshelf.dependencies.auth import get_current_user, get_current_user_optional
from linkshelf.dependencies.resources import get_user_by_username
from linkshelf.models import User
from linkshelf.policies import is_owner
from linkshelf.schemas import UserEnvelope, UserProfileResponse, UserRead
from linkshelf.services.profile_service import ProfileService

router = APIRouter(prefix="/user", tags=["Users"])


def _profile(actor: User | None, user: User) -> UserProfileResponse:
    return UserProfileResponse(owner=is_owner(actor, user.id), user=UserRead.from_user(user))


@router.get("", response_model=UserEnvelope)
async def get_authenticated_user(current_user: User = Depends(get_current_user)):
    return UserEnvelope(user=UserRead.from_user(current_user))


@router.get("/{username}", response_model=UserProfileResponse)
async def get_user_profile(
    user: User = Depends(get_user_by_username),
    current_user: User | None = Depends(get_current_user_optional),
):
    """Public profile; ``owner`` tells whether the caller is that user."""
    return _profile(current_user, user)


@router.put("/{username}/update-banner", response_model=UserProfileResponse)
async def update_banner(
    current_user: User = Depends(get_current_user),
    user: User = Depends(get_user_by_username),
    banner: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_app_db),
    profile_service: ProfileService = Depends(),
):
    user = await profile_service.update_banner(current_user, user, banner, db=db)
    return _profile(current_user, user)


@router.put("/{username}/update-profile", response_model=UserProfileResponse)
async def update_profile(
    current_user: User = Depends(get_current_user),
    user: User = Depends(get_user_by_username),
    name: str | None = Form(None),
    new_username: str | None = Form(None, alias="username"),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_app_db),
    profile_service: ProfileService = Depends(),
):
    user = await profile_service.update_profile(
        current_user, user, {"name": name, "username": new_username}, image, db=db
    )
    return _profile(current_user, user)
