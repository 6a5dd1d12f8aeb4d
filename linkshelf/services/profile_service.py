from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.db import atomic
from linkshelf.db_handlers import UserDBHandler
from linkshelf.exceptions import ValidationProblem
from linkshelf.models import User
from linkshelf.policies import ProfileAction, authorize
from linkshelf.schemas import ProfileUpdate
from linkshelf.services.media_storage import MediaStorage
from linkshelf.utils.logger import setup_logger
from linkshelf.utils.validation import validate_payload

logger = setup_logger("profile_service")


class ProfileService:
    def __init__(self):
        self.user_handler = UserDBHandler()
        self.storage = MediaStorage()

    async def _store_image(
        self,
        user: User,
        attribute: str,
        kind: str,
        data: bytes,
        extension: str,
        *,
        db: AsyncSession,
        changes: dict | None = None,
    ) -> User:
        """Save the new file, point the user at it, then drop the old file."""
        previous = getattr(user, attribute)
        new_path = self.storage.save(kind, data, extension)
        update = dict(changes or {})
        update[attribute] = new_path
        try:
            async with atomic(db):
                await self.user_handler.update(user, update, db=db)
        except Exception:
            self.storage.delete(new_path)
            raise
        self.storage.delete(previous)
        return user

    async def update_banner(
        self, actor: User, user: User, banner: UploadFile | None, *, db: AsyncSession
    ) -> User:
        authorize(actor, ProfileAction.UPDATE_BANNER, user)
        if banner is None or not banner.filename:
            raise ValidationProblem.single("banner", "The banner field is required.")

        data = await banner.read()
        extension = self.storage.validate_image("banner", banner.filename, data)
        await self._store_image(user, "banner", "banner", data, extension, db=db)
        logger.info(f"User {user.id} replaced their banner")
        return user

    async def update_profile(
        self,
        actor: User,
        user: User,
        fields: dict,
        image: UploadFile | None,
        *,
        db: AsyncSession,
    ) -> User:
        """Apply whichever of name, username and avatar image were sent."""
        authorize(actor, ProfileAction.UPDATE_PROFILE, user)

        # Empty form fields mean "leave unchanged".
        submitted = {key: value for key, value in fields.items() if value}
        problems: dict[str, list[str]] = {}
        changes: dict = {}
        try:
            payload = validate_payload(ProfileUpdate, submitted)
            changes = payload.model_dump(exclude_none=True)
        except ValidationProblem as e:
            problems.update(e.problems)

        username = changes.get("username")
        if username and await self.user_handler.username_taken(
            username, exclude_id=user.id, db=db
        ):
            problems["username"] = ["The username has already been taken."]

        image_data, extension = None, None
        if image is not None and image.filename:
            image_data = await image.read()
            try:
                extension = self.storage.validate_image("image", image.filename, image_data)
            except ValidationProblem as e:
                problems.update(e.problems)

        if problems:
            raise ValidationProblem(problems)

        if image_data is not None:
            await self._store_image(
                user, "image", "avatar", image_data, extension, db=db, changes=changes
            )
        elif changes:
            async with atomic(db):
                await self.user_handler.update(user, changes, db=db)

        logger.info(f"User {user.id} updated profile fields {sorted(changes)}")
        return user
