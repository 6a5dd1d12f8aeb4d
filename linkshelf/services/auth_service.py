"""
Registration, login and logout.

Login is throttled per (email, client ip): every wrong password counts one
attempt, and once the ceiling is reached inside the decay window further
attempts are refused until the oldest one expires.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.config import settings
from linkshelf.db import atomic
from linkshelf.db_handlers import AccessTokenDBHandler, UserDBHandler
from linkshelf.exceptions import RateLimitedError, ValidationProblem
from linkshelf.models import User
from linkshelf.schemas import LoginRequest, RegisterRequest
from linkshelf.utils.auth import (
    create_access_token,
    get_password_hash,
    new_token_id,
    verify_password,
)
from linkshelf.utils.logger import setup_logger
from linkshelf.utils.rate_limit import RateLimiter, login_throttle_key

logger = setup_logger("auth_service")

login_limiter = RateLimiter(settings.login_decay_seconds)

UNKNOWN_EMAIL = "The selected email is invalid."
BAD_CREDENTIALS = "These credentials do not match our records."


class AuthService:
    def __init__(self):
        self.user_handler = UserDBHandler()
        self.token_handler = AccessTokenDBHandler()
        self.limiter = login_limiter

    async def issue_token(self, user: User, *, db: AsyncSession) -> str:
        """Store a new token id for ``user`` and return the signed bearer token."""
        jti = new_token_id()
        await self.token_handler.create({"user_id": user.id, "jti": jti}, db=db)
        return create_access_token(data={"sub": str(user.id), "jti": jti})

    async def register(
        self, payload: RegisterRequest, *, db: AsyncSession
    ) -> tuple[User, str]:
        problems: dict[str, list[str]] = {}
        if await self.user_handler.username_taken(payload.username, db=db):
            problems["username"] = ["The username has already been taken."]
        if await self.user_handler.email_taken(payload.email, db=db):
            problems["email"] = ["The email has already been taken."]
        if problems:
            raise ValidationProblem(problems)

        async with atomic(db):
            user = await self.user_handler.create(
                {
                    "name": payload.name,
                    "username": payload.username,
                    "email": payload.email,
                    "hashed_password": get_password_hash(payload.password),
                },
                db=db,
            )
            token = await self.issue_token(user, db=db)

        logger.info(f"Registered user {user.id} ({user.username})")
        return user, token

    async def login(
        self, payload: LoginRequest, client_ip: str | None, *, db: AsyncSession
    ) -> tuple[User, str]:
        user = await self.user_handler.get_user_by_email(payload.email, db=db)
        if user is None:
            raise ValidationProblem.single("email", UNKNOWN_EMAIL)

        key = login_throttle_key(payload.email, client_ip)
        if self.limiter.too_many_attempts(key, settings.login_max_attempts):
            retry_after = self.limiter.available_in(key)
            logger.warning(f"Login throttled for '{key}', retry in {retry_after}s")
            raise RateLimitedError(retry_after)

        if not verify_password(payload.password, user.hashed_password):
            attempts = self.limiter.hit(key)
            logger.info(f"Failed login for user {user.id} (attempt {attempts})")
            raise ValidationProblem.single("email", BAD_CREDENTIALS)

        self.limiter.clear(key)
        async with atomic(db):
            token = await self.issue_token(user, db=db)
        return user, token

    async def logout(self, actor: User, *, db: AsyncSession) -> None:
        """Revoke every token of the actor, not only the one in use."""
        async with atomic(db):
            await self.token_handler.revoke_all_for_user(actor.id, db=db)
