# Authentication API routes for registration, login and logout

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.db import get_app_db
from linkshelf.dependencies.auth import get_current_user
from linkshelf.dependencies.validation import parse_body
from linkshelf.models import User
from linkshelf.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    SuccessResponse,
    UserRead,
)
from linkshelf.services.auth_service import AuthService

router = APIRouter(tags=["Authentication"])


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
async def register_user(
    payload: RegisterRequest = Depends(parse_body(RegisterRequest)),
    db: AsyncSession = Depends(get_app_db),
    auth_service: AuthService = Depends(),
):
    """Create an account and sign it in."""
    user, token = await auth_service.register(payload, db=db)
    return AuthResponse(user=UserRead.from_user(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login_user(
    request: Request,
    payload: LoginRequest = Depends(parse_body(LoginRequest)),
    db: AsyncSession = Depends(get_app_db),
    auth_service: AuthService = Depends(),
):
    """Authenticate with email and password and return a bearer token."""
    client_ip = request.client.host if request.client else None
    user, token = await auth_service.login(payload, client_ip, db=db)
    return AuthResponse(user=UserRead.from_user(user), token=token)


@router.post("/logout", response_model=SuccessResponse, response_model_exclude_none=True)
async def logout_user(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    auth_service: AuthService = Depends(),
):
    """Revoke every token of the current user."""
    await auth_service.logout(current_user, db=db)
    return SuccessResponse()
