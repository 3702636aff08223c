"""User API router: registration and login."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tomato.core.config import Settings
from tomato.dependencies import get_db, get_settings
from tomato.schemas import AuthResponse, ErrorResponse, LoginRequest, RegisterRequest
from tomato.services import users

router = APIRouter(prefix="/api/user", tags=["User"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Create an account and return a token for it."""
    return await users.register_user(db, payload, settings)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    return await users.login_user(db, payload, settings)
