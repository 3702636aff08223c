"""
User Service

Registration and login. Both return the issued token together with the
public projection of the user; the password hash never leaves this module.
"""

import asyncio
import logging
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tomato.core.config import Settings
from tomato.core.exceptions import AuthenticationError, ConflictError, ValidationError
from tomato.core.security import (
    MAX_PASSWORD_BYTES,
    create_token,
    hash_password,
    password_too_long,
    verify_password,
)
from tomato.models import User
from tomato.schemas import AuthResponse, LoginRequest, RegisterRequest, UserPublic

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


async def find_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


def _auth_response(user: User, settings: Settings) -> AuthResponse:
    return AuthResponse(
        token=create_token(user.id, settings),
        user=UserPublic.model_validate(user),
    )


async def register_user(
    db: AsyncSession,
    payload: RegisterRequest,
    settings: Settings,
) -> AuthResponse:
    """
    Register a new user and issue a token.

    Raises:
        ValidationError: Missing field, malformed email, short or overlong password
        ConflictError: Email already registered
    """
    name = (payload.name or "").strip()
    email = (payload.email or "").strip()
    password = payload.password or ""

    if not name or not email or not password:
        raise ValidationError("Name, email, and password are required.")

    if await find_user_by_email(db, email) is not None:
        raise ConflictError("User already exists.")

    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email.")

    if len(password) < settings.min_password_length:
        raise ValidationError(
            f"Password must be at least {settings.min_password_length} characters long."
        )

    if password_too_long(password):
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long.")

    hashed = await asyncio.to_thread(hash_password, password, settings.bcrypt_rounds)

    user = User(name=name, email=normalize_email(email), password=hashed, cart_data={})
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise ConflictError("User already exists.")
    await db.refresh(user)

    logger.info(f"User #{user.id} registered")
    return _auth_response(user, settings)


async def login_user(
    db: AsyncSession,
    payload: LoginRequest,
    settings: Settings,
) -> AuthResponse:
    """
    Check credentials and issue a token.

    Unknown email and wrong password raise the same error.

    Raises:
        ValidationError: Email or password missing
        AuthenticationError: Credentials do not match
    """
    email = (payload.email or "").strip()
    password = payload.password or ""

    if not email or not password:
        raise ValidationError("Email and password are required.")

    user = await find_user_by_email(db, email)
    stored_hash = user.password if user is not None else None

    if not await asyncio.to_thread(verify_password, password, stored_hash, settings.bcrypt_rounds):
        logger.info("Login failed")
        raise AuthenticationError(INVALID_CREDENTIALS)

    logger.info(f"User #{user.id} logged in")
    return _auth_response(user, settings)
