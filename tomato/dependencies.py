"""Dependency injection for handlers: context, sessions, auth gate."""
import logging
from typing import AsyncIterator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tomato.core.config import Settings
from tomato.core.context import AppContext
from tomato.core.exceptions import AuthenticationError, PaymentUnavailableError
from tomato.core.security import decode_token
from tomato.services.payment import BasePaymentGateway

logger = logging.getLogger(__name__)


def get_context(request: Request) -> AppContext:
    """Get the application context from app state."""
    return request.app.state.context


def get_settings(context: AppContext = Depends(get_context)) -> Settings:
    return context.settings


async def get_db(context: AppContext = Depends(get_context)) -> AsyncIterator[AsyncSession]:
    """
    Yield a database session for one request and ensure cleanup.
    """
    async with context.session_maker() as session:
        yield session


def get_payment_gateway(context: AppContext = Depends(get_context)) -> BasePaymentGateway:
    """Payment gateway for routes that cannot work without one."""
    gateway = context.payment_gateway
    if not gateway.available:
        logger.warning("Payment route called while payments are disabled")
        raise PaymentUnavailableError()
    return gateway


def extract_token(authorization: Optional[str], token: Optional[str]) -> Optional[str]:
    """
    Pick the credential from either "Authorization: Bearer <t>" or the
    legacy "token" header.
    """
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
        return None
    if token and token.strip():
        return token.strip()
    return None


def get_current_user_id(
    authorization: Optional[str] = Header(None),
    token: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> int:
    """
    Verify the request credential and return the user id it carries.

    Raises:
        AuthenticationError: Missing, malformed, expired or forged credential
    """
    credential = extract_token(authorization, token)
    if credential is None:
        logger.info("Authentication failed: no usable credential")
        raise AuthenticationError()

    try:
        return decode_token(credential, settings)
    except AuthenticationError:
        logger.info("Authentication failed: token rejected")
        raise
