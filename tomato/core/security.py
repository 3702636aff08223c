"""
Credential handling: bcrypt password hashes and signed access tokens.
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import bcrypt
from jose import JWTError, jwt

from tomato.core.config import Settings
from tomato.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# bcrypt only reads this many bytes of a password
MAX_PASSWORD_BYTES = 72


@lru_cache()
def _dummy_hash(rounds: int) -> bytes:
    """Hash checked when the email is unknown, at the same cost as real hashes."""
    return bcrypt.hashpw(b"tomato-dummy-password", bcrypt.gensalt(rounds=rounds))


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = 10) -> str:
    """
    Return a salted bcrypt hash of the password.

    Raises:
        ValueError: Password longer than MAX_PASSWORD_BYTES once encoded
    """
    if password_too_long(password):
        raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str | None, rounds: int = 10) -> bool:
    """
    Compare a plain password with a stored hash.

    When no hash is given, or the password is too long to have been stored,
    a dummy comparison at the given cost still runs and False is returned.
    """
    encoded = password.encode("utf-8")
    if hashed is None or len(encoded) > MAX_PASSWORD_BYTES:
        bcrypt.checkpw(encoded[:MAX_PASSWORD_BYTES], _dummy_hash(rounds))
        return False
    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_token(user_id: int, settings: Settings, expires_delta: timedelta | None = None) -> str:
    """
    Issue a signed access token for a user.

    Args:
        user_id: Identifier stored in the "id" claim
        settings: Source of the signing secret, algorithm and lifetime
        expires_delta: Override for the configured lifetime

    Returns:
        Encoded token string
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.jwt_expire_days))
    claims = {"id": user_id, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> int:
    """
    Verify a token and return the user id it was issued for.

    Raises:
        AuthenticationError: Bad signature, expired, or missing "id" claim
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthenticationError()

    user_id = payload.get("id")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise AuthenticationError()
    return user_id
