"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.

Secrets are never defaulted: a missing DATABASE_URL or JWT_SECRET makes
Settings() fail validation so the service refuses to start. Razorpay keys are
optional; without them only the payment routes are disabled.

Usage:
    from tomato.core.config import get_settings
    from tomato.services.payment import build_payment_gateway

    settings = get_settings()
    gateway = build_payment_gateway(settings)
    if gateway.available:
        ...
"""

import logging
import sys
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_FRONTEND_ORIGINS = (
    "http://localhost:5173,"
    "http://localhost:5174,"
    "https://tomato-frontend-git-main-ayushnegi369s-projects.vercel.app"
)

DEFAULT_FRONTEND_ORIGIN_REGEX = (
    r"^(https?://localhost:(5173|5174)"
    r"|https://tomato-frontend-[a-z0-9-]+-ayushnegi369s-projects\.vercel\.app)$"
)


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local development
        STAGING: Pre-production with gateway test keys
        PRODUCTION: Live environment
    """
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Sensitive values (JWT secret, Razorpay keys) should NEVER be committed
    to version control.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Tomato Food Ordering API",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=4000,
        description="API server port"
    )
    uploads_dir: str = Field(
        default="uploads",
        description="Directory served under /images"
    )

    # ==========================================================================
    # DATABASE
    # ==========================================================================

    database_url: str = Field(
        ...,
        description="Async SQLAlchemy connection URL"
    )

    # ==========================================================================
    # AUTHENTICATION
    # ==========================================================================

    jwt_secret: str = Field(
        ...,
        description="Secret used to sign access tokens"
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="Token signing algorithm"
    )
    jwt_expire_days: int = Field(
        default=7,
        ge=1,
        description="Token lifetime in days"
    )
    bcrypt_rounds: int = Field(
        default=10,
        ge=4,
        le=31,
        description="bcrypt cost factor"
    )
    min_password_length: int = Field(
        default=8,
        ge=1,
        description="Minimum accepted password length"
    )

    # ==========================================================================
    # RAZORPAY PAYMENT GATEWAY
    # ==========================================================================

    razorpay_key_id: Optional[str] = Field(
        default=None,
        description="Razorpay API key id (rzp_live_... or rzp_test_...)"
    )
    razorpay_key_secret: Optional[str] = Field(
        default=None,
        description="Razorpay API key secret, also used for signature checks"
    )
    razorpay_currency: str = Field(
        default="INR",
        description="Default currency for gateway orders"
    )

    # ==========================================================================
    # CORS
    # ==========================================================================

    frontend_origin: str = Field(
        default=DEFAULT_FRONTEND_ORIGINS,
        description="Comma-separated list of allowed frontend origins"
    )
    frontend_origin_regex: Optional[str] = Field(
        default=DEFAULT_FRONTEND_ORIGIN_REGEX,
        description="Pattern for additionally allowed origins (preview deploys)"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    @field_validator("database_url", "jwt_secret")
    @classmethod
    def validate_required_secret(cls, v: str) -> str:
        """Reject blank values for settings that have no safe default."""
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("razorpay_key_id", "razorpay_key_secret", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def payments_enabled(self) -> bool:
        """Both Razorpay credentials are present."""
        return bool(self.razorpay_key_id and self.razorpay_key_secret)

    @property
    def frontend_origins_list(self) -> list[str]:
        """Get allowed origins as a list."""
        return [o.strip() for o in self.frontend_origin.split(",") if o.strip()]

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def missing_payment_config(self) -> list[str]:
        """
        List the Razorpay settings that are not configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []
        if not self.razorpay_key_id:
            missing.append("RAZORPAY_KEY_ID")
        if not self.razorpay_key_secret:
            missing.append("RAZORPAY_KEY_SECRET")
        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Loaded once per process from the environment. Raises
    pydantic.ValidationError when a required secret is missing.

    Returns:
        Settings: Configured application settings
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(settings: Settings, level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        settings: Active settings (DEBUG switches to verbose output)
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("tomato")
