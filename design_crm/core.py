"""Application configuration and settings management.

This module defines the application settings loaded from environment
variables and provides helper functions for accessing cached settings,
the outbound mail configuration and the logging setup.
"""

import logging
from functools import lru_cache
from typing import List

from fastapi_mail import ConnectionConfig
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Attributes:
        DATABASE_URL: Database connection string.
        SECRET_KEY: Key used to verify identity provider session tokens.
        ALGORITHM: Algorithm the session tokens are signed with.
        AUTH_AUDIENCE: Expected ``aud`` claim, verified only when set.
        AUTH_ISSUER: Expected ``iss`` claim, verified only when set.
        SESSION_EXPIRE_MINUTES: Lifetime of locally minted session tokens.
        LOGIN_URL: Entry point clients follow to log in again after a 401.
        IDP_LOGIN_URL: Identity provider login page.
        IDP_LOGOUT_URL: Identity provider logout page.
        ALLOWED_ORIGINS: Allowed origins for CORS.
        FROM_EMAIL: Default sender for outgoing emails.
        SMTP_USER: SMTP username.
        SMTP_PASSWORD: SMTP password.
        SMTP_PORT: SMTP server port.
        SMTP_HOST: SMTP server host.
        SMTP_STARTTLS: Upgrade the SMTP connection with STARTTLS.
        SMTP_SSL_TLS: Connect to the SMTP server over TLS.
        MAIL_SUPPRESS_SEND: Build messages without handing them to SMTP.
        LOG_LEVEL: Root logging level.
    """

    DATABASE_URL: str = "sqlite:///./design_crm.db"
    SECRET_KEY: str = "dev-secret"
    ALGORITHM: str = "HS256"
    AUTH_AUDIENCE: str | None = None
    AUTH_ISSUER: str | None = None
    SESSION_EXPIRE_MINUTES: int = 60 * 24 * 7
    LOGIN_URL: str = "/api/login"
    IDP_LOGIN_URL: str = "https://replit.com/oidc/auth"
    IDP_LOGOUT_URL: str = "https://replit.com/oidc/session/end"
    ALLOWED_ORIGINS: List[str] = ["*"]
    FROM_EMAIL: str = "noreply@designcrm.com"
    SMTP_USER: str = "user"
    SMTP_PASSWORD: str = "password"
    SMTP_PORT: int = 1025
    SMTP_HOST: str = "localhost"
    SMTP_STARTTLS: bool = False
    SMTP_SSL_TLS: bool = False
    MAIL_SUPPRESS_SEND: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    The settings object is cached to prevent reloading environment
    variables multiple times during application lifetime.
    """

    return Settings()


def get_mail_config(mail_from: str | None = None) -> ConnectionConfig:
    """Create and return email configuration for FastAPI-Mail.

    Args:
        mail_from (str | None): Sender address for this message. Falls back
            to ``FROM_EMAIL`` when omitted.

    Returns:
        ConnectionConfig: Configured email connection settings.
    """

    settings = get_settings()
    return ConnectionConfig(
        MAIL_USERNAME=settings.SMTP_USER,
        MAIL_PASSWORD=settings.SMTP_PASSWORD,
        MAIL_FROM=mail_from or settings.FROM_EMAIL,
        MAIL_PORT=settings.SMTP_PORT,
        MAIL_SERVER=settings.SMTP_HOST,
        MAIL_STARTTLS=settings.SMTP_STARTTLS,
        MAIL_SSL_TLS=settings.SMTP_SSL_TLS,
        USE_CREDENTIALS=bool(settings.SMTP_USER),
        SUPPRESS_SEND=int(settings.MAIL_SUPPRESS_SEND),
    )


def configure_logging() -> None:
    """Configure the root logger from ``LOG_LEVEL``."""

    logging.basicConfig(level=get_settings().LOG_LEVEL.upper(), format=LOG_FORMAT)
