"""Session verification and the request-scoped authentication context.

Sign-in itself happens at an external OpenID Connect provider. Every
protected request carries the provider's signed session token as a
bearer credential; it is verified here, the matching user row is
upserted, and an :class:`AuthContext` is handed to the route.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from . import crud
from .core import get_settings
from .database import get_db
from .errors import AuthenticationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)
router = APIRouter(prefix="/api", tags=["auth"])


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, resolved once per request."""

    user_id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "AuthContext":
        """
        Build a context from verified token claims.

        Args:
            claims (dict): Decoded token payload.

        Raises:
            AuthenticationError: If the ``sub`` claim is missing.

        Returns:
            AuthContext: Caller identity.
        """
        subject = claims.get("sub")
        if not subject:
            raise AuthenticationError()
        return cls(
            user_id=str(subject),
            email=claims.get("email"),
            first_name=claims.get("first_name"),
            last_name=claims.get("last_name"),
            profile_image_url=claims.get("profile_image_url"),
        )

    def profile(self) -> dict[str, str | None]:
        """Profile fields to store on the user row."""
        return {
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "profile_image_url": self.profile_image_url,
        }


def create_session_token(
    claims: dict[str, Any], expires_delta: timedelta | None = None
) -> str:
    """Sign a session token carrying ``claims`` the way the provider does."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    to_encode = claims.copy()
    to_encode.update(
        {
            "iat": now,
            "exp": now
            + (expires_delta or timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)),
        }
    )
    if settings.AUTH_AUDIENCE:
        to_encode.setdefault("aud", settings.AUTH_AUDIENCE)
    if settings.AUTH_ISSUER:
        to_encode.setdefault("iss", settings.AUTH_ISSUER)
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Verify a session token and return its claims.

    Raises:
        AuthenticationError: If the signature, expiry, audience or issuer
            does not check out.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.AUTH_AUDIENCE,
            issuer=settings.AUTH_ISSUER,
            options={"verify_aud": settings.AUTH_AUDIENCE is not None},
        )
    except JWTError as exc:
        logger.debug("Rejected session token: %s", exc)
        raise AuthenticationError() from exc


def get_auth_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Dependency that authenticates the request and upserts its user."""

    if credentials is None:
        raise AuthenticationError()
    context = AuthContext.from_claims(decode_session_token(credentials.credentials))
    crud.upsert_user(db, context.user_id, **context.profile())
    return context


@router.get("/login", include_in_schema=False)
def login():
    """Send the browser to the identity provider's sign-in page."""
    return RedirectResponse(get_settings().IDP_LOGIN_URL)


@router.get("/logout", include_in_schema=False)
def logout():
    """Send the browser to the identity provider's sign-out page."""
    return RedirectResponse(get_settings().IDP_LOGOUT_URL)
