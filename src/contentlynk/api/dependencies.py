"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from contentlynk.core.errors import ForbiddenError, UnauthorizedError
from contentlynk.core.platform_mode import ModeConfig, get_mode_config
from contentlynk.core.security import decode_access_token
from contentlynk.db.session import get_db
from contentlynk.models import User
from contentlynk.services.email import EmailService, get_email_service
from contentlynk.services.storage import StorageService, get_storage_service

# auto_error is off so a missing header answers 401 in the usual error shape
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _resolve_user(credentials: HTTPAuthorizationCredentials | None, db: Session) -> User | None:
    """Return the user named by a bearer token, or ``None`` if it does not resolve."""
    if credentials is None:
        return None
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        return None

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        return None
    return db.get(User, user_id)


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Get the current authenticated user from the bearer token.

    Raises:
        UnauthorizedError: If the token is missing, invalid or names no user
    """
    user = _resolve_user(credentials, db)
    if user is None:
        raise UnauthorizedError("Unauthorized")
    return user


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Like ``get_current_user`` but anonymous callers get ``None``."""
    return _resolve_user(credentials, db)


def get_admin_user(user: Annotated[User, Depends(get_current_user)]) -> User:
    if not user.is_admin:
        raise ForbiddenError("Forbidden - Admin access required")
    return user


def get_email_service_dep() -> EmailService:
    """Return the shared e-mail service."""
    return get_email_service()


def get_storage_service_dep() -> StorageService:
    """Return the shared object storage service."""
    return get_storage_service()


def client_ip(request: Request) -> str | None:
    """Best-effort client address, honouring ``X-Forwarded-For``."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.client.host if request.client else None


# Type aliases for the dependencies above
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
AdminUserDep = Annotated[User, Depends(get_admin_user)]
EmailServiceDep = Annotated[EmailService, Depends(get_email_service_dep)]
StorageServiceDep = Annotated[StorageService, Depends(get_storage_service_dep)]
ModeConfigDep = Annotated[ModeConfig, Depends(get_mode_config)]
