"""Shared API dependencies for authentication and per-request services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from rubin_market.core.settings import settings
from rubin_market.db.session import get_db
from rubin_market.models import User
from rubin_market.services.chat import ChatService
from rubin_market.services.cipher import CipherService, get_cipher_service
from rubin_market.services.moderation import ModerationService
from rubin_market.services.notifications import NotificationService
from rubin_market.services.reports import ReportService

# HTTP Bearer scheme for JWTs issued by the auth provider
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = db.get(User, subject)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_cipher_service_dep() -> CipherService:
    """Return the process-wide cipher service."""
    return get_cipher_service()


CurrentUserDep = Annotated[User, Depends(get_current_user)]
CipherDep = Annotated[CipherService, Depends(get_cipher_service_dep)]


def get_notification_service(db: SessionDep) -> NotificationService:
    """Build the notification queue bound to the request session."""
    return NotificationService(db)


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


def get_chat_service(
    db: SessionDep,
    cipher: CipherDep,
    notifier: NotificationServiceDep,
) -> ChatService:
    """Build the chat service bound to the request session."""
    return ChatService(db, cipher, notifier)


def get_report_service(
    db: SessionDep,
    cipher: CipherDep,
    notifier: NotificationServiceDep,
) -> ReportService:
    """Build the report service bound to the request session."""
    return ReportService(db, cipher, notifier)


def get_moderation_service(db: SessionDep) -> ModerationService:
    """Build the account moderation service bound to the request session."""
    return ModerationService(db)


ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
ModerationServiceDep = Annotated[ModerationService, Depends(get_moderation_service)]
