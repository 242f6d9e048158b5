"""
API dependencies for dependency injection
"""

import hmac
from typing import Generator, Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ForbiddenError, UnauthorizedError
from domain.models import AppUser, get_db_session
from services.user_service import UserService


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def _parse_user_id(x_user_id: Optional[str]) -> UUID:
    if not x_user_id:
        raise UnauthorizedError("Missing X-User-Id header")
    try:
        return UUID(x_user_id)
    except ValueError as exc:
        raise UnauthorizedError("Invalid X-User-Id header") from exc


def get_current_user(
    x_user_id: Optional[str] = Header(None), db: Session = Depends(get_db)
) -> AppUser:
    """
    The authenticated caller. The upstream auth gateway forwards the
    user's id in the ``X-User-Id`` header.
    """
    return UserService.authenticate(db, _parse_user_id(x_user_id))


def get_optional_user(
    x_user_id: Optional[str] = Header(None), db: Session = Depends(get_db)
) -> Optional[AppUser]:
    if not x_user_id:
        return None
    return UserService.authenticate(db, _parse_user_id(x_user_id))


def require_admin(user: AppUser = Depends(get_current_user)) -> AppUser:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user


def require_service_role(authorization: Optional[str] = Header(None)) -> None:
    """Job endpoints accept only ``Authorization: Bearer <service role key>``"""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError("Missing service role credentials")
    if not hmac.compare_digest(token.strip(), settings.service_role_key):
        raise UnauthorizedError("Invalid service role key")
