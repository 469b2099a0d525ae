"""FastAPI dependency utilities."""

from collections.abc import Generator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from takurabid.application.use_cases.notifications import NotificationService
from takurabid.config import Settings
from takurabid.domain.entities import UserProfile
from takurabid.infrastructure.database import Database
from takurabid.infrastructure.repositories import UserProfileRepository
from takurabid.infrastructure.security import IdentityClaims, decode_identity_token

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(database: Database = Depends(get_database)) -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    with database.session() as db:
        yield db


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


def resolve_identity(token: str | None, settings: Settings) -> IdentityClaims:
    """Validate ``token`` against the identity provider secret."""

    if not token:
        raise _unauthorized("Not authenticated")
    try:
        return decode_identity_token(token, settings)
    except ValueError as exc:
        raise _unauthorized() from exc


def resolve_current_profile(token: str | None, db: Session, settings: Settings) -> UserProfile:
    """Resolve the profile linked to the identity in ``token``."""

    claims = resolve_identity(token, settings)
    profile = UserProfileRepository(db).get_by_auth_id(claims.auth_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Profile setup required",
        )
    return profile


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings_from_app),
) -> IdentityClaims:
    """Return the identity claims of the bearer token."""

    return resolve_identity(credentials.credentials if credentials else None, settings)


def get_current_profile(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_from_app),
) -> UserProfile:
    """Return the profile of the authenticated caller."""

    token = credentials.credentials if credentials else None
    return resolve_current_profile(token, db, settings)
