"""Endpoints linking identities to marketplace profiles."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from takurabid.application.use_cases.profiles import (
    ProfileAlreadyExistsError,
    create_profile,
)
from takurabid.domain.entities import UserProfile
from takurabid.infrastructure.security import IdentityClaims
from takurabid.interfaces.api.dependencies import (
    get_current_identity,
    get_current_profile,
    get_db,
)
from takurabid.interfaces.api.schemas import ProfileCreate, ProfileRead

router = APIRouter(prefix="/profiles", tags=["profiles"])
logger = logging.getLogger(__name__)


def _profile_to_schema(profile: UserProfile) -> ProfileRead:
    return ProfileRead(
        id=profile.id or "",
        type=profile.type,
        name=profile.name,
        avatar=profile.avatar,
        email=profile.email,
        created_at=profile.created_at,
    )


@router.post("/", response_model=ProfileRead, status_code=status.HTTP_201_CREATED)
def create_my_profile(
    payload: ProfileCreate,
    identity: IdentityClaims = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ProfileRead:
    """Complete the signup of the authenticated identity."""

    try:
        profile = create_profile(
            db,
            auth_id=identity.auth_id,
            user_type=payload.type,
            name=payload.name,
            email=identity.email,
        )
    except ProfileAlreadyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A profile already exists for this account",
        ) from exc

    logger.info("Created %s profile %s", profile.type.value, profile.id)
    return _profile_to_schema(profile)


@router.get("/me", response_model=ProfileRead)
def read_my_profile(current_user: UserProfile = Depends(get_current_profile)) -> ProfileRead:
    return _profile_to_schema(current_user)
