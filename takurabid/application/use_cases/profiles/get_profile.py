"""Use case for resolving the profile behind an identity."""

from sqlalchemy.orm import Session

from takurabid.domain.entities import UserProfile
from takurabid.infrastructure.repositories import UserProfileRepository


def get_profile_by_auth_id(session: Session, auth_id: str) -> UserProfile:
    """Return the profile linked to ``auth_id`` or raise an error if it does not exist."""

    profile = UserProfileRepository(session).get_by_auth_id(auth_id)
    if profile is None:
        raise ValueError("Profile not found")
    return profile
