"""Use case for linking an identity to a new marketplace profile."""

from sqlalchemy.orm import Session

from takurabid.domain.entities import UserProfile, UserType, build_avatar
from takurabid.infrastructure.repositories import UserProfileRepository


class ProfileAlreadyExistsError(ValueError):
    """Raised when the identity already owns a profile."""


def create_profile(
    session: Session,
    *,
    auth_id: str,
    user_type: UserType,
    name: str,
    email: str | None = None,
) -> UserProfile:
    """Create the profile for ``auth_id`` ensuring one profile per identity."""

    repository = UserProfileRepository(session)

    if repository.get_by_auth_id(auth_id) is not None:
        raise ProfileAlreadyExistsError("A profile already exists for this account")

    clean_name = name.strip()
    if not clean_name:
        raise ValueError("Name must not be empty")

    profile = UserProfile(
        id=None,
        auth_id=auth_id,
        type=user_type,
        name=clean_name,
        avatar=build_avatar(clean_name),
        email=email,
        created_at=None,
    )
    return repository.create(profile)
