"""Persistence helpers for user profiles."""

from __future__ import annotations

from sqlalchemy.orm import Session

from takurabid.domain.entities import UserProfile, UserType
from takurabid.infrastructure.models import UserProfileModel
from takurabid.utils import ensure_utc


class UserProfileRepository:
    """Provide lookup and creation of :class:`UserProfile` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_auth_id(self, auth_id: str) -> UserProfile | None:
        model = (
            self.session.query(UserProfileModel)
            .filter(UserProfileModel.auth_id == auth_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, profile: UserProfile) -> UserProfile:
        model = UserProfileModel(
            auth_id=profile.auth_id,
            type=profile.type.value,
            name=profile.name,
            avatar=profile.avatar,
            email=profile.email,
        )
        if profile.id is not None:
            model.id = profile.id
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserProfileModel) -> UserProfile:
        return UserProfile(
            id=model.id,
            auth_id=model.auth_id,
            type=UserType(model.type),
            name=model.name,
            avatar=model.avatar,
            email=model.email,
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["UserProfileRepository"]
