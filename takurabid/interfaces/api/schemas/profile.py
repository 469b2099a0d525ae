"""Pydantic models describing profile payloads."""

from datetime import datetime

from pydantic import BaseModel, Field

from takurabid.domain.entities import UserType


class ProfileCreate(BaseModel):
    """Data completing the signup of an authenticated identity."""

    type: UserType
    name: str = Field(..., min_length=1, max_length=120)


class ProfileRead(BaseModel):
    id: str
    type: UserType
    name: str
    avatar: str
    email: str | None = None
    created_at: datetime | None = None


__all__ = ["ProfileCreate", "ProfileRead"]
