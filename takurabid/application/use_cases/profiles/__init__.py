from .create_profile import ProfileAlreadyExistsError, create_profile
from .get_profile import get_profile_by_auth_id

__all__ = [
    "ProfileAlreadyExistsError",
    "create_profile",
    "get_profile_by_auth_id",
]
