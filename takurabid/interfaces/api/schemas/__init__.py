from .notification import (
    NotificationCreate,
    NotificationRead,
    NotificationStatsRead,
    UnreadCountRead,
)
from .profile import ProfileCreate, ProfileRead
