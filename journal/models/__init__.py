"""Database models."""

from journal.models.user import User
from journal.models.profile import Profile
from journal.models.trade import Trade

__all__ = [
    "User",
    "Profile",
    "Trade",
]
