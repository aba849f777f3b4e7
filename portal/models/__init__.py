"""Database model exports."""

from .trophy import USER_UPLOAD_SOURCE, Trophy, TrophyStatus
from .user import User

__all__ = [
    "Trophy",
    "TrophyStatus",
    "USER_UPLOAD_SOURCE",
    "User",
]
