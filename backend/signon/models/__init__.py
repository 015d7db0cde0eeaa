"""SQLAlchemy models package."""

from signon.models.setting import ApplicationSetting
from signon.models.user import User

__all__ = [
    "ApplicationSetting",
    "User",
]
