from .user import User, ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_USER, ROLE_CHOICES
from .item import Item
from .vote import Vote
from .activity import Activity
from .app_settings import AppSettings

__all__ = [
    "User",
    "Item",
    "Vote",
    "Activity",
    "AppSettings",
    "ROLE_ADMIN",
    "ROLE_EMPLOYEE",
    "ROLE_USER",
    "ROLE_CHOICES",
]
