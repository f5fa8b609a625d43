"""Repository protocol definitions for domain layer."""

from .category import CategoryRepository
from .habit import HabitRepository
from .notification import NotificationRepository

__all__ = [
    "CategoryRepository",
    "HabitRepository",
    "NotificationRepository",
]
