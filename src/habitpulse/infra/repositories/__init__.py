"""Concrete repository implementations using SQLModel."""

from .category import SQLModelCategoryRepository
from .habit import SQLModelHabitRepository
from .notification import SQLModelNotificationRepository

__all__ = [
    "SQLModelCategoryRepository",
    "SQLModelHabitRepository",
    "SQLModelNotificationRepository",
]
