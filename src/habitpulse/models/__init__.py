"""SQLModel table exports."""

from .category import CATEGORY_COLORS, UNCATEGORISED, Category
from .habit import Habit, HabitLog, HabitReminder
from .notification import REMINDER_TYPE, Notification
from .user import User

__all__ = [
    "CATEGORY_COLORS",
    "Category",
    "Habit",
    "HabitLog",
    "HabitReminder",
    "Notification",
    "REMINDER_TYPE",
    "UNCATEGORISED",
    "User",
]
