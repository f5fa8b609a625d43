"""Blueprint exports."""

from . import categories, habits, notifications, overview

__all__ = [
    "categories",
    "habits",
    "notifications",
    "overview",
]
