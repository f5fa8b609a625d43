"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for a user's habit categories."""

    def list_all(self, *, user_id: int) -> list[Category]:
        """Categories ordered by name."""
        ...

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category owned by the user."""
        ...

    def create(self, category: Category, *, user_id: int) -> Category:
        """Persist a category; duplicate names raise IntegrityError."""
        ...

    def update(self, category_id: int, *, name: str, color: str, user_id: int) -> Optional[Category]:
        """Rename/recolour a category and recolour its habits."""
        ...

    def delete(self, category_id: int, *, user_id: int) -> bool:
        """Detach the category's habits, then delete it."""
        ...
