"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy import update as sa_update
from sqlmodel import Session, select

from ...models.category import Category
from ...models.habit import Habit


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _owned(self, session: Session, category_id: int, user_id: int) -> Optional[Category]:
        return session.exec(
            select(Category).where(Category.id == category_id, Category.user_id == user_id)
        ).first()

    def list_all(self, *, user_id: int) -> list[Category]:
        """List a user's categories by name."""
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Category).where(Category.user_id == user_id).order_by(Category.name)
                ).all()
            )
            session.expunge_all()
            return rows

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        with self.session_factory() as session:
            obj = self._owned(session, category_id, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a category; the (user, name) pair is unique."""
        with self.session_factory() as session:
            category.user_id = user_id
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def update(
        self, category_id: int, *, name: str, color: str, user_id: int
    ) -> Optional[Category]:
        """Update a category; its habits take the new colour in the same commit."""
        with self.session_factory() as session:
            category = self._owned(session, category_id, user_id)
            if category is None:
                return None
            category.name = name
            category.color = color
            session.add(category)
            session.execute(
                sa_update(Habit)
                .where(Habit.category_id == category_id)
                .where(Habit.user_id == user_id)
                .values(color=color)
            )
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def delete(self, category_id: int, *, user_id: int) -> bool:
        """Delete a category, leaving its habits uncategorised."""
        with self.session_factory() as session:
            category = self._owned(session, category_id, user_id)
            if category is None:
                return False
            session.execute(
                sa_update(Habit).where(Habit.category_id == category_id).values(category_id=None)
            )
            session.delete(category)
            session.commit()
            return True
