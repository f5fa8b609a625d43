"""Habit categories."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .habit import Habit

CATEGORY_COLORS = ("purple", "pink", "blue", "green", "orange", "teal", "red", "yellow")
UNCATEGORISED = "Other"


class Category(SQLModel, table=True):
    """A named, coloured group of habits owned by one user."""

    __tablename__: ClassVar[str] = "category"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_category_user_name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=64)
    color: str = Field(default="purple", max_length=32)

    habits: list["Habit"] = Relationship(
        back_populates="category",
        sa_relationship=relationship("Habit", back_populates="category"),
    )

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "color": self.color}
