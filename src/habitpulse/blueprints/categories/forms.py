"""Category form definitions."""

from __future__ import annotations

from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CategoryColor = Literal["purple", "pink", "blue", "green", "orange", "teal", "red", "yellow"]


class CategoryForm(BaseModel):
    """Payload for creating or renaming a category."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(default="", max_length=64)
    color: CategoryColor = "purple"

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value:
            raise ValueError("Please provide a category name.")
        return value

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any]
    ) -> tuple["CategoryForm | None", dict[str, list[str]]]:
        try:
            return cls.model_validate(dict(payload)), {}
        except ValidationError as exc:
            structured: dict[str, list[str]] = {}
            for error in exc.errors(include_url=False):
                loc = error.get("loc", ())
                key = str(loc[0]) if loc else "__root__"
                structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
            return None, structured


__all__ = ["CategoryColor", "CategoryForm"]
