"""Category routes."""

from __future__ import annotations

from flask import current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from ...extensions import category_repository
from ...models.category import Category
from .. import common
from . import bp
from .forms import CategoryForm

_DUPLICATE = {"error": "A category with this name already exists"}


def _validated_form():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return None, (jsonify({"errors": {"__root__": ["Expected a JSON object."]}}), 400)
    form, errors = CategoryForm.from_payload(payload)
    if errors:
        return None, (jsonify({"errors": errors}), 400)
    return form, None


@bp.get("/")
def list_categories():
    user_id = common.require_user_id()
    rows = category_repository().list_all(user_id=user_id)
    return jsonify({"categories": [row.to_dict() for row in rows]})


@bp.post("/")
def create_category():
    user_id = common.require_user_id()
    form, error = _validated_form()
    if error:
        return error
    try:
        category = category_repository().create(
            Category(user_id=user_id, name=form.name, color=form.color), user_id=user_id
        )
    except IntegrityError:
        return jsonify(_DUPLICATE), 409
    current_app.logger.info("Category %s created for user %s", category.id, user_id)
    return jsonify(category.to_dict()), 201


@bp.put("/<int:category_id>")
def update_category(category_id: int):
    """Rename or recolour a category; its habits follow the new colour."""

    user_id = common.require_user_id()
    form, error = _validated_form()
    if error:
        return error
    try:
        category = category_repository().update(
            category_id, name=form.name, color=form.color, user_id=user_id
        )
    except IntegrityError:
        return jsonify(_DUPLICATE), 409
    if category is None:
        return jsonify({"error": "Category not found"}), 404
    return jsonify(category.to_dict())


@bp.delete("/<int:category_id>")
def delete_category(category_id: int):
    """Delete a category; its habits become uncategorised."""

    user_id = common.require_user_id()
    if not category_repository().delete(category_id, user_id=user_id):
        return jsonify({"error": "Category not found"}), 404
    return jsonify({"success": True})
