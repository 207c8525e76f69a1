import logging
from flask import Blueprint, request, jsonify
from ..extensions import db
from ..models import MenuItem
from ..http import parse_body, not_found
from ..auth import admin_required
from ..dto import menu_item_dto
from ..schemas import MenuItemCreate, MenuItemUpdate

logger = logging.getLogger(__name__)

bp = Blueprint("menu", __name__)


def _get_item(item_id: int) -> MenuItem:
    item = db.session.get(MenuItem, item_id)
    if item is None:
        raise not_found("Menu item")
    return item


@bp.get("/menu")
def list_menu():
    q = MenuItem.query
    category = request.args.get("category")
    if category:
        q = q.filter(MenuItem.category == category)
    items = q.order_by(MenuItem.category.asc(), MenuItem.name.asc()).all()
    return jsonify(menuItems=[menu_item_dto(i) for i in items])


@bp.post("/admin/menu")
@admin_required
def add_menu_item():
    data = parse_body(MenuItemCreate)
    item = MenuItem(name=data.name, category=data.category, price=data.price)
    db.session.add(item)
    db.session.commit()
    logger.info("menu item %s added", item.id)
    return jsonify(message="Menu item created", menuItem=menu_item_dto(item)), 201


@bp.put("/admin/menu/<int:item_id>")
@admin_required
def update_menu_item(item_id: int):
    item = _get_item(item_id)
    data = parse_body(MenuItemUpdate)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(item, field, value)
    db.session.commit()
    return jsonify(message="Menu item updated", menuItem=menu_item_dto(item))


@bp.delete("/admin/menu/<int:item_id>")
@admin_required
def delete_menu_item(item_id: int):
    item = _get_item(item_id)
    db.session.delete(item)
    db.session.commit()
    logger.info("menu item %s deleted", item_id)
    return jsonify(message="Menu item deleted successfully")
