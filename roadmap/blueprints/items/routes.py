from flask import jsonify

from roadmap.errors import NotFoundError
from roadmap.extensions import db
from roadmap.models import Item
from . import bp


@bp.get("/<int:item_id>")
def show(item_id: int):
    item = db.session.get(Item, item_id)
    if item is None:
        raise NotFoundError("Item not found")
    return jsonify(item.to_dict())
