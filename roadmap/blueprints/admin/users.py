from flask import jsonify

from roadmap.extensions import db
from roadmap.models import User
from roadmap.services.policy import Action, authorize
from . import bp


@bp.get("/users.json")
@authorize(Action.VIEW_ANY, "users")
def list_users():
    rows = db.session.execute(db.select(User).order_by(User.id)).scalars().all()
    return jsonify([u.to_dict() for u in rows])
