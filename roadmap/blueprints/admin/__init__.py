from flask import Blueprint, jsonify
from flask_login import current_user

bp = Blueprint("admin", __name__)

@bp.before_request
def _require_login_admin():
    if current_user.is_authenticated:
        return None
    return jsonify({"error": "unauthorized", "code": 401}), 401


# Import submodules so their routes register on the same bp
from . import settings  # noqa: E402,F401
from . import votes  # noqa: E402,F401
from . import users  # noqa: E402,F401
