"""
Role-based authorization for the admin resources.

``can`` is a pure predicate over (user role, action, resource); the
decorators below apply it to views and answer 401/403 the same way for
every admin endpoint.
"""
from enum import Enum
from functools import wraps

from flask import abort, request, jsonify
from flask_login import current_user

from roadmap.models.user import ROLE_ADMIN, ROLE_EMPLOYEE


class Action(str, Enum):
    VIEW_ANY = "view_any"
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    RESTORE = "restore"
    FORCE_DELETE = "force_delete"


_STAFF = frozenset({ROLE_ADMIN, ROLE_EMPLOYEE})
_ADMIN_ONLY = frozenset({ROLE_ADMIN})

# Listing is open to all staff; everything else is admin-only
_ADMIN_MANAGED = {
    Action.VIEW_ANY: _STAFF,
    Action.VIEW: _ADMIN_ONLY,
    Action.CREATE: _ADMIN_ONLY,
    Action.UPDATE: _ADMIN_ONLY,
    Action.DELETE: _ADMIN_ONLY,
    Action.RESTORE: _ADMIN_ONLY,
    Action.FORCE_DELETE: _ADMIN_ONLY,
}

POLICIES = {
    "votes": _ADMIN_MANAGED,
    "users": _ADMIN_MANAGED,
}


def can(user, action, resource: str = "votes", target=None) -> bool:
    """True when ``user`` may perform ``action`` on ``resource`` (``target`` is the row, if any)."""
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    if not getattr(user, "is_active", False):
        return False
    rules = POLICIES.get(resource)
    if rules is None:
        return False
    try:
        action = Action(action)
    except ValueError:
        return False
    return getattr(user, "role", None) in rules.get(action, frozenset())


def role_required(*roles):
    def deco(fn):
        @wraps(fn)
        def _wrap(*args, **kwargs):
            if not current_user.is_authenticated:
                return _abort_smart(401)
            if not current_user.is_active or current_user.role not in roles:
                return _abort_smart(403)
            return fn(*args, **kwargs)
        return _wrap
    return deco


def authorize(action: Action, resource: str):
    """View decorator: deny with 401/403 unless ``can(current_user, action, resource)``."""
    def deco(fn):
        @wraps(fn)
        def _wrap(*args, **kwargs):
            if not current_user.is_authenticated:
                return _abort_smart(401)
            if not can(current_user, action, resource):
                return _abort_smart(403)
            return fn(*args, **kwargs)
        return _wrap
    return deco


def _abort_smart(code: int):
    # If the client asked for JSON, return a JSON-shaped error
    accept = (request.headers.get("Accept") or "").lower()
    if "application/json" in accept or request.is_json or request.path.endswith(".json"):
        return jsonify({"error": {401: "unauthorized", 403: "forbidden", 404: "not_found"}[code], "code": code}), code
    abort(code)
