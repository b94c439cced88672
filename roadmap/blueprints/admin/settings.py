from flask import current_app, jsonify, request
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from roadmap.errors import PersistenceError
from roadmap.extensions import db
from roadmap.models.user import ROLE_ADMIN, ROLE_EMPLOYEE
from roadmap.services.policy import role_required
from roadmap.services.settings_schema import visible_fields
from roadmap.services.settings_store import SETTINGS_GROUPS
from . import bp


def _group_state(name: str, settings) -> dict:
    values = settings.to_dict()
    return {
        "settings": values,
        "settings_version": type(settings).version(),
        "fields": [f.to_dict() for f in visible_fields(name, values)],
    }


def _settings_state(groups) -> dict:
    return {name: _group_state(name, groups[name]) for name in SETTINGS_GROUPS}


@bp.get("/settings.json")
@role_required(ROLE_ADMIN, ROLE_EMPLOYEE)
def get_settings_json():
    groups = {name: cls.load() for name, cls in SETTINGS_GROUPS.items()}
    return jsonify(_settings_state(groups))


@bp.put("/settings.json")
@role_required(ROLE_ADMIN)
def put_settings_json():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid payload"}), 400
    incoming = payload.get("settings", {})

    if not isinstance(incoming, dict) or any(
        k not in SETTINGS_GROUPS or not isinstance(v, dict) for k, v in incoming.items()
    ):
        return jsonify({"error": "Invalid payload"}), 400

    # Validate every group before writing any of them
    groups = {name: cls.load() for name, cls in SETTINGS_GROUPS.items()}
    updated = {name: groups[name].merged(values) for name, values in incoming.items()}
    try:
        for name, settings in updated.items():
            settings.save(commit=False)
            groups[name] = settings
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("settings update failed")
        raise PersistenceError("Could not save settings") from exc

    current_app.logger.info(
        "settings_updated",
        extra={"event": "settings_updated", "user_id": current_user.id, "groups": sorted(updated)},
    )
    return jsonify(_settings_state(groups))
