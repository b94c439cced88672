from flask import request, jsonify, current_app
from flask_login import login_user, logout_user, current_user
from flask_wtf.csrf import generate_csrf
from sqlalchemy import func

from roadmap.extensions import db, limiter
from roadmap.models.user import User
from . import bp


def _login_email_scope():
    data_json = request.get_json(silent=True) or {}
    if not isinstance(data_json, dict):
        data_json = {}
    email = (request.form.get("email") or data_json.get("email") or "").strip().lower()
    # Keep a stable scope even if email is blank
    return f"login-email:{email or 'missing'}"


@bp.get("/csrf")
def csrf_token():
    """Token for the admin client to echo back in X-CSRFToken."""
    return jsonify({"csrf_token": generate_csrf()})


@bp.get("/me")
def me():
    if not current_user.is_authenticated:
        return jsonify({"error": "unauthorized", "code": 401}), 401
    return jsonify(current_user.to_dict())


@bp.post("/login")
@limiter.limit("10 per minute; 100 per hour")              # per-IP (anon -> IP via _rate_limit_key)
@limiter.limit("5 per minute; 20 per hour", key_func=_login_email_scope)  # per-account
def login_post():
    data = request.get_json(silent=True) if request.is_json else request.form
    if not isinstance(data, dict):
        data = {}
    email = (data.get("email") or "").strip()
    password = data.get("password") or ""

    if not email or not password:
        return jsonify({"error": "Email and password are required"}), 400

    user = db.session.execute(
        db.select(User).where(func.lower(User.email) == func.lower(email))
    ).scalar_one_or_none()

    if not user or not user.check_password(password) or not user.is_active:
        current_app.logger.info("login_failed", extra={"event": "login_failed"})
        return jsonify({"error": "Invalid credentials"}), 400

    login_user(user)
    current_app.logger.info("login_succeeded", extra={"event": "login_succeeded", "user_id": user.id})
    return jsonify(user.to_dict())


@bp.post("/logout")
def logout_post():
    if current_user.is_authenticated:
        logout_user()
    return jsonify({"ok": True})
