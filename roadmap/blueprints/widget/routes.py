from flask import current_app, jsonify, request

from roadmap.errors import AuthorizationError
from roadmap.extensions import limiter
from roadmap.services.intake import submit_feedback
from roadmap.services.origins import host_of, origin_allowed, request_origin
from roadmap.services.settings_store import WidgetSettings
from roadmap.services.submission import validate_submission
from . import bp


def _submit_limit():
    return current_app.config.get("WIDGET_RATE_LIMIT", "20 per minute")


def _config_limit():
    return current_app.config.get("WIDGET_CONFIG_RATE_LIMIT", "120 per minute")


@bp.after_request
def _cors_headers(resp):
    # The widget runs on third-party pages; the origin guard decides what they get to see
    origin = request.headers.get("Origin")
    resp.headers["Access-Control-Allow-Origin"] = origin or "*"
    if origin:
        resp.vary.add("Origin")
    resp.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
    resp.headers["Access-Control-Allow-Headers"] = "Content-Type,Accept"
    resp.headers["Access-Control-Max-Age"] = "3600"
    return resp


@bp.get("/api/widget/config")
@limiter.limit(_config_limit)
def widget_config():
    """Display settings for the embedded widget; hidden unless enabled and allowed."""
    settings = WidgetSettings.load()
    origin = request_origin()
    if not settings.enabled or not origin_allowed(origin, settings.allowed_domains):
        return jsonify({"enabled": False})
    return jsonify(settings.public_config())


@bp.post("/api/widget/submit")
@limiter.limit(_submit_limit)
def widget_submit():
    """Accept feedback from the widget. Checks run origin -> enabled -> payload."""
    settings = WidgetSettings.load()
    origin = request_origin()

    if not origin_allowed(origin, settings.allowed_domains):
        current_app.logger.info(
            "widget_rejected",
            extra={"event": "widget_rejected", "reason": "origin", "origin_host": host_of(origin)},
        )
        raise AuthorizationError("This website is not allowed to submit feedback.")
    if not settings.enabled:
        current_app.logger.info(
            "widget_rejected",
            extra={"event": "widget_rejected", "reason": "disabled", "origin_host": host_of(origin)},
        )
        raise AuthorizationError("The feedback widget is disabled.")

    payload = request.get_json(silent=True) if request.is_json else request.form.to_dict()
    data = validate_submission(payload)
    result = submit_feedback(**data)

    # Structured log for observability (no message body or email to avoid PII)
    current_app.logger.info(
        "widget_feedback_submitted",
        extra={
            "event": "widget_feedback_submitted",
            "item_id": result.item.id,
            "user_id": result.user.id if result.user else None,
            "origin_host": host_of(origin),
        },
    )
    return jsonify(result.to_response()), 201


@bp.get("/widget.js")
@limiter.exempt
def widget_script():
    """The embeddable <roadmap-widget> script."""
    with current_app.open_resource("static/widget.js", "rb") as fh:
        body = fh.read()
    resp = current_app.response_class(body, content_type="application/javascript")
    resp.headers["Cache-Control"] = f"public, max-age={current_app.config.get('WIDGET_SCRIPT_MAX_AGE', 300)}"
    return resp
