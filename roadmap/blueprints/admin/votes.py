from flask import current_app, jsonify, request
from flask_login import current_user
from sqlalchemy.exc import IntegrityError

from roadmap.errors import ConflictError, NotFoundError, ValidationError
from roadmap.extensions import db
from roadmap.models import Item, User, Vote
from roadmap.services.activity import log_activity
from roadmap.services.policy import Action, authorize
from . import bp


def _get_vote_or_404(vote_id: int) -> Vote:
    vote = db.session.get(Vote, vote_id)
    if vote is None:
        raise NotFoundError("Vote not found")
    return vote


@bp.get("/votes.json")
@authorize(Action.VIEW_ANY, "votes")
def list_votes():
    q = db.select(Vote).order_by(Vote.id.desc())
    item_id = request.args.get("item_id", type=int)
    if item_id is not None:
        q = q.where(Vote.item_id == item_id)
    rows = db.session.execute(q).scalars().all()
    return jsonify([v.to_dict() for v in rows])


@bp.get("/votes/<int:vote_id>.json")
@authorize(Action.VIEW, "votes")
def show_vote(vote_id: int):
    return jsonify(_get_vote_or_404(vote_id).to_dict())


@bp.post("/votes.json")
@authorize(Action.CREATE, "votes")
def create_vote():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        payload = {}
    errors = {}
    item = user = None
    try:
        item = db.session.get(Item, int(payload.get("item_id")))
    except (TypeError, ValueError):
        pass
    if item is None:
        errors["item_id"] = ["The selected item is invalid."]
    try:
        user = db.session.get(User, int(payload.get("user_id")))
    except (TypeError, ValueError):
        pass
    if user is None:
        errors["user_id"] = ["The selected user is invalid."]
    if errors:
        raise ValidationError(errors)

    vote = Vote(item_id=item.id, user_id=user.id)
    db.session.add(vote)
    try:
        db.session.flush()
        log_activity(item, "voted", causer=current_user, properties={"user_id": user.id})
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("This user already voted for the item.")

    current_app.logger.info(
        "vote_created",
        extra={"event": "vote_created", "vote_id": vote.id, "item_id": item.id, "by": current_user.id},
    )
    return jsonify(vote.to_dict()), 201


@bp.delete("/votes/<int:vote_id>.json")
@authorize(Action.DELETE, "votes")
def delete_vote(vote_id: int):
    vote = _get_vote_or_404(vote_id)
    item = vote.item
    log_activity(item, "unvoted", causer=current_user, properties={"user_id": vote.user_id})
    db.session.delete(vote)
    db.session.commit()
    current_app.logger.info(
        "vote_deleted",
        extra={"event": "vote_deleted", "vote_id": vote_id, "item_id": item.id, "by": current_user.id},
    )
    return "", 204
