"""
Widget feedback intake: identity resolution, item creation, the submitter's
automatic vote and the activity entry, committed as one transaction.
"""
import secrets

from flask import current_app, url_for
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from roadmap.errors import PersistenceError
from roadmap.extensions import db
from roadmap.models import Item, User, Vote, ROLE_USER
from roadmap.services.activity import log_activity

SUCCESS_MESSAGE = "Feedback submitted successfully"


class IntakeResult:
    def __init__(self, item, vote, activity, user=None):
        self.item = item
        self.vote = vote
        self.activity = activity
        self.user = user

    def item_url(self) -> str:
        base = (current_app.config.get("APP_BASE_URL") or "").rstrip("/")
        return f"{base}{url_for('items.show', item_id=self.item.id)}"

    def to_response(self) -> dict:
        return {
            "success": True,
            "message": SUCCESS_MESSAGE,
            "item_id": self.item.id,
            "item_url": self.item_url(),
        }


def _lookup_user(email: str) -> User | None:
    return db.session.execute(
        db.select(User).where(func.lower(User.email) == email.lower())
    ).scalar_one_or_none()


def _find_or_create_user(email: str, name: str | None) -> User:
    user = _lookup_user(email)
    if user:
        return user

    user = User(
        email=email.lower(),
        name=name or email.split("@", 1)[0],
        role=ROLE_USER,
        is_active=True,
    )
    # Widget users never log in with a password until they reset it
    user.set_password(secrets.token_urlsafe(32))
    db.session.add(user)
    try:
        db.session.flush()
    except IntegrityError:
        # A concurrent submission inserted the same email first; the user row
        # is the first write of the intake transaction.
        db.session.rollback()
        user = _lookup_user(email)
        if user is None:
            raise
    return user


def submit_feedback(title: str, content: str, email: str | None = None, name: str | None = None) -> IntakeResult:
    """
    Create an Item from a widget submission.

    With an email, the submitter is found or created, upvotes the item and is
    the causer of the activity entry. Without one the item is anonymous and the
    activity has no causer. Any database failure rolls everything back.
    """
    try:
        user = _find_or_create_user(email, name) if email else None

        item = Item(title=title, content=content, user_id=user.id if user else None)
        db.session.add(item)
        db.session.flush()

        vote = None
        if user is not None:
            vote = Vote(item_id=item.id, user_id=user.id)
            db.session.add(vote)

        activity = log_activity(
            item,
            "created",
            causer=user,
            properties={"source": "widget", "attributes": {"title": item.title}},
        )
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("widget intake failed")
        raise PersistenceError("Could not store feedback") from exc

    return IntakeResult(item, vote, activity, user=user)
