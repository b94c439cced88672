import pytest
from sqlalchemy.exc import IntegrityError
from roadmap.extensions import db
from roadmap.models import Item, User, Vote
from roadmap.services.activity import log_activity

def _user(email="u@example.com"):
    u = User(email=email, name="U")
    u.set_password("x")
    db.session.add(u)
    return u

def test_vote_unique_per_item_and_user(app):
    with app.app_context():
        u = _user()
        item = Item(title="Export to CSV", content="...")
        db.session.add(item); db.session.commit()

        db.session.add(Vote(item_id=item.id, user_id=u.id))
        db.session.commit()

        db.session.add(Vote(item_id=item.id, user_id=u.id))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

def test_user_role_check_constraint(app):
    with app.app_context():
        u = _user()
        u.role = "superuser"
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

def test_user_password_and_roles(app):
    with app.app_context():
        u = _user()
        db.session.commit()
        assert u.role == "user"
        assert u.check_password("x") is True
        assert u.check_password("y") is False
        assert u.has_role("admin", "user") is True
        assert u.has_role("admin") is False

def test_log_activity_attributes_subject_and_causer(app):
    with app.app_context():
        u = _user()
        item = Item(title="Teams", content="...")
        db.session.add(item); db.session.flush()
        entry = log_activity(item, "updated", causer=u, properties={"changed": ["title"]})
        db.session.commit()

        assert entry.subject_type == "items"
        assert entry.subject_id == item.id
        assert entry.causer_id == u.id
        assert entry.description == "updated"
        assert [a.id for a in item.activities()] == [entry.id]
