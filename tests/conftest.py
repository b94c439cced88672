import os
# Ensure the app factory picks the Testing config & SQLite memory DB
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///:memory:")

import pytest
from roadmap import create_app
from roadmap.extensions import db
from roadmap.models import User, ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_USER
from roadmap.services.settings_store import WidgetSettings

@pytest.fixture(scope="session")
def app():
    app = create_app()
    app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI="sqlite:///:memory:",
        APP_BASE_URL="http://example.test",
        WTF_CSRF_ENABLED=False,
        RATELIMIT_ENABLED=False,
    )
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()

@pytest.fixture()
def client(app):
    return app.test_client()

@pytest.fixture(autouse=True)
def _db_clean(app):
    # Clean BEFORE each test
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()
    yield
    # And AFTER each test (keeps state hermetic even if a test fails mid-transaction)
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()

@pytest.fixture()
def widget_settings(app):
    """Enabled widget, open to every origin. Returns a saver: widget_settings(enabled=False)."""
    def _save(**overrides):
        with app.app_context():
            s = WidgetSettings.load()
            s.enabled = True
            s.position = "bottom-right"
            s.primary_color = "#2563EB"
            s.button_text = "Feedback"
            s.allowed_domains = []
            for key, value in overrides.items():
                setattr(s, key, value)
            s.save()
    _save()
    return _save

@pytest.fixture()
def make_user(app):
    """Factory: make_user(email=..., role=...) -> user id."""
    def _make(email="staff@example.com", role=ROLE_USER, name="Staff", password="x", active=True):
        with app.app_context():
            u = User(email=email, name=name, role=role, is_active=active)
            u.set_password(password)
            db.session.add(u); db.session.commit()
            return u.id
    return _make

def _login(client, user_id: int):
    with client.session_transaction() as sess:
        sess["_user_id"] = str(user_id)

@pytest.fixture()
def admin_client(client, make_user):
    _login(client, make_user(email="admin@example.com", role=ROLE_ADMIN, name="Admin"))
    return client

@pytest.fixture()
def employee_client(client, make_user):
    _login(client, make_user(email="employee@example.com", role=ROLE_EMPLOYEE, name="Employee"))
    return client
