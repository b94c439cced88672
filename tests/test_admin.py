from roadmap.extensions import db
from roadmap.models import Activity, Item, User, Vote
from roadmap.services.settings_store import WidgetSettings

def _item_with_vote(app, email="voter@example.com"):
    with app.app_context():
        u = User(email=email, name="Voter", role="user")
        u.set_password("x")
        item = Item(title="Dark mode", content="Please")
        db.session.add_all([u, item]); db.session.flush()
        v = Vote(item_id=item.id, user_id=u.id)
        db.session.add(v); db.session.commit()
        return item.id, u.id, v.id

def test_admin_requires_login(client):
    resp = client.get("/admin/votes.json")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthorized"

def test_employee_can_list_votes(app, employee_client):
    item_id, user_id, vote_id = _item_with_vote(app)
    resp = employee_client.get("/admin/votes.json")
    assert resp.status_code == 200
    assert [v["id"] for v in resp.get_json()] == [vote_id]

def test_employee_cannot_view_or_delete_a_vote(app, employee_client):
    _, _, vote_id = _item_with_vote(app)
    assert employee_client.get(f"/admin/votes/{vote_id}.json").status_code == 403
    assert employee_client.delete(f"/admin/votes/{vote_id}.json").status_code == 403
    with app.app_context():
        assert Vote.query.count() == 1

def test_plain_user_cannot_list_votes(app, client, make_user):
    uid = make_user(email="plain@example.com")
    with client.session_transaction() as sess:
        sess["_user_id"] = str(uid)
    assert client.get("/admin/votes.json").status_code == 403

def test_admin_view_missing_vote_is_404(admin_client):
    resp = admin_client.get("/admin/votes/999.json")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"

def test_admin_can_filter_votes_by_item(app, admin_client):
    item_id, _, vote_id = _item_with_vote(app)
    _item_with_vote(app, email="other@example.com")
    resp = admin_client.get(f"/admin/votes.json?item_id={item_id}")
    assert [v["id"] for v in resp.get_json()] == [vote_id]

def test_admin_creates_vote_once(app, admin_client, make_user):
    item_id, _, _ = _item_with_vote(app)
    uid = make_user(email="second@example.com")

    resp = admin_client.post("/admin/votes.json", json={"item_id": item_id, "user_id": uid})
    assert resp.status_code == 201
    assert resp.get_json()["user_id"] == uid

    dup = admin_client.post("/admin/votes.json", json={"item_id": item_id, "user_id": uid})
    assert dup.status_code == 409

    with app.app_context():
        assert Vote.query.filter_by(item_id=item_id).count() == 2
        events = [a.event for a in db.session.get(Item, item_id).activities()]
        assert events == ["voted"]

def test_admin_create_vote_validates_references(admin_client):
    resp = admin_client.post("/admin/votes.json", json={"item_id": "nope"})
    assert resp.status_code == 422
    assert set(resp.get_json()["errors"]) == {"item_id", "user_id"}

def test_admin_deletes_vote_and_logs_it(app, admin_client):
    item_id, _, vote_id = _item_with_vote(app)
    resp = admin_client.delete(f"/admin/votes/{vote_id}.json")
    assert resp.status_code == 204
    with app.app_context():
        assert Vote.query.count() == 0
        activity = Activity.query.filter_by(subject_id=item_id, event="unvoted").one()
        assert activity.causer.email == "admin@example.com"

def test_users_listing_for_staff(app, employee_client):
    resp = employee_client.get("/admin/users.json")
    assert resp.status_code == 200
    assert [u["email"] for u in resp.get_json()] == ["employee@example.com"]
    assert "password_hash" not in resp.get_json()[0]

def test_settings_json_for_staff(employee_client):
    resp = employee_client.get("/admin/settings.json")
    assert resp.status_code == 200
    data = resp.get_json()
    assert set(data) == {"general", "widget"}
    assert data["widget"]["settings"]["enabled"] is False
    assert [f["key"] for f in data["widget"]["fields"]] == ["enabled"]
    assert data["general"]["settings_version"] == 0

def test_employee_cannot_change_settings(employee_client):
    resp = employee_client.put("/admin/settings.json", json={"settings": {"widget": {"enabled": True}}})
    assert resp.status_code == 403

def test_admin_updates_widget_settings(app, admin_client):
    resp = admin_client.put("/admin/settings.json", json={"settings": {
        "widget": {"enabled": True, "allowed_domains": ["Example.com"], "button_text": "Ideas"},
    }})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["widget"]["settings"]["enabled"] is True
    assert data["widget"]["settings_version"] == 1
    assert "allowed_domains" in [f["key"] for f in data["widget"]["fields"]]

    with app.app_context():
        s = WidgetSettings.load()
        assert s.allowed_domains == ["example.com"]
        assert s.button_text == "Ideas"

    cfg = admin_client.get("/api/widget/config", headers={"Origin": "https://example.com"})
    assert cfg.get_json()["button_text"] == "Ideas"

def test_admin_settings_validation_writes_nothing(app, admin_client):
    resp = admin_client.put("/admin/settings.json", json={"settings": {
        "general": {"board_centered": True},
        "widget": {"position": "middle"},
    }})
    assert resp.status_code == 422
    assert "position" in resp.get_json()["errors"]
    with app.app_context():
        from roadmap.services.settings_store import GeneralSettings
        assert GeneralSettings.version() == 0

def test_admin_settings_rejects_bad_shape(admin_client):
    assert admin_client.put("/admin/settings.json", json={"settings": []}).status_code == 400
    assert admin_client.put("/admin/settings.json", json={"settings": {"billing": {}}}).status_code == 400

def test_admin_settings_rejects_non_object_body(admin_client):
    resp = admin_client.put("/admin/settings.json", json=[1, 2])
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid payload"}

def test_admin_settings_failure_saves_no_group(app, admin_client, monkeypatch):
    from sqlalchemy.exc import OperationalError
    from roadmap.services.settings_store import GeneralSettings

    def _boom(self, commit=True):
        raise OperationalError("UPDATE app_settings", {}, Exception("disk full"))

    monkeypatch.setattr(WidgetSettings, "save", _boom)
    resp = admin_client.put("/admin/settings.json", json={"settings": {
        "general": {"board_centered": True},
        "widget": {"enabled": True},
    }})
    assert resp.status_code == 500
    with app.app_context():
        assert GeneralSettings.version() == 0
        assert GeneralSettings.load().board_centered is False

def test_admin_create_vote_rejects_non_object_body(admin_client):
    resp = admin_client.post("/admin/votes.json", json=[1, 2])
    assert resp.status_code == 422
    assert set(resp.get_json()["errors"]) == {"item_id", "user_id"}
