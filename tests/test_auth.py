from conftest import OPERATOR_PASSWORD, OPERATOR_USERNAME

from dashboard.core import operators as operators_module
from dashboard.core.config import settings
from dashboard.core.operators import ensure_bootstrap_operator
from dashboard.models.user import User


def _login(client, username=OPERATOR_USERNAME, password=OPERATOR_PASSWORD):
    return client.post("/auth/login", json={"username": username, "password": password})


def test_login_sets_session_cookies(client, operator):
    resp = _login(client)

    assert resp.status_code == 200
    assert resp.json() == {"id": str(operator.id), "username": OPERATOR_USERNAME}
    assert "access_token" in resp.cookies
    assert "refresh_token" in resp.cookies

    session = client.get("/auth/session")
    assert session.status_code == 200
    assert session.json()["username"] == OPERATOR_USERNAME


def test_login_mismatch_returns_inline_message(client, operator):
    resp = _login(client, password="wrong")
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Invalid username or password"}

    resp = _login(client, username="nobody")
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Invalid username or password"}

    # no lockout after failures
    assert _login(client).status_code == 200


def test_session_requires_cookie(client):
    resp = client.get("/auth/session")
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Not authenticated"}


def test_garbage_access_token_rejected(client):
    client.cookies.set("access_token", "not-a-jwt")
    resp = client.get("/auth/session")
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Invalid access token"}


def test_refresh_rotates_token(client, operator, session_factory):
    _login(client)
    with session_factory() as db:
        before = db.get(User, operator.id).refresh_jti

    resp = client.post("/auth/refresh")
    assert resp.status_code == 200

    with session_factory() as db:
        after = db.get(User, operator.id).refresh_jti
    assert after and after != before


def test_logout_revokes_refresh_and_ends_session(client, operator, session_factory):
    _login(client)
    refresh_token = client.cookies.get("refresh_token")

    resp = client.post("/auth/logout")
    assert resp.status_code == 200
    assert client.get("/auth/session").status_code == 401

    with session_factory() as db:
        assert db.get(User, operator.id).refresh_jti is None

    client.cookies.set("refresh_token", refresh_token)
    resp = client.post("/auth/refresh")
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Refresh token revoked"}


def test_logout_without_session_is_ok(client):
    assert client.post("/auth/logout").json() == {"ok": True}


def test_bootstrap_operator_created_once(session_factory, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_USERNAME", "ops")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "s3cret")
    assert operators_module.settings is settings

    with session_factory() as db:
        user = ensure_bootstrap_operator(db)
        assert user is not None
        assert user.username == "ops"
        assert ensure_bootstrap_operator(db) is None
        assert db.query(User).count() == 1


def test_bootstrap_skipped_without_credentials(session_factory, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_USERNAME", None)
    with session_factory() as db:
        assert ensure_bootstrap_operator(db) is None
        assert db.query(User).count() == 0


def test_session_is_read_from_access_claims(client, operator, session_factory):
    _login(client)
    with session_factory() as db:
        db.query(User).delete()
        db.commit()

    # the session endpoint trusts the signed claims; data routes still check the operator
    session = client.get("/auth/session")
    assert session.status_code == 200
    assert session.json() == {"id": str(operator.id), "username": OPERATOR_USERNAME}

    resp = client.get("/dashboard/metrics")
    assert resp.status_code == 401
    assert resp.json() == {"detail": "User not found"}


def test_refresh_token_is_not_an_access_token(client, operator):
    _login(client)
    refresh_token = client.cookies.get("refresh_token")
    client.cookies.clear()
    client.cookies.set("access_token", refresh_token)

    resp = client.get("/auth/session")
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Invalid access token"}
