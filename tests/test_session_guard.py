import json
from urllib.parse import unquote, urlparse

from app.models.user import SessionUser
from app.services import session_store
from app.services.session_store import AuthSession
from app.utils.decorators import check_access, LOGIN, LANDING
from app.utils.navigation import safe_next


def _auth(role):
    return AuthSession(SessionUser("someone", role, 3))


def test_check_access_without_session_goes_to_login():
    assert check_access(None) == LOGIN
    assert check_access(None, ("admin",)) == LOGIN


def test_check_access_wrong_role_goes_to_landing():
    assert check_access(_auth("user"), ("admin",)) == LANDING


def test_check_access_allows():
    assert check_access(_auth("admin"), ("admin",)) is None
    assert check_access(_auth("user")) is None


def test_load_returns_none_for_missing_or_malformed(app):
    with app.test_request_context():
        assert session_store.load() is None
        session_store.session["auth"] = "{not json"
        assert session_store.load() is None
        session_store.session["auth"] = json.dumps({"user": "nope"})
        assert session_store.load() is None


def test_save_load_clear_roundtrip(app):
    with app.test_request_context():
        session_store.session["loggedIn"] = "true"
        session_store.save(_auth("admin"))
        assert "loggedIn" not in session_store.session
        loaded = session_store.load()
        assert loaded.user.username == "someone"
        assert loaded.user.is_owner
        session_store.clear()
        assert session_store.load() is None


def test_legacy_flag_is_weaker_evidence(app):
    with app.test_request_context():
        session_store.session["loggedIn"] = "true"
        session_store.session["role"] = "user"
        auth = session_store.load()
        assert auth.legacy is True
        assert auth.user.role == "user"
        # id discovery is never cached onto a legacy record
        session_store.remember_user_id(42)
        assert "auth" not in session_store.session


def test_from_login_response_shapes():
    nested = session_store.from_login_response({"user": {"id": 4, "username": "amy", "role": "admin"}, "token": "abc"}, "amy")
    assert (nested.user.id, nested.user.role, nested.token) == (4, "admin", "abc")
    flat = session_store.from_login_response({"status": "success", "message": "ok"}, "bob")
    assert flat.user.username == "bob"
    assert flat.user.role == "user"
    assert flat.user.id is None


def test_protected_route_redirects_to_login(client):
    resp = client.get("/cvs/")
    assert resp.status_code == 302
    assert "/auth/login" in resp.headers["Location"]
    assert "next=/cvs/" in unquote(resp.headers["Location"])


def test_dashboard_requires_login(client):
    resp = client.get("/")
    assert resp.status_code == 302
    assert "/auth/login" in resp.headers["Location"]


def test_partner_on_owner_route_goes_to_landing(partner_client, backend):
    for path in ("/partners/", "/partners/add", "/cvs/create", "/cvs/inactive"):
        resp = partner_client.get(path)
        assert resp.status_code == 302, path
        assert urlparse(resp.headers["Location"]).path == "/", path
        assert "/auth/login" not in resp.headers["Location"]


def test_legacy_session_reaches_shared_pages(client, backend):
    backend.add("GET", "/applicants", [])
    with client.session_transaction() as sess:
        sess["loggedIn"] = "true"
        sess["role"] = "user"
    assert client.get("/cvs/").status_code == 200
    # legacy partner still may not reach owner pages
    resp = client.get("/cvs/inactive")
    assert resp.status_code == 302
    assert "/auth/login" not in resp.headers["Location"]


def test_login_stores_session_and_returns_to_next(client, backend):
    backend.add("POST", "/login", {"status": "success", "message": "Welcome",
                                   "data": {"user": {"id": 1, "username": "owner", "role": "admin"}, "token": "x"}})
    backend.add("GET", "/applicants", [])
    resp = client.post("/auth/login?next=/cvs/inactive", data={"username": "owner", "password": "pw"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/cvs/inactive")
    with client.session_transaction() as sess:
        stored = json.loads(sess["auth"])
    assert stored == {"user": {"id": 1, "username": "owner", "role": "admin"}, "token": "x"}
    assert client.get("/cvs/inactive").status_code == 200


def test_login_ignores_offsite_next(client, backend):
    backend.add("POST", "/login", {"status": "success", "data": {"user": {"username": "p", "role": "user"}}})
    resp = client.post("/auth/login?next=https://evil.test/", data={"username": "p", "password": "pw"})
    assert resp.headers["Location"].endswith("/")
    assert "evil" not in resp.headers["Location"]


def test_login_failure_shows_message(client, backend):
    backend.add("POST", "/login", {"status": "error", "message": "Invalid credentials"}, status=401)
    resp = client.post("/auth/login", data={"username": "p", "password": "bad"})
    assert resp.status_code == 200
    assert b"Invalid credentials" in resp.data
    with client.session_transaction() as sess:
        assert "auth" not in sess


def test_login_validation_never_calls_backend(client, backend):
    resp = client.post("/auth/login", data={"username": "", "password": ""})
    assert resp.status_code == 200
    assert backend.calls == []


def test_logout_clears_session(owner_client, backend):
    resp = owner_client.post("/auth/logout")
    assert resp.status_code == 302
    with owner_client.session_transaction() as sess:
        assert "auth" not in sess
    assert owner_client.get("/cvs/").status_code == 302


def test_forgot_password_flow(client, backend):
    backend.add("POST", "/forgot-password", {"status": "success", "message": "Password reset successful!"})
    resp = client.post("/auth/forgot-password", data={
        "username": "p", "forgot_key": "k", "new_password": "n1", "confirm_password": "n1",
    })
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/auth/login")
    assert backend.calls[0]["json"] == {"username": "p", "forgot_key": "k", "new_password": "n1", "confirm_password": "n1"}


def test_forgot_password_mismatch_stays_local(client, backend):
    resp = client.post("/auth/forgot-password", data={
        "username": "p", "forgot_key": "k", "new_password": "n1", "confirm_password": "n2",
    })
    assert resp.status_code == 200
    assert b"Passwords do not match." in resp.data
    assert backend.calls == []


def test_safe_next():
    assert safe_next("/cvs/?page=2") == "/cvs/?page=2"
    assert safe_next("//evil.test") is None
    assert safe_next("https://evil.test/") is None
    assert safe_next("cvs") is None
    assert safe_next(None) is None


def test_unknown_page_goes_to_landing(owner_client):
    resp = owner_client.get("/no-such-page")
    assert resp.status_code == 302
    assert urlparse(resp.headers["Location"]).path == "/"
