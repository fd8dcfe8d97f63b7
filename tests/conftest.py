import json
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app
from app.extensions import api

BASE_URL = "http://api.test"


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None, content_type="application/json"):
        self.status_code = status_code
        if text is None:
            text = "" if body is None else json.dumps(body)
        self.text = text
        self.headers = {"content-type": content_type} if content_type else {}


class FakeBackend:
    """Stands in for requests.Session; answers from a routing table."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, body=None, status=200, **kwargs):
        self.routes[(method, path)] = FakeResponse(status, body, **kwargs)
        return self

    def on(self, method, path, handler):
        self.routes[(method, path)] = handler
        return self

    def request(self, method, url, data=None, headers=None):
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        body = json.loads(data) if data else None
        self.calls.append({"method": method, "path": path, "json": body, "headers": headers})
        route = self.routes.get((method, path.split("?")[0]))
        if route is None:
            return FakeResponse(404, {"message": "not found"})
        if callable(route):
            return route(method, path, body)
        return route

    def called(self, method, path):
        return [c for c in self.calls if c["method"] == method and c["path"] == path]


@pytest.fixture
def app():
    app = create_app("config.TestConfig")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def backend(app, monkeypatch):
    fake = FakeBackend()
    monkeypatch.setattr(api, "http", fake)
    return fake


def login_as(client, username, role, user_id=None):
    user = {"username": username, "role": role}
    if user_id is not None:
        user["id"] = user_id
    with client.session_transaction() as sess:
        sess["auth"] = json.dumps({"user": user, "token": "t0k"})
        sess["_user_id"] = username


@pytest.fixture
def owner_client(client):
    login_as(client, "owner", "admin", 1)
    return client


@pytest.fixture
def partner_client(client):
    login_as(client, "partner", "user", 7)
    return client
