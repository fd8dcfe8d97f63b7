"""Authentication record kept in the signed session cookie.

The record is stored as one serialized JSON blob under ``AUTH_KEY``. Older
clients only left a ``loggedIn`` flag (and sometimes a bare ``role``) behind;
`load()` still accepts that as weaker evidence of a login, but nothing writes
it any more. Callers go through `load()`/`save()`/`clear()` only.
"""

import json

from flask import current_app, session

from ..models.user import SessionUser, ROLE_PARTNER

AUTH_KEY = "auth"
LEGACY_FLAG_KEY = "loggedIn"
LEGACY_ROLE_KEY = "role"


class AuthSession:
    def __init__(self, user, token=None, legacy=False):
        self.user = user
        self.token = token
        self.legacy = legacy

    def to_dict(self):
        d = {"user": self.user.to_dict()}
        if self.token:
            d["token"] = self.token
        return d

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            return None
        user = SessionUser.from_dict(data.get("user"))
        if user is None or not user.username:
            return None
        return cls(user, token=data.get("token"))

    def __repr__(self):
        return f"<AuthSession user={self.user!r} legacy={self.legacy}>"


def from_login_response(data, username):
    """Build the auth record from whatever the login endpoint answered.

    Seen shapes: ``{"user": {...}, "token": ...}`` and a flat user object.
    A missing role means a partner account.
    """
    data = data if isinstance(data, dict) else {}
    token = data.get("token") or data.get("access_token")
    user_data = data.get("user") if isinstance(data.get("user"), dict) else data
    user = SessionUser(
        username=user_data.get("username") or username,
        role=user_data.get("role") or ROLE_PARTNER,
        id=user_data.get("id"),
    )
    return AuthSession(user, token=token)


def load():
    raw = session.get(AUTH_KEY)
    if raw:
        try:
            auth = AuthSession.from_dict(json.loads(raw))
        except (TypeError, ValueError):
            current_app.logger.debug("Discarding malformed auth record")
            auth = None
        if auth is not None:
            return auth

    if session.get(LEGACY_FLAG_KEY) == "true":
        role = session.get(LEGACY_ROLE_KEY) or ""
        return AuthSession(SessionUser(username="", role=role), legacy=True)
    return None


def save(auth):
    session[AUTH_KEY] = json.dumps(auth.to_dict())
    session.pop(LEGACY_FLAG_KEY, None)
    session.pop(LEGACY_ROLE_KEY, None)


def clear():
    for key in (AUTH_KEY, LEGACY_FLAG_KEY, LEGACY_ROLE_KEY):
        session.pop(key, None)


def current_user_record():
    auth = load()
    return auth.user if auth else None


def remember_user_id(user_id):
    """Cache a lazily discovered backend id into the stored record."""
    auth = load()
    if auth is None or auth.legacy:
        return
    auth.user.id = user_id
    save(auth)
