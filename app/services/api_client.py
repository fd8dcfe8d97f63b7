"""HTTP client for the placement backend.

Every page of the console goes through `ApiClient`. The backend usually wraps
results as ``{status, message, data}`` but some endpoints answer with a bare
list or object, and a few answer with plain text, so decoding is tolerant:

- ``request()`` returns the unwrapped ``data`` (or the bare body / raw text)
  and raises `ApiError` for transport failures and non-2xx responses.
- ``call()`` returns an `ApiResult` that keeps the envelope's status and
  message for callers that show them to the user (login, create, update).

There is no retry, no timeout and no cancellation: one call, one answer.
"""

import json
import logging
from urllib.parse import quote, urlencode

import requests


class ApiError(Exception):
    def __init__(self, message, status=None, payload=None):
        super().__init__(message)
        self.message = message
        # None for transport failures (DNS, refused connection)
        self.status = status
        self.payload = payload

    def __repr__(self):
        return f"<ApiError status={self.status} message={self.message!r}>"


class ApiResult:
    """Single shape handed to callers that need the envelope."""

    def __init__(self, ok, data=None, message=None, status=None, payload=None):
        self.ok = ok
        self.data = data
        self.message = message
        self.status = status
        self.payload = payload

    def __bool__(self):
        return self.ok

    def __repr__(self):
        return f"<ApiResult ok={self.ok} status={self.status} message={self.message!r}>"


SUCCESS_STATUSES = ("success", "ok", "200", "201")


def as_list(value):
    return value if isinstance(value, list) else []


def unwrap(body):
    if isinstance(body, dict) and body.get("data") is not None:
        return body["data"]
    return body


def _to_query(query):
    if not query:
        return ""
    params = {}
    for k, v in query.items():
        if v is None:
            continue
        params[k] = str(v).lower() if isinstance(v, bool) else str(v)
    s = urlencode(params)
    return f"?{s}" if s else ""


def _segment(value):
    return quote(str(value), safe="")


class ApiClient:
    def __init__(self):
        self.base_url = ""
        self.login_url = None
        self.forgot_password_url = None
        self.http = None
        self.logger = logging.getLogger(__name__)

    def init_app(self, app):
        self.base_url = (app.config.get("API_BASE_URL") or "").rstrip("/")
        self.login_url = app.config.get("API_LOGIN_URL")
        self.forgot_password_url = app.config.get("API_FORGOT_PASSWORD_URL")
        self.http = requests.Session()
        # app.logger stays usable from the dashboard worker threads
        self.logger = app.logger
        if not self.base_url:
            self.logger.warning("API_BASE_URL is not defined; backend calls will fail until it is configured")
        app.extensions["api_client"] = self

    # --- transport -----------------------------------------------------

    def _fetch(self, path, method="GET", json_body=None, headers=None, url=None):
        """Send one request and return the decoded body, never unwrapped."""
        target = url or f"{self.base_url}{path}"
        merged = {"Content-Type": "application/json"}
        merged.update(headers or {})
        data = json.dumps(json_body) if json_body is not None else None

        self.logger.debug("%s %s", method, target)
        try:
            resp = self.http.request(method, target, data=data, headers=merged)
        except requests.RequestException as e:
            self.logger.exception("Backend request failed: %s %s", method, target)
            raise ApiError(f"Network error: {e}") from e

        text = resp.text or ""
        ok = 200 <= resp.status_code < 300
        content_type = resp.headers.get("content-type", "") or ""

        if "application/json" not in content_type:
            if not ok:
                raise ApiError(text or f"HTTP {resp.status_code}", resp.status_code, text)
            return text

        try:
            body = json.loads(text) if text else None
        except ValueError:
            if not ok:
                raise ApiError("Invalid JSON response", resp.status_code, text)
            return text

        if not ok:
            msg = None
            if isinstance(body, dict):
                msg = body.get("message") or body.get("error")
            raise ApiError(msg or f"HTTP {resp.status_code}", resp.status_code, body)
        return body

    def request(self, path, method="GET", json=None, headers=None, url=None):
        return unwrap(self._fetch(path, method=method, json_body=json, headers=headers, url=url))

    def call(self, path, method="GET", json=None, headers=None, url=None):
        try:
            body = self._fetch(path, method=method, json_body=json, headers=headers, url=url)
        except ApiError as e:
            return ApiResult(False, message=e.message, status=e.status, payload=e.payload)

        if isinstance(body, dict):
            env_status = body.get("status")
            ok = env_status is None or str(env_status).lower() in SUCCESS_STATUSES
            return ApiResult(ok, data=unwrap(body), message=body.get("message"), status=env_status, payload=body)
        return ApiResult(True, data=body, payload=body)

    # --- auth ----------------------------------------------------------

    def login(self, username, password):
        return self.call("/login", method="POST", url=self.login_url,
                         json={"username": username, "password": password})

    def forgot_password(self, username, forgot_key, new_password, confirm_password=None):
        payload = {"username": username, "forgot_key": forgot_key, "new_password": new_password}
        if confirm_password is not None:
            payload["confirm_password"] = confirm_password
        return self.call("/forgot-password", method="POST", url=self.forgot_password_url, json=payload)

    # --- users / partners ----------------------------------------------

    def create_user(self, payload):
        self.logger.info("Creating user %s (role=%s)", payload.get("username"), payload.get("role"))
        return self.call("/users/create", method="POST", json=payload)

    def list_users(self, **query):
        return self.request(f"/users{_to_query(query)}")

    def update_user(self, username, payload):
        self.logger.info("Updating user %s", username)
        return self.request(f"/users/update/{_segment(username)}", method="PUT", json=payload)

    def delete_user(self, username):
        self.logger.info("Deleting user %s", username)
        return self.request(f"/users/delete/{_segment(username)}", method="DELETE")

    def list_partners(self):
        return self.request("/partners")

    # --- applicants ----------------------------------------------------

    def create_applicant(self, payload):
        self.logger.info("Creating applicant")
        return self.call("/applicants/create", method="POST", json=payload)

    def list_applicants(self, **query):
        return self.request(f"/applicants{_to_query(query)}")

    def update_applicant(self, identifier, payload):
        self.logger.info("Updating applicant %s", identifier)
        return self.call(f"/applicants/update/{_segment(identifier)}", method="PUT", json=payload)

    def delete_applicant(self, applicant_id):
        self.logger.info("Deleting applicant %s", applicant_id)
        return self.request(f"/applicants/delete/{_segment(applicant_id)}", method="DELETE")

    def toggle_active(self, applicant_id):
        self.logger.info("Toggling active flag of applicant %s", applicant_id)
        return self.request(f"/applicants/{_segment(applicant_id)}/", method="POST")

    def select_applicant(self, applicant_id, user_id):
        # same endpoint selects and unselects
        self.logger.info("Toggling selection of applicant %s by user %s", applicant_id, user_id)
        return self.request(f"/selection/{_segment(applicant_id)}/", method="POST", json={"user_id": user_id})

    # --- metrics -------------------------------------------------------

    def total_applicants(self):
        return self.request("/total-applicants/")

    def selected_applicants(self):
        return self.request("/selected-applicants/")

    def selected_by_user(self, user_id):
        return self.request(f"/selected-by-user/{_segment(user_id)}")

    def active_inactive_applicants(self):
        return self.request("/active-inactive-applicants")
