from functools import wraps
from flask import flash, redirect, url_for
from ..extensions import login_manager
from ..services import session_store
from ..models.user import ROLE_OWNER

LOGIN = "login"
LANDING = "landing"


def check_access(auth, required_roles=()):
    """Return where to send the request, or None when it may proceed.

    Unauthenticated requests go to the login page; authenticated ones lacking
    the role go to the landing page, never back to login.
    """
    if auth is None:
        return LOGIN
    if required_roles and auth.user.role not in required_roles:
        return LANDING
    return None


def role_required(*roles):
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            target = check_access(session_store.load(), roles)
            if target == LOGIN:
                return login_manager.unauthorized()
            if target == LANDING:
                flash("You do not have access to that page.", "warning")
                return redirect(url_for("index"))
            return view(*args, **kwargs)
        return wrapped
    return decorator


admin_required = role_required(ROLE_OWNER)
