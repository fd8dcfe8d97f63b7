from urllib.parse import urlparse
from flask import redirect, request, url_for


def safe_next(target):
    """Accept only same-site relative paths as redirect targets."""
    if not target or not isinstance(target, str):
        return None
    target = target.strip()
    if not target.startswith("/") or target.startswith("//") or "\\" in target:
        return None
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc:
        return None
    return target


def redirect_back(endpoint, **values):
    """Redirect to the form's ``next`` field when safe, else to ``endpoint``."""
    target = safe_next(request.form.get("next") or request.args.get("next"))
    return redirect(target or url_for(endpoint, **values))
