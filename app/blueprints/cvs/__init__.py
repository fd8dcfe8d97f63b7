from flask import Blueprint

bp = Blueprint("cvs", __name__)

from . import routes  # noqa: E402,F401
