from flask import Blueprint
from roadmap.extensions import csrf

# Public, cross-origin endpoints: no session cookies, no CSRF token
bp = Blueprint("widget", __name__)
csrf.exempt(bp)

from . import routes  # noqa: E402,F401
