from flask import Blueprint

bp = Blueprint("substitution", __name__)
from . import routes  # noqa: E402,F401
