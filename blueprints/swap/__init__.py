from flask import Blueprint

bp = Blueprint("swap", __name__)
from . import routes  # noqa: E402,F401
