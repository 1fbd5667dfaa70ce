from flask import Blueprint

missions_bp = Blueprint("missions", __name__)

from . import routes  # noqa: E402,F401
