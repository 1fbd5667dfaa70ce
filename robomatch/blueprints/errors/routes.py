# robomatch/blueprints/errors/routes.py
from flask import current_app, jsonify
from flask_wtf.csrf import CSRFError
from werkzeug.exceptions import HTTPException

from ...exceptions import MissionError
from ...extensions import db
from . import errors_bp


# Domain errors carry their own status code and payload
@errors_bp.app_errorhandler(MissionError)
def err_domain(e: MissionError):
    return jsonify(e.to_dict()), e.status_code


# CSRF - treated as 400 Bad Request
@errors_bp.app_errorhandler(CSRFError)
def err_csrf(e):
    return jsonify({"error": "csrf_error", "message": e.description}), 400


# Fallback for uncaught HTTPException (401/403/404/405/...)
@errors_bp.app_errorhandler(HTTPException)
def err_http(e: HTTPException):
    code = (e.name or "error").lower().replace(" ", "_")
    return jsonify({"error": code, "message": e.description}), e.code


# Last-resort: any other Exception
@errors_bp.app_errorhandler(Exception)
def err_unexpected(e):
    try:
        db.session.rollback()
    except Exception:
        current_app.logger.warning("Rollback after unhandled error failed", exc_info=True)
    current_app.logger.exception("Unhandled error: %s", e)
    # don't leak internals
    return jsonify({"error": "internal_error", "message": "Something went wrong."}), 500
