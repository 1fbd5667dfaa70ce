import os
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Flask, has_request_context, jsonify, request, session
from flask_login import current_user  # for locale selector
from flask_babel import get_locale

from .extensions import db, migrate, login_manager, csrf, mail, babel
from .config import Config
from .models import User  # registers every model for create_all / migrations
from .security import load_user_from_request

# Blueprints
from .blueprints.errors import errors_bp
from .blueprints.auth import auth_bp
from .blueprints.catalog import catalog_bp
from .blueprints.missions import missions_bp
from .blueprints.profile import profile_bp
from .blueprints.main import main_bp


# Optional: Sentry
def _init_sentry(app):
    dsn = app.config.get("SENTRY_DSN")
    if not dsn:
        return
    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=dsn,
            integrations=[FlaskIntegration(), SqlalchemyIntegration()],
            traces_sample_rate=app.config.get("SENTRY_TRACES_SAMPLE_RATE", 0.0),
            environment=os.getenv("ENV", "development"),
            release=os.getenv("GIT_COMMIT", None),
            send_default_pii=False,
        )
        app.logger.info("Sentry initialized.")
    except Exception as e:
        app.logger.warning(f"Sentry init failed: {e}")


def _init_logging(app):
    # Base level
    level_name = app.config.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    # app.logger is the "robomatch" logger, so service loggers (robomatch.services.*) propagate here
    app.logger.setLevel(level)
    for h in [h for h in app.logger.handlers if getattr(h, "_robomatch", False)]:
        app.logger.removeHandler(h)
        h.close()

    # Ensure log dir exists
    log_dir = Path(app.config.get("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / app.config.get("LOG_FILENAME", "robomatch.log")

    # Formatter: text or JSON
    if app.config.get("LOG_JSON", False):
        import json_log_formatter
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s in %(module)s: %(message)s")

    # Rotating file handler (5MB x 5)
    file_handler = RotatingFileHandler(
        log_path, maxBytes=5_000_000, backupCount=5, encoding="utf-8"
    )
    # Stream to stdout as well (useful on dev/docker)
    stream_handler = logging.StreamHandler()

    for handler in (file_handler, stream_handler):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler._robomatch = True
        app.logger.addHandler(handler)

    app.logger.info("Logging initialized.")


def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)

    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)
    app.config.from_pyfile("config.py", silent=True)
    Path(app.instance_path).mkdir(parents=True, exist_ok=True)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    mail.init_app(app)

    # ---- Babel init (locale from session/user/Accept-Language) ----
    def _select_locale():
        if not has_request_context():
            return None  # mail rendered from the CLI or a test uses the default locale
        return (
            session.get("lang")
            or (getattr(current_user, "language", None) if getattr(current_user, "is_authenticated", False) else None)
            or request.accept_languages.best_match(app.config.get("LANGUAGES", ["en"]))
            or "en"
        )
    babel.init_app(app, locale_selector=_select_locale)

    @app.context_processor
    def inject_i18n_helpers():
        def _safe_get_locale():
            # get_locale() can return None early in the request
            loc = get_locale()
            return str(loc) if loc else "en"
        return {"get_locale": _safe_get_locale}

    # ---- Login: session cookie or bearer token ----
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    login_manager.request_loader(load_user_from_request)

    @login_manager.unauthorized_handler
    def _unauthorized():
        return jsonify({"error": "unauthorized", "message": "Login required."}), 401

    # ---- CSRF: cookie sessions only; token and guest callers carry no session ----
    @app.before_request
    def _csrf_for_cookie_sessions():
        if not app.config.get("WTF_CSRF_ENABLED", True):
            return
        if request.method not in app.config.get("WTF_CSRF_METHODS", {"POST", "PUT", "PATCH", "DELETE"}):
            return
        if request.headers.get("Authorization", "").lower().startswith("bearer "):
            return
        if request.headers.get(app.config.get("GUEST_TOKEN_HEADER", "X-Guest-Token")):
            return
        csrf.protect()

    # Logging must come before blueprints so errors during register are captured
    _init_logging(app)
    _init_sentry(app)

    # Blueprints
    app.register_blueprint(errors_bp)  # error handlers
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(main_bp)
    app.register_blueprint(catalog_bp, url_prefix="/catalog")
    app.register_blueprint(missions_bp, url_prefix="/missions")
    app.register_blueprint(profile_bp, url_prefix="/profile")

    from .cli import register_cli
    register_cli(app)

    return app
