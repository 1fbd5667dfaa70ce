# robomatch/blueprints/main/routes.py
import json

from flask import current_app, jsonify, request, session
from flask_login import current_user

from ...exceptions import ValidationError
from ...extensions import db
from ...models.base import utcnow
from ..utils import json_payload
from . import main_bp


# ---- Tiny JSON health route (DB ping + version) ----
@main_bp.get("/status")
def status():
    ok_db = True
    try:
        db.session.execute(db.text("SELECT 1"))
    except Exception as e:
        current_app.logger.error(f"DB health failed: {e}")
        ok_db = False

    payload = {
        "service": "robomatch",
        "version": current_app.config.get("APP_VERSION"),
        "time_utc": utcnow().isoformat() + "Z",
        "checks": {"database": "ok" if ok_db else "fail"},
    }
    code = 200 if ok_db else 503

    # ?pretty=1 -> pretty JSON
    if request.args.get("pretty"):
        return current_app.response_class(
            json.dumps(payload, indent=2) + "\n",
            mimetype="application/json"
        ), code

    return jsonify(payload), code


@main_bp.post("/i18n")
def set_language():
    lang = (json_payload().get("lang") or "en").lower()
    supported = set(current_app.config.get("LANGUAGES", ["en"]))
    if lang not in supported:
        raise ValidationError("Unsupported language.", fields={"lang": lang})

    session["lang"] = lang

    # save on the account too
    if current_user.is_authenticated and current_user.language != lang:
        current_user.language = lang
        db.session.commit()

    current_app.logger.info(f"[i18n] lang set -> {lang}")
    return jsonify({"lang": lang})
