# robomatch/blueprints/missions/routes.py
from flask import current_app, jsonify, request
from flask_login import current_user

from ...principals import AuthenticatedPrincipal, GuestPrincipal, generate_guest_token
from ...security import current_principal, guest_token_from_request
from ...services import missions as engine
from ..utils import validated
from . import missions_bp
from .forms import MessageForm, MissionRequestForm, RespondForm


def _set_guest_cookie(resp, token):
    resp.set_cookie(
        current_app.config.get("GUEST_COOKIE_NAME", "guest_token"),
        token,
        max_age=60 * 60 * 24 * 365,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite="Lax",
    )
    return resp


# -----------------
# Requests
# -----------------

@missions_bp.post("")
def create():
    form = validated(MissionRequestForm)

    issued = None
    if current_user.is_authenticated:
        principal = AuthenticatedPrincipal(user_id=current_user.id)
    else:
        token = guest_token_from_request()
        if token is None:
            token = issued = generate_guest_token()
        principal = GuestPrincipal(token=token, name=form.client_name.data, email=form.client_email.data)

    mission = engine.submit_mission(
        principal,
        technician_id=form.technician_id.data,
        title=form.title.data,
        description=form.description.data,
        desired_date=form.desired_date.data,
        desired_time=form.desired_time.data,
        idempotency_key=form.idempotency_key.data,
    )

    payload = {"mission": mission.to_dict()}
    if issued:
        payload["guest_token"] = issued
    resp = jsonify(payload)
    resp.status_code = 201
    if issued:
        _set_guest_cookie(resp, issued)
    return resp


@missions_bp.get("")
def index():
    principal = current_principal(allow_guest=True)
    role = request.args.get("role", "client")
    status = request.args.get("status") or None

    rows = engine.missions_for_principal(principal, role, status)
    unread = engine.unread_counts_by_mission(principal)
    items = []
    for m in rows:
        data = m.to_dict()
        data["unread_count"] = unread.get(m.id, 0)
        items.append(data)
    return jsonify({"items": items, "role": role, "status": status})


@missions_bp.get("/summary")
def summary():
    principal = current_principal(allow_guest=True)
    return jsonify({
        "pending_count": engine.pending_mission_count(principal),
        "unread_count": engine.unread_message_count(principal),
    })


@missions_bp.get("/<int:mission_id>")
def detail(mission_id):
    principal = current_principal(allow_guest=True)
    mission = engine.get_mission(principal, mission_id)
    return jsonify({"mission": mission.to_dict()})


# -----------------
# Lifecycle
# -----------------

@missions_bp.post("/<int:mission_id>/respond")
def respond(mission_id):
    principal = current_principal()
    form = validated(RespondForm)
    mission = engine.respond_to_mission(principal, mission_id, form.decision.data)
    return jsonify({"mission": mission.to_dict()})


@missions_bp.post("/<int:mission_id>/complete")
def complete(mission_id):
    principal = current_principal(allow_guest=True)
    mission = engine.complete_mission(principal, mission_id)
    return jsonify({"mission": mission.to_dict()})


@missions_bp.get("/<int:mission_id>/contact")
def contact(mission_id):
    principal = current_principal(allow_guest=True)
    card = engine.counterparty_contact(principal, mission_id)
    return jsonify({"contact": card.to_dict()})


# -----------------
# Messaging
# -----------------

@missions_bp.get("/<int:mission_id>/messages")
def messages(mission_id):
    principal = current_principal(allow_guest=True)
    rows = engine.thread(principal, mission_id)
    return jsonify({"items": [m.to_dict() for m in rows]})


@missions_bp.post("/<int:mission_id>/messages")
def post_message(mission_id):
    principal = current_principal(allow_guest=True)
    form = validated(MessageForm)
    msg = engine.post_message(principal, mission_id, form.body.data)
    return jsonify({"message": msg.to_dict()}), 201


@missions_bp.post("/<int:mission_id>/read")
def mark_read(mission_id):
    principal = current_principal(allow_guest=True)
    changed = engine.mark_thread_read(principal, mission_id)
    return jsonify({"marked_read": changed})
