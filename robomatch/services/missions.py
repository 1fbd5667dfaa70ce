# robomatch/services/missions.py
"""Mission lifecycle engine.

Owns the mission state machine (pending -> accepted|declined,
accepted -> completed), the gate that hides contact details and messaging
until a technician accepts, and the rules for who may touch which mission.

Every operation receives the caller as an explicit principal; nothing here
reads the request or the logged-in user.
"""
import logging
from dataclasses import dataclass, asdict
from datetime import date, time
from typing import Optional

from sqlalchemy import func, or_

from ..extensions import db
from ..exceptions import Forbidden, InvalidStateTransition, NotFound, ValidationError
from ..models.base import utcnow
from ..models.message import Message
from ..models.mission import (
    ACCEPTED,
    COMPLETED,
    DECLINED,
    PENDING,
    STATUSES,
    Mission,
)
from ..models.user import ROLE_CLIENT, ROLE_TECHNICIAN, User
from ..principals import GuestPrincipal
from . import notifications

log = logging.getLogger(__name__)

DECISIONS = {"accept": ACCEPTED, "decline": DECLINED}
PARTY_ROLES = (ROLE_CLIENT, ROLE_TECHNICIAN)

TITLE_MAX = 200
BODY_MAX = 5000


@dataclass(frozen=True)
class ContactCard:
    name: str
    email: Optional[str]
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    is_guest: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


# -----------------
# Party checks
# -----------------

def is_client(principal, mission: Mission) -> bool:
    if principal.is_guest:
        return mission.guest_token is not None and mission.guest_token == principal.token
    return mission.client_id is not None and mission.client_id == principal.user_id


def is_technician(principal, mission: Mission) -> bool:
    return not principal.is_guest and mission.technician_id == principal.user_id


def is_party(principal, mission: Mission) -> bool:
    return is_client(principal, mission) or is_technician(principal, mission)


def _client_clause(principal):
    if principal.is_guest:
        return Mission.guest_token == principal.token
    return Mission.client_id == principal.user_id


def _party_clause(principal):
    if principal.is_guest:
        return Mission.guest_token == principal.token
    return or_(Mission.client_id == principal.user_id, Mission.technician_id == principal.user_id)


def _not_sent_by(principal):
    if principal.is_guest:
        return or_(Message.sender_guest_token.is_(None), Message.sender_guest_token != principal.token)
    return or_(Message.sender_id.is_(None), Message.sender_id != principal.user_id)


def _get_mission(mission_id) -> Mission:
    mission = db.session.get(Mission, mission_id)
    if mission is None:
        raise NotFound("Mission not found.", mission_id=mission_id)
    return mission


def _require_party(principal, mission: Mission):
    if not is_party(principal, mission):
        raise Forbidden("You are not a party to this mission.", mission_id=mission.id)


def _require_engaged(mission: Mission, message: str):
    if not mission.contact_unlocked:
        raise Forbidden(message, mission_id=mission.id, status=mission.status)


def _compare_and_set(mission: Mission, expected: str, values: dict):
    """Apply ``values`` only if the stored status still equals ``expected``."""
    mission_id = mission.id
    changed = (
        Mission.query
        .filter(Mission.id == mission_id, Mission.status == expected)
        .update(values, synchronize_session=False)
    )
    if changed != 1:
        db.session.rollback()
        current = db.session.get(Mission, mission_id)
        raise InvalidStateTransition(
            f"Mission is no longer {expected}.",
            mission_id=mission_id,
            status=current.status if current else None,
        )
    db.session.commit()
    db.session.refresh(mission)


# -----------------
# Requester identity
# -----------------

def _requester_fields(principal) -> dict:
    if isinstance(principal, GuestPrincipal):
        name = (principal.name or "").strip()
        email = (principal.email or "").strip().lower()
        errors = {}
        if not name:
            errors["client_name"] = "Name is required."
        if not email or "@" not in email:
            errors["client_email"] = "A valid email is required."
        if errors:
            raise ValidationError("Guest requests need a name and an email.", fields=errors)
        return {"guest_token": principal.token, "client_name": name, "client_email": email}

    user = db.session.get(User, principal.user_id)
    if user is None or user.profile is None:
        raise NotFound("Client account not found.", user_id=principal.user_id)
    prof = user.profile
    return {
        "client_id": user.id,
        "client_name": prof.full_name or user.email,
        "client_email": prof.email or user.email,
    }


def _get_technician(technician_id) -> User:
    tech = db.session.get(User, technician_id) if technician_id is not None else None
    if tech is None or tech.profile is None or tech.profile.role != ROLE_TECHNICIAN or not tech.is_active:
        raise NotFound("Technician not found.", technician_id=technician_id)
    return tech


# -----------------
# Operations
# -----------------

def submit_mission(
    principal,
    technician_id: int,
    title: str,
    description: Optional[str] = None,
    desired_date: Optional[date] = None,
    desired_time: Optional[time] = None,
    idempotency_key: Optional[str] = None,
) -> Mission:
    """Create a pending mission addressed to one technician.

    With an ``idempotency_key`` a repeated submit by the same principal
    returns the mission created the first time; reusing the key for another
    technician or title is a ValidationError.
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required.", fields={"title": "Title is required."})
    if len(title) > TITLE_MAX:
        raise ValidationError("Title is too long.", fields={"title": f"At most {TITLE_MAX} characters."})
    if desired_time is not None and desired_date is None:
        raise ValidationError("A desired time needs a desired date.", fields={"desired_date": "Required with a time."})

    key = (idempotency_key or "").strip() or None
    if key:
        existing = (
            Mission.query
            .filter(_client_clause(principal), Mission.idempotency_key == key)
            .first()
        )
        if existing is not None:
            if existing.technician_id != technician_id or existing.title != title:
                raise ValidationError(
                    "This idempotency key was already used for a different request.",
                    fields={"idempotency_key": key},
                    mission_id=existing.id,
                )
            log.info("Duplicate submit by %s (key=%s) returns mission %s", principal, key, existing.id)
            return existing

    tech = _get_technician(technician_id)
    if not principal.is_guest and principal.user_id == tech.id:
        raise ValidationError("You cannot request a mission from yourself.")

    mission = Mission(
        technician_id=tech.id,
        title=title,
        description=(description or "").strip() or None,
        desired_date=desired_date,
        desired_time=desired_time,
        status=PENDING,
        idempotency_key=key,
        **_requester_fields(principal),
    )
    db.session.add(mission)
    db.session.commit()
    log.info("Mission %s submitted by %s to technician %s", mission.id, principal, tech.id)

    notifications.notify_mission_created(mission)
    return mission


def respond_to_mission(principal, mission_id: int, decision: str) -> Mission:
    target = DECISIONS.get((decision or "").strip().lower())
    if target is None:
        raise ValidationError("Decision must be 'accept' or 'decline'.", fields={"decision": decision})

    mission = _get_mission(mission_id)
    if not is_technician(principal, mission):
        raise Forbidden("Only the requested technician can respond to this mission.", mission_id=mission.id)
    if mission.status != PENDING:
        raise InvalidStateTransition(
            f"Mission is already {mission.status}.", mission_id=mission.id, status=mission.status
        )

    now = utcnow()
    values = {"status": target, "updated_at": now}
    if target == ACCEPTED:
        values["accepted_at"] = now
    else:
        values["declined_at"] = now
    _compare_and_set(mission, PENDING, values)
    log.info("Mission %s %s by technician %s", mission.id, target, principal.user_id)

    notifications.notify_mission_responded(mission)
    return mission


def complete_mission(principal, mission_id: int) -> Mission:
    mission = _get_mission(mission_id)
    _require_party(principal, mission)
    if mission.status != ACCEPTED:
        raise InvalidStateTransition(
            f"Only accepted missions can be completed (mission is {mission.status}).",
            mission_id=mission.id,
            status=mission.status,
        )

    now = utcnow()
    _compare_and_set(mission, ACCEPTED, {"status": COMPLETED, "completed_at": now, "updated_at": now})
    log.info("Mission %s completed by %s", mission.id, principal)
    return mission


def get_mission(principal, mission_id: int) -> Mission:
    mission = _get_mission(mission_id)
    _require_party(principal, mission)
    return mission


def missions_for_principal(principal, role: str, status: Optional[str] = None) -> list[Mission]:
    """Missions where the caller is the ``role`` party, newest first."""
    role = (role or "").strip().lower()
    if role not in PARTY_ROLES:
        raise ValidationError("Role must be 'client' or 'technician'.", fields={"role": role})
    if status is not None and status not in STATUSES:
        raise ValidationError(f"Unknown status: {status}.", fields={"status": status})

    if role == ROLE_TECHNICIAN:
        if principal.is_guest:
            return []
        qry = Mission.query.filter(Mission.technician_id == principal.user_id)
    else:
        qry = Mission.query.filter(_client_clause(principal))

    if status:
        qry = qry.filter(Mission.status == status)
    return qry.order_by(Mission.created_at.desc(), Mission.id.desc()).all()


def counterparty_contact(principal, mission_id: int) -> ContactCard:
    mission = _get_mission(mission_id)
    _require_party(principal, mission)
    _require_engaged(mission, "Contact details are shared once the mission is accepted.")

    if is_technician(principal, mission):
        if mission.client_id is None:
            return ContactCard(name=mission.client_name, email=mission.client_email, is_guest=True)
        client = mission.client
        prof = client.profile
        return ContactCard(
            name=(prof.full_name if prof else "") or mission.client_name,
            email=(prof.email if prof else None) or client.email,
            phone=prof.phone if prof else None,
            linkedin_url=prof.linkedin_url if prof else None,
        )

    tech = mission.technician
    prof = tech.profile
    return ContactCard(
        name=prof.full_name or tech.email,
        email=prof.email or tech.email,
        phone=prof.phone,
        linkedin_url=prof.linkedin_url,
    )


def post_message(principal, mission_id: int, body: str) -> Message:
    mission = _get_mission(mission_id)
    _require_party(principal, mission)
    # accepted only ever moves to completed, so this gate cannot be raced open
    _require_engaged(mission, "Messaging opens once the mission is accepted.")

    body = (body or "").strip()
    if not body:
        raise ValidationError("Message cannot be empty.", fields={"body": "Required."})
    if len(body) > BODY_MAX:
        raise ValidationError("Message is too long.", fields={"body": f"At most {BODY_MAX} characters."})

    msg = Message(
        mission_id=mission.id,
        sender_id=None if principal.is_guest else principal.user_id,
        sender_guest_token=principal.token if principal.is_guest else None,
        body=body,
    )
    db.session.add(msg)
    db.session.commit()
    log.info("Message %s posted on mission %s by %s", msg.id, mission.id, principal)

    notifications.notify_new_message(mission, msg)
    return msg


def thread(principal, mission_id: int) -> list[Message]:
    mission = _get_mission(mission_id)
    _require_party(principal, mission)
    _require_engaged(mission, "Messaging opens once the mission is accepted.")
    return (
        Message.query
        .filter(Message.mission_id == mission.id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )


def mark_thread_read(principal, mission_id: int) -> int:
    """Stamp ``read_at`` on the counterparty's unread messages. Idempotent."""
    mission = _get_mission(mission_id)
    _require_party(principal, mission)

    changed = (
        Message.query
        .filter(
            Message.mission_id == mission.id,
            Message.read_at.is_(None),
            _not_sent_by(principal),
        )
        .update({"read_at": utcnow()}, synchronize_session=False)
    )
    db.session.commit()
    if changed:
        log.debug("Marked %s message(s) read on mission %s for %s", changed, mission.id, principal)
    return changed


# -----------------
# Dashboard counters
# -----------------

def pending_mission_count(principal) -> int:
    if principal.is_guest:
        return 0
    return Mission.query.filter_by(technician_id=principal.user_id, status=PENDING).count()


def _unread_query(principal):
    return (
        db.session.query(Message)
        .join(Mission, Message.mission_id == Mission.id)
        .filter(Message.read_at.is_(None), _not_sent_by(principal), _party_clause(principal))
    )


def unread_message_count(principal) -> int:
    return _unread_query(principal).count()


def unread_counts_by_mission(principal) -> dict[int, int]:
    rows = (
        _unread_query(principal)
        .with_entities(Message.mission_id, func.count(Message.id))
        .group_by(Message.mission_id)
        .all()
    )
    return {mission_id: count for mission_id, count in rows}
