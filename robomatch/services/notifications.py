# robomatch/services/notifications.py
"""Fire-and-forget notifications for mission events.

Every helper returns a bool and never raises: a failed delivery is logged
and the lifecycle operation that triggered it still succeeds.
"""
import logging

from flask import current_app
from flask_babel import gettext as _

from .email_service import send_email
from ..models.mission import ACCEPTED

log = logging.getLogger(__name__)

MISSION_CREATED = "mission.created"
MISSION_RESPONDED = "mission.responded"
MESSAGE_POSTED = "message.posted"


def _contact_email(user):
    if user is None:
        return None
    prof = user.profile
    return (prof.email if prof and prof.email else None) or user.email


def _mission_link(mission) -> str:
    base = (current_app.config.get("EXTERNAL_BASE_URL") or "").rstrip("/")
    return f"{base}/missions/{mission.id}"


def dispatch(event: str, *, to, subject: str, template: str, **ctx) -> bool:
    if not current_app.config.get("NOTIFICATIONS_ENABLED", True):
        log.debug("notifications disabled, dropping %s", event)
        return False
    try:
        sent = send_email(to=to, subject=subject, template=template, event=event, **ctx)
    except Exception:
        log.exception("notification %s failed", event)
        return False
    if not sent:
        log.warning("notification %s was not delivered to %s", event, to)
    return bool(sent)


def notify_mission_created(mission) -> bool:
    return dispatch(
        MISSION_CREATED,
        to=_contact_email(mission.technician),
        subject=_("New mission request: %(title)s", title=mission.title),
        template="mission_created.html",
        mission=mission,
        link=_mission_link(mission),
    )


def notify_mission_responded(mission) -> bool:
    accepted = mission.status == ACCEPTED
    if accepted:
        subject = _("Your mission request was accepted: %(title)s", title=mission.title)
    else:
        subject = _("Your mission request was declined: %(title)s", title=mission.title)
    return dispatch(
        MISSION_RESPONDED,
        to=mission.client_email,
        subject=subject,
        template="mission_responded.html",
        mission=mission,
        accepted=accepted,
        link=_mission_link(mission),
    )


def notify_new_message(mission, message) -> bool:
    if message.sender_id is not None and message.sender_id == mission.technician_id:
        recipient = mission.client_email
    else:
        recipient = _contact_email(mission.technician)
    return dispatch(
        MESSAGE_POSTED,
        to=recipient,
        subject=_("New message about %(title)s", title=mission.title),
        template="new_message.html",
        mission=mission,
        message=message,
        link=_mission_link(mission),
    )
