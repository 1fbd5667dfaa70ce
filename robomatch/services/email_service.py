# robomatch/services/email_service.py
import logging

from flask import current_app, render_template
from flask_mail import Message
from jinja2 import TemplateNotFound

from ..extensions import mail

log = logging.getLogger(__name__)


def _render(template: str, ctx: dict):
    """HTML body from ``email/<template>`` and, if it exists, the ``.txt`` sibling."""
    html = render_template(f"email/{template}", **ctx)
    try:
        text = render_template(f"email/{template.rsplit('.', 1)[0]}.txt", **ctx)
    except TemplateNotFound:
        text = None
    return html, text


def send_email(*, to, subject, template, event="email", **ctx) -> bool:
    """Send one templated mail; ``event`` tags every log line for tracing.

    Returns False instead of raising: mission notifications are best-effort.
    """
    recipients = [to] if isinstance(to, str) else [r for r in (to or []) if r]
    if not recipients:
        log.warning("[%s] no recipient, mail dropped", event)
        return False

    sender = current_app.config.get("MAIL_DEFAULT_SENDER") or current_app.config.get("MAIL_USERNAME")
    if not sender:
        log.error("[%s] no sender configured, mail to %s dropped", event, recipients)
        return False

    try:
        html, text = _render(template, ctx)
        msg = Message(subject=subject, recipients=recipients, sender=sender, body=text, html=html)
        if current_app.config.get("MAIL_SUPPRESS_SEND"):
            log.info("[%s] MAIL_SUPPRESS_SEND, would send to %s | %s", event, recipients, subject)
            return True
        mail.send(msg)
    except Exception:
        log.exception("[%s] sending to %s failed", event, recipients)
        return False

    log.info("[%s] sent to %s | %s", event, recipients, subject)
    return True
