# robomatch/models/mission.py
from ..extensions import db
from .base import utcnow, isoformat

PENDING = "pending"
ACCEPTED = "accepted"
DECLINED = "declined"
COMPLETED = "completed"

STATUSES = (PENDING, ACCEPTED, DECLINED, COMPLETED)

# Allowed moves; declined and completed are terminal
TRANSITIONS = {
    PENDING: frozenset({ACCEPTED, DECLINED}),
    ACCEPTED: frozenset({COMPLETED}),
    DECLINED: frozenset(),
    COMPLETED: frozenset(),
}

# Statuses in which contact details and messaging are unlocked
ENGAGED_STATUSES = frozenset({ACCEPTED, COMPLETED})


class Mission(db.Model):
    __tablename__ = "mission"

    id = db.Column(db.Integer, primary_key=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    desired_date = db.Column(db.Date)
    desired_time = db.Column(db.Time)

    status = db.Column(db.String(20), default=PENDING, nullable=False, index=True)  # pending|accepted|declined|completed

    # Requester: an account (client_id) or a guest browser token, never both
    client_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True, index=True)
    guest_token = db.Column(db.String(128), nullable=True, index=True)
    client_name = db.Column(db.String(160), nullable=False)
    client_email = db.Column(db.String(255), nullable=False)

    technician_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)

    idempotency_key = db.Column(db.String(64), index=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    accepted_at = db.Column(db.DateTime)
    declined_at = db.Column(db.DateTime)
    completed_at = db.Column(db.DateTime)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    client = db.relationship("User", foreign_keys=[client_id], lazy="joined")
    technician = db.relationship("User", foreign_keys=[technician_id], lazy="joined")

    messages = db.relationship("Message", back_populates="mission", lazy="dynamic")

    __table_args__ = (
        db.CheckConstraint(
            "(client_id IS NULL) <> (guest_token IS NULL)",
            name="ck_mission_single_requester",
        ),
        db.CheckConstraint(
            "(accepted_at IS NOT NULL) = (status IN ('accepted', 'completed'))",
            name="ck_mission_accepted_at",
        ),
        db.Index("ix_mission_technician_status", "technician_id", "status"),
    )

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self.status]

    @property
    def contact_unlocked(self) -> bool:
        return self.status in ENGAGED_STATUSES

    def can_transition_to(self, target: str) -> bool:
        return target in TRANSITIONS.get(self.status, ())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "desired_date": isoformat(self.desired_date),
            "desired_time": self.desired_time.strftime("%H:%M") if self.desired_time else None,
            "status": self.status,
            "client_id": self.client_id,
            "is_guest_request": self.guest_token is not None,
            "client_name": self.client_name,
            "technician_id": self.technician_id,
            "created_at": isoformat(self.created_at),
            "accepted_at": isoformat(self.accepted_at),
            "declined_at": isoformat(self.declined_at),
            "completed_at": isoformat(self.completed_at),
        }

    def __repr__(self):
        return f"<Mission id={self.id} status={self.status} technician_id={self.technician_id}>"
