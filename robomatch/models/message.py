# robomatch/models/message.py
from ..extensions import db
from .base import utcnow, isoformat


class Message(db.Model):
    __tablename__ = "message"

    id = db.Column(db.Integer, primary_key=True)
    mission_id = db.Column(db.Integer, db.ForeignKey("mission.id", ondelete="CASCADE"), nullable=False, index=True)

    # Sender: an account or the guest who requested the mission
    sender_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True, index=True)
    sender_guest_token = db.Column(db.String(128), nullable=True)

    body = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    read_at = db.Column(db.DateTime)

    mission = db.relationship("Mission", back_populates="messages")

    __table_args__ = (
        db.CheckConstraint(
            "(sender_id IS NULL) <> (sender_guest_token IS NULL)",
            name="ck_message_single_sender",
        ),
        db.Index("ix_message_mission_created", "mission_id", "created_at"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "mission_id": self.mission_id,
            "sender_id": self.sender_id,
            "sent_by_guest": self.sender_guest_token is not None,
            "body": self.body,
            "created_at": isoformat(self.created_at),
            "read_at": isoformat(self.read_at),
        }
