# robomatch/models/availability.py
from ..extensions import db
from .base import utcnow, isoformat


class AvailabilityPeriod(db.Model):
    __tablename__ = "availability_period"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)

    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    selected_weekdays = db.Column(db.JSON, nullable=False, default=list)  # ["YYYY-MM-DD", ...]
    weekend_excluded = db.Column(db.Boolean, default=True, nullable=False)
    count_weekdays = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "start_date": isoformat(self.start_date),
            "end_date": isoformat(self.end_date),
            "selected_weekdays": list(self.selected_weekdays or []),
            "weekend_excluded": self.weekend_excluded,
            "count_weekdays": self.count_weekdays,
        }
