# robomatch/models/user.py
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from sqlalchemy.orm import validates

from ..extensions import db
from ..exceptions import ValidationError
from .base import utcnow, isoformat
from .tags import technician_skills, technician_brands

ROLE_CLIENT = "client"
ROLE_TECHNICIAN = "technician"
ROLES = (ROLE_CLIENT, ROLE_TECHNICIAN)


# ------- Core Models -------

class User(UserMixin, db.Model):
    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255))

    # active|suspended
    status = db.Column(db.String(20), default="active", index=True)
    language = db.Column(db.String(8))

    last_login_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    profile = db.relationship(
        "Profile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    # --- Auth helpers ---
    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return bool(self.password_hash) and check_password_hash(self.password_hash, password)

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def role(self):
        return self.profile.role if self.profile else None

    def mark_login(self):
        self.last_login_at = utcnow()


class Profile(db.Model):
    __tablename__ = "profile"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    # client|technician, fixed at creation
    role = db.Column(db.String(20), nullable=False, index=True)

    first_name = db.Column(db.String(80))
    last_name = db.Column(db.String(80))

    # Contact fields; who may read them is decided by the mission engine
    email = db.Column(db.String(255))
    phone = db.Column(db.String(50))
    linkedin_url = db.Column(db.String(255))

    company_name = db.Column(db.String(160))
    city = db.Column(db.String(120), index=True)
    bio = db.Column(db.Text)
    photo_url = db.Column(db.String(512))

    # Technician only
    hourly_rate = db.Column(db.Numeric(10, 2))
    accepts_travel = db.Column(db.Boolean, default=False)
    max_travel_distance = db.Column(db.Integer)  # km

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = db.relationship("User", back_populates="profile")
    skills = db.relationship("Skill", secondary=technician_skills, lazy="selectin", order_by="Skill.name")
    brands = db.relationship("Brand", secondary=technician_brands, lazy="selectin", order_by="Brand.name")

    @validates("role")
    def _validate_role(self, key, value):
        if value not in ROLES:
            raise ValidationError(f"Unknown role: {value!r}", field="role")
        if self.role is not None and value != self.role:
            raise ValidationError("Account type cannot be changed.", field="role")
        return value

    @property
    def is_technician(self) -> bool:
        return self.role == ROLE_TECHNICIAN

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def to_public_dict(self) -> dict:
        """Catalog projection: never carries contact fields."""
        data = {
            "user_id": self.user_id,
            "role": self.role,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "company_name": self.company_name,
            "city": self.city,
            "bio": self.bio,
            "photo_url": self.photo_url,
        }
        if self.is_technician:
            data.update(
                hourly_rate=float(self.hourly_rate) if self.hourly_rate is not None else None,
                accepts_travel=bool(self.accepts_travel),
                max_travel_distance=self.max_travel_distance,
                skills=[s.name for s in self.skills],
                brands=[b.name for b in self.brands],
            )
        return data

    def to_owner_dict(self) -> dict:
        data = self.to_public_dict()
        data.update(
            email=self.email,
            phone=self.phone,
            linkedin_url=self.linkedin_url,
            created_at=isoformat(self.created_at),
        )
        return data
