# robomatch/models/tags.py
from ..extensions import db
from .base import utcnow


technician_skills = db.Table(
    "technician_skills",
    db.Column("profile_id", db.Integer, db.ForeignKey("profile.id", ondelete="CASCADE"), primary_key=True),
    db.Column("skill_id", db.Integer, db.ForeignKey("skill.id", ondelete="CASCADE"), primary_key=True),
)

technician_brands = db.Table(
    "technician_brands",
    db.Column("profile_id", db.Integer, db.ForeignKey("profile.id", ondelete="CASCADE"), primary_key=True),
    db.Column("brand_id", db.Integer, db.ForeignKey("brand.id", ondelete="CASCADE"), primary_key=True),
)


class Skill(db.Model):
    __tablename__ = "skill"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Skill {self.name}>"


class Brand(db.Model):
    __tablename__ = "brand"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Brand {self.name}>"
