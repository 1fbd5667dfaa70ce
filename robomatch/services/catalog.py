# robomatch/services/catalog.py
from decimal import Decimal, InvalidOperation
from typing import Optional

from flask import current_app
from sqlalchemy import func

from ..exceptions import NotFound, ValidationError
from ..models.tags import Brand, Skill
from ..models.user import ROLE_TECHNICIAN, Profile, User


def _technicians():
    return (
        Profile.query
        .join(User, Profile.user_id == User.id)
        .filter(
            Profile.role == ROLE_TECHNICIAN,
            User.status == "active",
            Profile.first_name.isnot(None),
            Profile.last_name.isnot(None),
        )
    )


def _parse_rate(raw) -> Optional[Decimal]:
    if raw in (None, ""):
        return None
    try:
        rate = Decimal(str(raw).replace(",", ".").strip())
    except InvalidOperation:
        raise ValidationError("max_rate must be a number.", fields={"max_rate": raw})
    if rate < 0:
        raise ValidationError("max_rate cannot be negative.", fields={"max_rate": raw})
    return rate


def search_technicians(q=None, skill=None, brand=None, city=None, max_rate=None, page=1, per_page=None):
    """Paginated technician search; rows are Profile objects."""
    qry = _technicians()

    q = (q or "").strip()
    if q:
        like = f"%{q}%"
        qry = qry.filter(
            (Profile.first_name + " " + Profile.last_name).ilike(like)
            | Profile.city.ilike(like)
        )
    if skill:
        qry = qry.filter(Profile.skills.any(func.lower(Skill.name) == skill.strip().lower()))
    if brand:
        qry = qry.filter(Profile.brands.any(func.lower(Brand.name) == brand.strip().lower()))
    if city:
        qry = qry.filter(func.lower(Profile.city) == city.strip().lower())

    rate = _parse_rate(max_rate)
    if rate is not None:
        qry = qry.filter(Profile.hourly_rate <= rate)

    per_page = per_page or current_app.config.get("CATALOG_PAGE_SIZE", 12)
    return (
        qry.order_by(Profile.last_name.asc(), Profile.first_name.asc(), Profile.id.asc())
        .paginate(page=max(int(page or 1), 1), per_page=per_page, error_out=False)
    )


def get_technician(user_id: int) -> Profile:
    prof = _technicians().filter(Profile.user_id == user_id).first()
    if prof is None:
        raise NotFound("Technician not found.", technician_id=user_id)
    return prof


def tag_names(model) -> list[str]:
    return [row.name for row in model.query.order_by(model.name.asc()).all()]
