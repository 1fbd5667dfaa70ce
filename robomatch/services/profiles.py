# robomatch/services/profiles.py
import logging

from sqlalchemy import func

from ..extensions import db
from ..exceptions import Forbidden, NotFound, ValidationError
from ..models.tags import Brand, Skill
from ..models.user import ROLE_TECHNICIAN, ROLES, Profile, User

log = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "linkedin_url",
    "company_name",
    "city",
    "bio",
    "photo_url",
)
TECHNICIAN_FIELDS = ("hourly_rate", "accepts_travel", "max_travel_distance")

TAG_MODELS = {"skills": Skill, "brands": Brand}


def register_account(*, role, email, password, first_name, last_name, **fields) -> User:
    """Create a User and its Profile in one transaction."""
    email = (email or "").strip().lower()
    if role not in ROLES:
        raise ValidationError("Account type must be client or technician.", fields={"role": role})
    if User.query.filter_by(email=email).first():
        raise ValidationError("Email is already registered.", fields={"email": "Already registered."})
    if role != ROLE_TECHNICIAN and any(fields.get(f) is not None for f in TECHNICIAN_FIELDS):
        raise ValidationError("Only technicians have a rate or travel settings.")

    user = User(email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.flush()  # get user.id

    prof = Profile(
        user_id=user.id,
        role=role,
        first_name=(first_name or "").strip() or None,
        last_name=(last_name or "").strip() or None,
        email=email,
    )
    for key in EDITABLE_FIELDS + TECHNICIAN_FIELDS:
        if key in fields and fields[key] not in (None, ""):
            setattr(prof, key, fields[key])
    db.session.add(prof)
    db.session.commit()

    log.info("Registered %s account %s", role, user.id)
    return user


def update_profile(profile: Profile, changes: dict) -> Profile:
    if "role" in changes:
        # raises ValidationError if it differs
        profile.role = changes["role"]

    unknown = set(changes) - set(EDITABLE_FIELDS) - set(TECHNICIAN_FIELDS) - {"role"}
    if unknown:
        raise ValidationError("Unknown profile fields.", fields=sorted(unknown))

    for key in TECHNICIAN_FIELDS:
        if key in changes and not profile.is_technician:
            raise ValidationError("Only technicians have a rate or travel settings.", fields={key: "Not allowed."})

    for key, value in changes.items():
        if key == "role":
            continue
        if isinstance(value, str):
            value = value.strip() or None
        setattr(profile, key, value)

    db.session.commit()
    return profile


def _normalize_tag(name) -> str:
    return " ".join(str(name or "").split())


def get_or_create_tag(model, name: str):
    clean = _normalize_tag(name)
    if not clean:
        raise ValidationError("Tag name cannot be empty.")
    if len(clean) > 120:
        raise ValidationError("Tag name is too long.", fields={"name": clean[:20] + "..."})
    tag = model.query.filter(func.lower(model.name) == clean.lower()).first()
    if tag is None:
        tag = model(name=clean)
        db.session.add(tag)
        db.session.flush()
    return tag


def _require_technician(profile: Profile):
    if not profile.is_technician:
        raise Forbidden("Only technicians list skills and brands.")


def set_tags(profile: Profile, kind: str, names) -> list[str]:
    """Replace the technician's skills or brands, creating unknown names."""
    _require_technician(profile)
    model = TAG_MODELS.get(kind)
    if model is None:
        raise NotFound(f"Unknown tag kind: {kind}.")
    if isinstance(names, str) or not isinstance(names, (list, tuple)):
        raise ValidationError("Expected a list of names.", fields={"names": names})

    tags, seen = [], set()
    for name in names:
        tag = get_or_create_tag(model, name)
        if tag.id not in seen:
            seen.add(tag.id)
            tags.append(tag)

    setattr(profile, kind, tags)
    db.session.commit()
    return [t.name for t in getattr(profile, kind)]


def remove_tag(profile: Profile, kind: str, name: str) -> list[str]:
    _require_technician(profile)
    model = TAG_MODELS.get(kind)
    if model is None:
        raise NotFound(f"Unknown tag kind: {kind}.")

    clean = _normalize_tag(name).lower()
    current = getattr(profile, kind)
    match = next((t for t in current if t.name.lower() == clean), None)
    if match is None:
        raise NotFound(f"{name!r} is not linked to this profile.")
    current.remove(match)
    db.session.commit()
    return [t.name for t in getattr(profile, kind)]
