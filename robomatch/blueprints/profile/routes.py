# robomatch/blueprints/profile/routes.py
from flask import jsonify
from flask_login import current_user, login_required

from ...exceptions import NotFound
from ...models.user import ROLE_TECHNICIAN
from ...security import roles_required
from ...services import availability, profiles
from ..utils import json_payload, validated
from . import profile_bp
from .forms import AvailabilityForm, ProfileForm


def _own_profile():
    prof = current_user.profile
    if prof is None:
        raise NotFound("Profile not found.")
    return prof


@profile_bp.get("")
@login_required
def show():
    return jsonify({"profile": _own_profile().to_owner_dict()})


@profile_bp.patch("")
@login_required
def update():
    payload = json_payload()
    form = validated(ProfileForm)
    # role and unknown keys pass through untouched so the service can reject them
    changes = {key: (form[key].data if key in form else value) for key, value in payload.items()}
    prof = profiles.update_profile(_own_profile(), changes)
    return jsonify({"profile": prof.to_owner_dict()})


# -----------------
# Skills / brands
# -----------------

@profile_bp.put("/<any(skills, brands):kind>")
@roles_required(ROLE_TECHNICIAN)
def replace_tags(kind):
    names = profiles.set_tags(_own_profile(), kind, json_payload().get("names"))
    return jsonify({kind: names})


@profile_bp.delete("/<any(skills, brands):kind>/<path:name>")
@roles_required(ROLE_TECHNICIAN)
def delete_tag(kind, name):
    names = profiles.remove_tag(_own_profile(), kind, name)
    return jsonify({kind: names})


# -----------------
# Availability
# -----------------

@profile_bp.get("/availability")
@roles_required(ROLE_TECHNICIAN)
def list_availability():
    rows = availability.periods_for(current_user.id)
    return jsonify({"items": [p.to_dict() for p in rows]})


@profile_bp.post("/availability")
@roles_required(ROLE_TECHNICIAN)
def add_availability():
    form = validated(AvailabilityForm)
    period = availability.save_period(current_user.id, form.start_date.data, form.end_date.data)
    return jsonify({"period": period.to_dict()}), 201


@profile_bp.delete("/availability/<int:period_id>")
@roles_required(ROLE_TECHNICIAN)
def delete_availability(period_id):
    availability.delete_period(current_user.id, period_id)
    return jsonify({"deleted": period_id})
