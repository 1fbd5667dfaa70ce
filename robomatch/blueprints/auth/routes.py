# robomatch/blueprints/auth/routes.py
from flask import current_app, jsonify
from flask_babel import gettext as _
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from ...exceptions import Forbidden, ValidationError
from ...extensions import db
from ...models.user import User
from ...security import issue_api_token
from ...services.profiles import register_account
from ..utils import validated
from . import auth_bp
from .forms import LoginForm, RegisterForm


@auth_bp.get("/csrf")
def csrf_token():
    return jsonify({"csrf_token": generate_csrf()})


# -----------------
# Register
# -----------------

@auth_bp.post("/register")
def register():
    form = validated(RegisterForm)
    user = register_account(
        role=form.role.data,
        email=form.email.data,
        password=form.password.data,
        first_name=form.first_name.data,
        last_name=form.last_name.data,
        phone=form.phone.data,
        linkedin_url=form.linkedin_url.data,
        company_name=form.company_name.data,
        city=form.city.data,
        hourly_rate=form.hourly_rate.data,
    )
    return jsonify({"message": _("Account created. You can now log in."), "profile": user.profile.to_owner_dict()}), 201


# -----------------
# Login / Logout
# -----------------

@auth_bp.post("/login")
def login():
    form = validated(LoginForm)
    email = form.email.data.strip().lower()
    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(form.password.data):
        raise ValidationError(_("Invalid email or password."))

    if user.status == "suspended":
        raise Forbidden(_("Your account is suspended. Contact support."))

    login_user(user, remember=bool(form.remember.data))
    user.mark_login()
    db.session.commit()
    current_app.logger.info("User %s logged in", user.id)

    return jsonify({
        "profile": user.profile.to_owner_dict() if user.profile else None,
        "token": issue_api_token(user),
        "token_type": "bearer",
    })


@auth_bp.post("/logout")
@login_required
def logout():
    logout_user()
    return jsonify({"message": _("You have been logged out.")})


@auth_bp.get("/me")
@login_required
def me():
    prof = current_user.profile
    return jsonify({
        "id": current_user.id,
        "email": current_user.email,
        "language": current_user.language,
        "profile": prof.to_owner_dict() if prof else None,
    })
