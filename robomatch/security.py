# robomatch/security.py
from functools import wraps
from typing import Optional

from flask import abort, current_app, request
from flask_login import current_user
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from .extensions import db, login_manager
from .exceptions import ValidationError
from .models.user import User
from .principals import AuthenticatedPrincipal, GuestPrincipal, is_valid_guest_token


# -----------------
# Bearer API tokens
# -----------------

def _ts() -> URLSafeTimedSerializer:
    secret_key = current_app.config.get("SECRET_KEY")
    salt = current_app.config.get("API_TOKEN_SALT", "api-token")
    return URLSafeTimedSerializer(secret_key=secret_key, salt=salt)


def issue_api_token(user: User) -> str:
    return _ts().dumps({"uid": user.id})


def verify_api_token(token: str, max_age: Optional[int] = None) -> Optional[int]:
    max_age = max_age or current_app.config.get("API_TOKEN_MAX_AGE", 60 * 60 * 24 * 7)
    try:
        data = _ts().loads(token, max_age=max_age)
        return int(data.get("uid"))
    except (BadSignature, SignatureExpired, ValueError, TypeError, AttributeError):
        return None


def bearer_token(req=None) -> Optional[str]:
    header = (req or request).headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header.split(" ", 1)[1].strip() or None
    return None


def load_user_from_request(req):
    token = bearer_token(req)
    if not token:
        return None
    user_id = verify_api_token(token)
    if user_id is None:
        return None
    user = db.session.get(User, user_id)
    return user if user and user.is_active else None


# -----------------
# Decorators
# -----------------

def roles_required(*roles):
    """Allow only logged-in users whose profile role is one of ``roles``."""
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                return login_manager.unauthorized()
            if current_user.role not in roles:
                abort(403)
            return view(*args, **kwargs)
        return wrapped
    return decorator


# -----------------
# Principals
# -----------------

def guest_token_from_request() -> Optional[str]:
    header = current_app.config.get("GUEST_TOKEN_HEADER", "X-Guest-Token")
    cookie = current_app.config.get("GUEST_COOKIE_NAME", "guest_token")
    token = request.headers.get(header) or request.cookies.get(cookie)
    if not token:
        return None
    token = token.strip()
    if not is_valid_guest_token(token):
        raise ValidationError("Malformed guest token.", fields={"guest_token": "Invalid format."})
    return token


def current_principal(allow_guest: bool = False, guest_name=None, guest_email=None):
    """Resolve the caller once, at the HTTP boundary."""
    if current_user.is_authenticated:
        return AuthenticatedPrincipal(user_id=current_user.id)
    if allow_guest:
        token = guest_token_from_request()
        if token:
            return GuestPrincipal(token=token, name=guest_name, email=guest_email)
    abort(401)
