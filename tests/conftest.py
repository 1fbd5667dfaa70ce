"""
RoboMatch Test Configuration

Pytest fixtures shared by the unit, integration and system suites.
Every test gets a fresh app bound to an in-memory SQLite database.
"""
from contextlib import ExitStack
from datetime import date, timedelta

import pytest
from flask.testing import FlaskClient

from robomatch import create_app
from robomatch.config import TestingConfig
from robomatch.extensions import db
from robomatch.principals import AuthenticatedPrincipal, GuestPrincipal
from robomatch.services.profiles import register_account


# ============================================================================
# Application
# ============================================================================

class RequestScopedClient(FlaskClient):
    """Run every request in its own app context, as a real server does.

    Without this the request reuses the context the test pushed, so ``g``
    (and the user Flask-Login caches on it) leaks from one request to the next.
    """

    def open(self, *args, **kwargs):
        with self.application.app_context():
            return super().open(*args, **kwargs)


@pytest.fixture
def app_factory():
    """Build apps with tables created; each app context stays pushed until teardown."""
    with ExitStack() as stack:

        def _build(config=TestingConfig):
            app = create_app(config)
            app.test_client_class = RequestScopedClient
            stack.enter_context(app.app_context())
            db.create_all()
            stack.callback(db.drop_all)
            stack.callback(db.session.remove)
            return app

        yield _build


@pytest.fixture
def app(app_factory):
    return app_factory()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def sent_mail(monkeypatch):
    """Capture outgoing notifications instead of rendering and sending them."""
    outbox = []

    def _record(**kwargs):
        outbox.append(kwargs)
        return True

    monkeypatch.setattr("robomatch.services.notifications.send_email", _record)
    return outbox


# ============================================================================
# Factories
# ============================================================================

@pytest.fixture
def make_account(app):
    """Create a User + Profile; returns the User."""
    counter = {"n": 0}

    def _make(role="client", email=None, first_name="Test", last_name="User", password="secret123", **fields):
        counter["n"] += 1
        email = email or f"{role}{counter['n']}@example.com"
        return register_account(
            role=role,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **fields,
        )

    return _make


@pytest.fixture
def client_user(make_account):
    """A client account with full contact details."""
    return make_account(
        role="client",
        email="claire@example.com",
        first_name="Claire",
        last_name="Martin",
        phone="+33 6 11 22 33 44",
        company_name="Usine Martin",
        city="Lyon",
    )


@pytest.fixture
def technician_user(make_account):
    """A technician listed in the catalog."""
    return make_account(
        role="technician",
        email="tom@example.com",
        first_name="Tom",
        last_name="Bernard",
        phone="+33 6 55 66 77 88",
        linkedin_url="https://www.linkedin.com/in/tombernard",
        city="Grenoble",
        hourly_rate=65,
    )


@pytest.fixture
def other_user(make_account):
    """An account that is party to nothing."""
    return make_account(role="client", email="outsider@example.com", first_name="Olga", last_name="Outsider")


@pytest.fixture
def as_client(client_user):
    return AuthenticatedPrincipal(user_id=client_user.id)


@pytest.fixture
def as_technician(technician_user):
    return AuthenticatedPrincipal(user_id=technician_user.id)


@pytest.fixture
def as_outsider(other_user):
    return AuthenticatedPrincipal(user_id=other_user.id)


@pytest.fixture
def as_guest():
    return GuestPrincipal(token="guest_" + "a" * 24, name="Jane Doe", email="jane@example.com")


# ============================================================================
# Helpers
# ============================================================================

@pytest.fixture
def upcoming_monday():
    """A Monday at least a week away, safe to use as a future availability start."""
    after = date.today() + timedelta(days=7)
    return after + timedelta(days=7 - after.weekday())


@pytest.fixture
def auth_header(client):
    """Log in over HTTP and return an Authorization header for that account."""

    def _login(email, password="secret123"):
        resp = client.post("/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        # keep the session cookie out of the picture; the bearer token is enough
        client.post("/auth/logout")
        return {"Authorization": f"Bearer {resp.get_json()['token']}"}

    return _login
