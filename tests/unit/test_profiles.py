"""
Unit tests for account registration, profile edits and technician tags.
"""
import pytest

from robomatch.exceptions import Forbidden, NotFound, ValidationError
from robomatch.models.tags import Skill
from robomatch.services import profiles


pytestmark = pytest.mark.unit


class TestRegister:

    def test_creates_user_and_profile(self, app, make_account):
        user = make_account(role="technician", email="  Ana@Example.com ", first_name="Ana", last_name="Lopez")
        assert user.email == "ana@example.com"
        assert user.profile.role == "technician"
        assert user.profile.email == "ana@example.com"
        assert user.check_password("secret123")

    def test_duplicate_email(self, app, make_account):
        make_account(email="dup@example.com")
        with pytest.raises(ValidationError):
            make_account(email="DUP@example.com")

    def test_unknown_role(self, app, make_account):
        with pytest.raises(ValidationError):
            make_account(role="admin")

    def test_client_cannot_set_a_rate(self, app, make_account):
        with pytest.raises(ValidationError):
            make_account(role="client", hourly_rate=40)


class TestUpdateProfile:

    def test_updates_fields(self, app, technician_user):
        prof = profiles.update_profile(technician_user.profile, {"city": " Paris ", "bio": "", "max_travel_distance": 50})
        assert prof.city == "Paris"
        assert prof.bio is None
        assert prof.max_travel_distance == 50

    def test_role_is_immutable(self, app, technician_user):
        with pytest.raises(ValidationError):
            profiles.update_profile(technician_user.profile, {"role": "client"})

    def test_same_role_is_accepted(self, app, technician_user):
        assert profiles.update_profile(technician_user.profile, {"role": "technician"}).role == "technician"

    def test_unknown_field(self, app, client_user):
        with pytest.raises(ValidationError):
            profiles.update_profile(client_user.profile, {"password_hash": "x"})

    def test_client_has_no_technician_fields(self, app, client_user):
        with pytest.raises(ValidationError):
            profiles.update_profile(client_user.profile, {"accepts_travel": True})


class TestTags:

    def test_set_tags_dedupes_case_insensitively(self, app, technician_user):
        names = profiles.set_tags(technician_user.profile, "skills", ["Welding", "PLC", "welding", "  plc "])
        assert names == ["PLC", "Welding"]
        assert Skill.query.count() == 2

    def test_tags_are_shared_between_technicians(self, app, technician_user, make_account):
        other = make_account(role="technician")
        profiles.set_tags(technician_user.profile, "brands", ["FANUC"])
        assert profiles.set_tags(other.profile, "brands", ["fanuc"]) == ["FANUC"]

    def test_replace_drops_old_tags(self, app, technician_user):
        profiles.set_tags(technician_user.profile, "skills", ["Welding"])
        assert profiles.set_tags(technician_user.profile, "skills", ["Vision"]) == ["Vision"]

    def test_remove_tag(self, app, technician_user):
        profiles.set_tags(technician_user.profile, "skills", ["Welding", "Vision"])
        assert profiles.remove_tag(technician_user.profile, "skills", "WELDING") == ["Vision"]
        with pytest.raises(NotFound):
            profiles.remove_tag(technician_user.profile, "skills", "Welding")

    def test_clients_have_no_tags(self, app, client_user):
        with pytest.raises(Forbidden):
            profiles.set_tags(client_user.profile, "skills", ["Welding"])

    def test_bad_payloads(self, app, technician_user):
        with pytest.raises(ValidationError):
            profiles.set_tags(technician_user.profile, "skills", "Welding")
        with pytest.raises(ValidationError):
            profiles.set_tags(technician_user.profile, "skills", [""])
        with pytest.raises(NotFound):
            profiles.set_tags(technician_user.profile, "certifications", ["ISO"])
