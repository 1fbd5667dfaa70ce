"""
Unit tests for the contact gate.

Contact details stay hidden until the technician accepts, and are only
ever shown to the two parties of the mission.
"""
import pytest

from robomatch.exceptions import Forbidden
from robomatch.services import missions as engine


pytestmark = pytest.mark.unit


@pytest.fixture
def mission(app, sent_mail, as_client, technician_user):
    return engine.submit_mission(as_client, technician_user.id, "Pump calibration")


class TestContactGate:

    def test_hidden_while_pending(self, mission, as_client, as_technician):
        with pytest.raises(Forbidden):
            engine.counterparty_contact(as_client, mission.id)
        with pytest.raises(Forbidden):
            engine.counterparty_contact(as_technician, mission.id)

    def test_hidden_after_decline(self, mission, as_client, as_technician):
        engine.respond_to_mission(as_technician, mission.id, "decline")
        with pytest.raises(Forbidden):
            engine.counterparty_contact(as_client, mission.id)

    def test_client_sees_technician_after_accept(self, mission, as_client, as_technician):
        engine.respond_to_mission(as_technician, mission.id, "accept")
        card = engine.counterparty_contact(as_client, mission.id)
        assert card.name == "Tom Bernard"
        assert card.email == "tom@example.com"
        assert card.phone == "+33 6 55 66 77 88"
        assert card.linkedin_url == "https://www.linkedin.com/in/tombernard"
        assert card.is_guest is False

    def test_technician_sees_client_after_accept(self, mission, as_client, as_technician):
        engine.respond_to_mission(as_technician, mission.id, "accept")
        card = engine.counterparty_contact(as_technician, mission.id)
        assert card.to_dict() == {
            "name": "Claire Martin",
            "email": "claire@example.com",
            "phone": "+33 6 11 22 33 44",
            "linkedin_url": None,
            "is_guest": False,
        }

    def test_still_visible_after_completion(self, mission, as_client, as_technician):
        engine.respond_to_mission(as_technician, mission.id, "accept")
        engine.complete_mission(as_client, mission.id)
        assert engine.counterparty_contact(as_client, mission.id).email == "tom@example.com"

    def test_outsider_never_sees_contact(self, mission, as_technician, as_outsider):
        engine.respond_to_mission(as_technician, mission.id, "accept")
        with pytest.raises(Forbidden):
            engine.counterparty_contact(as_outsider, mission.id)


class TestPublicProjections:

    def test_mission_dict_has_no_client_email(self, mission):
        data = mission.to_dict()
        assert "client_email" not in data
        assert data["client_name"] == "Claire Martin"

    def test_catalog_projection_has_no_contact_fields(self, technician_user):
        data = technician_user.profile.to_public_dict()
        for key in ("email", "phone", "linkedin_url"):
            assert key not in data
        assert data["hourly_rate"] == 65.0
