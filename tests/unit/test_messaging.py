"""
Unit tests for mission messaging and unread counters.
"""
import pytest

from robomatch.exceptions import Forbidden, ValidationError
from robomatch.services import missions as engine


pytestmark = pytest.mark.unit


@pytest.fixture
def mission(app, sent_mail, as_client, technician_user):
    return engine.submit_mission(as_client, technician_user.id, "Pump calibration")


@pytest.fixture
def accepted(mission, as_technician):
    return engine.respond_to_mission(as_technician, mission.id, "accept")


class TestPosting:

    def test_closed_while_pending(self, mission, as_client):
        with pytest.raises(Forbidden):
            engine.post_message(as_client, mission.id, "Hello?")
        with pytest.raises(Forbidden):
            engine.thread(as_client, mission.id)

    def test_closed_after_decline(self, mission, as_technician):
        engine.respond_to_mission(as_technician, mission.id, "decline")
        with pytest.raises(Forbidden):
            engine.post_message(as_technician, mission.id, "Sorry")

    def test_parties_can_talk_once_accepted(self, accepted, as_client, as_technician, client_user, technician_user):
        engine.post_message(as_client, accepted.id, "When can you come?")
        engine.post_message(as_technician, accepted.id, "Tuesday 9am.")

        rows = engine.thread(as_client, accepted.id)
        assert [m.body for m in rows] == ["When can you come?", "Tuesday 9am."]
        assert [m.sender_id for m in rows] == [client_user.id, technician_user.id]

    def test_open_after_completion(self, accepted, as_client):
        engine.complete_mission(as_client, accepted.id)
        msg = engine.post_message(as_client, accepted.id, "Thanks, all good.")
        assert msg.id is not None

    def test_body_is_trimmed_and_required(self, accepted, as_client):
        assert engine.post_message(as_client, accepted.id, "  hi  ").body == "hi"
        with pytest.raises(ValidationError):
            engine.post_message(as_client, accepted.id, "   ")
        with pytest.raises(ValidationError):
            engine.post_message(as_client, accepted.id, "x" * 5001)

    def test_outsider_is_forbidden(self, accepted, as_outsider):
        with pytest.raises(Forbidden):
            engine.post_message(as_outsider, accepted.id, "Let me in")
        with pytest.raises(Forbidden):
            engine.thread(as_outsider, accepted.id)

    def test_counterparty_is_notified(self, accepted, as_technician, sent_mail):
        engine.post_message(as_technician, accepted.id, "On my way")
        assert sent_mail[-1]["to"] == "claire@example.com"
        assert sent_mail[-1]["template"] == "new_message.html"


class TestUnread:

    def test_counts_only_counterparty_messages(self, accepted, as_client, as_technician):
        engine.post_message(as_technician, accepted.id, "One")
        engine.post_message(as_technician, accepted.id, "Two")
        engine.post_message(as_client, accepted.id, "Reply")

        assert engine.unread_message_count(as_client) == 2
        assert engine.unread_message_count(as_technician) == 1
        assert engine.unread_counts_by_mission(as_client) == {accepted.id: 2}

    def test_mark_read_is_idempotent(self, accepted, as_client, as_technician):
        engine.post_message(as_technician, accepted.id, "One")
        engine.post_message(as_technician, accepted.id, "Two")

        assert engine.mark_thread_read(as_client, accepted.id) == 2
        assert engine.mark_thread_read(as_client, accepted.id) == 0
        assert engine.unread_message_count(as_client) == 0
        assert all(m.read_at is not None for m in engine.thread(as_client, accepted.id))

    def test_reading_does_not_touch_own_messages(self, accepted, as_client, as_technician):
        engine.post_message(as_client, accepted.id, "Hello")
        assert engine.mark_thread_read(as_client, accepted.id) == 0
        assert engine.unread_message_count(as_technician) == 1

    def test_outsider_cannot_mark_read(self, accepted, as_outsider):
        with pytest.raises(Forbidden):
            engine.mark_thread_read(as_outsider, accepted.id)

    def test_outsider_sees_no_unread(self, accepted, as_technician, as_outsider):
        engine.post_message(as_technician, accepted.id, "One")
        assert engine.unread_message_count(as_outsider) == 0
