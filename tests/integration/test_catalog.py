"""
Integration tests for the public technician catalog.
"""
from datetime import timedelta

import pytest

from robomatch.services import availability, profiles


pytestmark = pytest.mark.integration


@pytest.fixture
def catalog(app, make_account):
    tom = make_account(role="technician", email="tom@example.com", first_name="Tom", last_name="Bernard",
                       city="Grenoble", hourly_rate=65, phone="+33 6 00 00 00 01")
    ana = make_account(role="technician", email="ana@example.com", first_name="Ana", last_name="Lopez",
                       city="Lyon", hourly_rate=45)
    make_account(role="technician", email="nameless@example.com", first_name="", last_name="")
    make_account(role="client", email="claire@example.com", first_name="Claire", last_name="Martin", city="Lyon")

    profiles.set_tags(tom.profile, "skills", ["Welding", "PLC"])
    profiles.set_tags(tom.profile, "brands", ["FANUC"])
    profiles.set_tags(ana.profile, "skills", ["Vision"])
    profiles.set_tags(ana.profile, "brands", ["ABB", "KUKA"])
    return {"tom": tom, "ana": ana}


def _names(resp):
    return [i["last_name"] for i in resp.get_json()["items"]]


class TestSearch:

    def test_lists_only_named_technicians(self, client, catalog):
        resp = client.get("/catalog/technicians")
        assert resp.status_code == 200
        assert _names(resp) == ["Bernard", "Lopez"]
        assert resp.get_json()["total"] == 2

    def test_never_exposes_contact_fields(self, client, catalog):
        for item in client.get("/catalog/technicians").get_json()["items"]:
            assert "email" not in item
            assert "phone" not in item

    def test_free_text_matches_name_or_city(self, client, catalog):
        assert _names(client.get("/catalog/technicians?q=tom")) == ["Bernard"]
        assert _names(client.get("/catalog/technicians?q=lyon")) == ["Lopez"]

    def test_filters(self, client, catalog):
        assert _names(client.get("/catalog/technicians?skill=welding")) == ["Bernard"]
        assert _names(client.get("/catalog/technicians?brand=kuka")) == ["Lopez"]
        assert _names(client.get("/catalog/technicians?city=GRENOBLE")) == ["Bernard"]
        assert _names(client.get("/catalog/technicians?max_rate=50")) == ["Lopez"]

    def test_bad_rate(self, client, catalog):
        assert client.get("/catalog/technicians?max_rate=cheap").status_code == 400

    def test_pagination(self, client, app, catalog):
        app.config["CATALOG_PAGE_SIZE"] = 1
        first = client.get("/catalog/technicians").get_json()
        second = client.get("/catalog/technicians?page=2").get_json()
        assert first["pages"] == 2
        assert [i["last_name"] for i in first["items"] + second["items"]] == ["Bernard", "Lopez"]


class TestDetail:

    def test_detail_with_upcoming_availability(self, client, catalog, upcoming_monday):
        tom = catalog["tom"]
        availability.save_period(tom.id, upcoming_monday, upcoming_monday + timedelta(days=1))

        resp = client.get(f"/catalog/technicians/{tom.id}")
        assert resp.status_code == 200
        data = resp.get_json()["technician"]
        assert data["skills"] == ["PLC", "Welding"]
        assert data["availability"][0]["count_weekdays"] == 2

    def test_clients_are_not_in_the_catalog(self, client, catalog, app):
        from robomatch.models.user import User

        claire = User.query.filter_by(email="claire@example.com").one()
        assert client.get(f"/catalog/technicians/{claire.id}").status_code == 404

    def test_tag_lists(self, client, catalog):
        assert client.get("/catalog/skills").get_json()["items"] == ["PLC", "Vision", "Welding"]
        assert client.get("/catalog/brands").get_json()["items"] == ["ABB", "FANUC", "KUKA"]
