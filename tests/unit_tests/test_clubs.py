"""Tests for the /api/clubs endpoints."""

from app.clubs import CLUBS, COUNTRYCLUBPADEL, MONKEYPADEL, P4PADELINDOOR


class TestListClubs:
    def test_list_all_clubs(self, client):
        resp = client.get("/api/clubs")
        assert resp.status_code == 200
        data = resp.json()
        assert data["count"] == len(CLUBS) == 7
        assert {c["id"] for c in data["items"]} == {c.id for c in CLUBS}

    def test_wire_format(self, client):
        club = next(c for c in client.get("/api/clubs").json()["items"] if c["id"] == MONKEYPADEL)
        assert club["courtType"] == "extérieur"
        assert club["type"] == "extérieur"
        assert club["latitude"] == 43.64458478670538

    def test_only_enabled_clubs(self, client):
        data = client.get("/api/clubs", params={"enabled": "true"}).json()
        assert data["count"] == 4
        assert P4PADELINDOOR in {c["id"] for c in data["items"]}

    def test_only_disabled_clubs(self, client):
        data = client.get("/api/clubs", params={"enabled": "false"}).json()
        assert data["count"] == 3
        assert COUNTRYCLUBPADEL in {c["id"] for c in data["items"]}


class TestGetClub:
    def test_get_existing_club(self, client):
        resp = client.get(f"/api/clubs/{COUNTRYCLUBPADEL}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["name"] == "Country Club Padel"
        assert data["courtType"] == "mixte"

    def test_get_nonexistent_club(self, client):
        resp = client.get("/api/clubs/no-such-club")
        assert resp.status_code == 404
