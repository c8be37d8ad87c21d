"""Tests for the /api/search endpoint."""

import pytest

from app.clubs import COMPLEXEPADEL, MONKEYPADEL, P4PADELINDOOR

MONKEYPADEL_POINT = {"latitude": 43.64458478670538, "longitude": 5.163387292364317}


def _params(**overrides):
    params = {"date": "2030-06-15", "startHour": 17, "endHour": 21, "radius": 50, **MONKEYPADEL_POINT}
    params.update(overrides)
    return params


class TestSearch:
    def test_search_sorted_by_time_then_distance(self, client):
        resp = client.get("/api/search", params=_params())
        assert resp.status_code == 200

        data = resp.json()
        assert data["count"] == 4
        assert [(s["clubId"], s["time"]) for s in data["slots"]] == [
            (MONKEYPADEL, "18:00"),
            (COMPLEXEPADEL, "18:00"),
            (P4PADELINDOOR, "19:00"),
            (MONKEYPADEL, "20:00"),
        ]

    def test_search_echoes_query(self, client):
        data = client.get("/api/search", params=_params()).json()
        assert data["date"] == "2030-06-15"
        assert (data["startHour"], data["endHour"]) == (17, 21)
        assert data["radius"] == 50

    def test_slot_fields(self, client):
        slot = client.get("/api/search", params=_params()).json()["slots"][1]
        assert slot["clubName"] == "Complexe Padel"
        assert slot["court"] == "Central"
        assert slot["endTime"] == "19:30"
        assert slot["distance"] > 0
        assert set(slot["coordinates"]) == {"latitude", "longitude"}

    def test_small_radius(self, client):
        data = client.get("/api/search", params=_params(radius=1)).json()
        assert {s["clubId"] for s in data["slots"]} == {MONKEYPADEL}

    def test_no_club_in_range(self, client):
        data = client.get("/api/search", params=_params(latitude=48.85, longitude=2.35, radius=10)).json()
        assert data["count"] == 0
        assert data["slots"] == []

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"date": "15-06-2030"}, "date"),
            ({"startHour": 22, "endHour": 8}, "endHour"),
            ({"startHour": "x"}, "startHour"),
            ({"latitude": 123}, "latitude"),
            ({"radius": -5}, "radius"),
        ],
    )
    def test_invalid_params(self, client, overrides, field):
        resp = client.get("/api/search", params=_params(**overrides))
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "validation_error"
        assert body["field"] == field
        assert body["message"]

    def test_missing_param(self, client):
        params = _params()
        del params["radius"]
        resp = client.get("/api/search", params=params)
        assert resp.status_code == 400
        assert resp.json()["field"] == "radius"
