"""Tests for the HTTP endpoints.

Each test app mounts only the router under test.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from cyclocoach.api.routes.gpx import router as gpx_router
from cyclocoach.api.routes.route_requests import router as route_requests_router
from cyclocoach.services.reply_composer import build_download_url


@pytest.fixture
def gpx_client():
    app = FastAPI()
    app.include_router(gpx_router)
    return TestClient(app)


@pytest.fixture
def chat_client():
    app = FastAPI()
    app.include_router(route_requests_router)
    return TestClient(app)


VALID_QUERY = {
    "address": "10 Downing Street",
    "distanceKm": "60",
    "elevationGain": "800",
    "practiceType": "road",
}


def _without_times(doc):
    # timestamps may differ across a minute boundary
    return [line for line in doc.splitlines() if "<time>" not in line]


class TestDownloadGpx:
    def test_serves_attachment(self, gpx_client):
        resp = gpx_client.get("/api/gpx", params=VALID_QUERY)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/gpx+xml")
        assert resp.headers["content-disposition"] == 'attachment; filename="cyclocoach-road-60km.gpx"'
        assert resp.text.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert resp.text.count("<trkpt ") == 240

    def test_link_from_reply_resolves(self, gpx_client, bellecour_gravel):
        resp = gpx_client.get(build_download_url(bellecour_gravel))
        assert resp.status_code == 200
        assert 'filename="cyclocoach-gravel-13km.gpx"' in resp.headers["content-disposition"]

    def test_same_query_same_track(self, gpx_client):
        a = gpx_client.get("/api/gpx", params=VALID_QUERY).text
        b = gpx_client.get("/api/gpx", params=VALID_QUERY).text
        assert _without_times(a) == _without_times(b)

    def test_zero_elevation_ok(self, gpx_client):
        resp = gpx_client.get("/api/gpx", params={**VALID_QUERY, "elevationGain": "0"})
        assert resp.status_code == 200

    @pytest.mark.parametrize("override", [
        {"address": ""},
        {"distanceKm": "abc"},
        {"distanceKm": "0"},
        {"elevationGain": "-10"},
        {"practiceType": ""},
        {"distanceKm": "1e12"},
        {"distanceKm": "1" + "0" * 30},
        {"elevationGain": "1e9"},
    ])
    def test_invalid_query_is_400(self, gpx_client, override):
        resp = gpx_client.get("/api/gpx", params={**VALID_QUERY, **override})
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Missing or invalid query parameters."}

    def test_non_ascii_practice_filename(self, gpx_client):
        resp = gpx_client.get("/api/gpx", params={**VALID_QUERY, "practiceType": "шосе"})
        assert resp.status_code == 200
        assert resp.headers["content-disposition"] == (
            'attachment; filename="cyclocoach-ride-60km.gpx"; '
            "filename*=UTF-8''cyclocoach-%D1%88%D0%BE%D1%81%D0%B5-60km.gpx"
        )
        assert "<name>CycloCoach шосе route</name>" in resp.text

    def test_accented_practice_filename(self, gpx_client):
        resp = gpx_client.get("/api/gpx", params={**VALID_QUERY, "practiceType": "Vélo taf"})
        assert resp.status_code == 200
        assert resp.headers["content-disposition"] == 'attachment; filename="cyclocoach-velo-taf-60km.gpx"'

    def test_missing_params_is_400(self, gpx_client):
        resp = gpx_client.get("/api/gpx", params={"address": "Lyon"})
        assert resp.status_code == 400


class TestRouteRequests:
    def test_match(self, chat_client):
        resp = chat_client.post("/api/route-requests", json={
            "message": "/gpx address: 10 Downing Street; distance: 60 km; elevation: 800 m; practice: road",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["matched"] is True
        assert body["request"] == {
            "address": "10 Downing Street",
            "distance_km": 60.0,
            "elevation_gain_m": 800.0,
            "practice_type": "road",
        }
        assert body["reply"]["role"] == "assistant"
        assert body["reply"]["action"] == "gpx"
        assert "- Estimated moving time: 2h09" in body["reply"]["content"]

    def test_no_match(self, chat_client):
        resp = chat_client.post("/api/route-requests", json={"message": "How should I pace a century?"})
        assert resp.status_code == 200
        assert resp.json() == {"matched": False, "request": None, "reply": None}

    def test_oversized_distance_is_no_match(self, chat_client):
        distance = "1" + "0" * 30
        resp = chat_client.post("/api/route-requests", json={
            "message": f"/gpx address: Lyon; distance: {distance} km; elevation: 800 m; practice: road",
        })
        assert resp.status_code == 200
        assert resp.json()["matched"] is False

    def test_empty_message_rejected(self, chat_client):
        resp = chat_client.post("/api/route-requests", json={"message": ""})
        assert resp.status_code == 422
