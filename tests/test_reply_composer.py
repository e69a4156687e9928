"""Tests for the chat summary and the download query round trip."""

import math
from urllib.parse import parse_qs, urlsplit

import pytest
from pydantic import ValidationError

from cyclocoach import config
from cyclocoach.models.ride_models import MAX_DISTANCE_KM, MAX_ELEVATION_GAIN_M, RideRequest
from cyclocoach.services.reply_composer import (
    build_download_url,
    compose_reply,
    format_duration,
    ride_request_from_query,
)

EXPECTED_DOWNING_STREET_REPLY = "\n\n".join([
    "Here is a **road** route starting from **10 Downing Street**.",
    "- Distance: 60.0 km",
    "- Elevation gain: 800 m",
    "- Estimated moving time: 2h09",
    '[⬇️ Download the GPX file](/api/gpx?address=10+Downing+Street&distanceKm=60&elevationGain=800'
    '&practiceType=road "Download cyclocoach-road-60km.gpx")',
    "Import this GPX into your preferred navigation app and enjoy the ride!",
])


class TestFormatDuration:
    def test_hours_and_minutes(self):
        assert format_duration(1.5) == "1h30"

    def test_minutes_only(self):
        assert format_duration(0.75) == "45 min"

    def test_whole_hours(self):
        assert format_duration(2.0) == "2h00"

    def test_minutes_padded(self):
        assert format_duration(1 + 5 / 60) == "1h05"

    @pytest.mark.parametrize("hours", [0.0, -1.0, math.inf, math.nan])
    def test_omitted(self, hours):
        assert format_duration(hours) is None


class TestComposeReply:
    def test_reference_message(self, downing_street):
        assert compose_reply(downing_street) == EXPECTED_DOWNING_STREET_REPLY

    def test_label_and_rounding(self):
        request = RideRequest(address="Annecy", distance_km=33.75, elevation_gain_m=412.5,
                              practice_type="  gravel   bikepacking ")
        message = compose_reply(request)
        assert "**gravel bikepacking**" in message
        assert "- Distance: 33.8 km" in message
        assert "- Elevation gain: 413 m" in message
        # 33.75 km at 22 km/h
        assert "- Estimated moving time: 1h32" in message
        assert '"Download cyclocoach-gravel-bikepacking-34km.gpx"' in message

    def test_longest_ride(self):
        request = RideRequest(address="Brest", distance_km=MAX_DISTANCE_KM,
                              elevation_gain_m=MAX_ELEVATION_GAIN_M, practice_type="road")
        message = compose_reply(request)
        assert "- Distance: 10000.0 km" in message
        assert "- Elevation gain: 100000 m" in message
        assert "distanceKm=10000&" in message

    @pytest.mark.parametrize("distance_km, elevation_gain_m", [
        (1e12, 100.0),
        (1e30, 100.0),
        (40.0, 1e9),
    ])
    def test_out_of_range_ride_rejected(self, distance_km, elevation_gain_m):
        with pytest.raises(ValidationError):
            RideRequest(address="Brest", distance_km=distance_km,
                        elevation_gain_m=elevation_gain_m, practice_type="road")

    def test_download_path_from_config(self, downing_street, monkeypatch):
        monkeypatch.setattr(config, "GPX_DOWNLOAD_PATH", "/files/route.gpx")
        assert build_download_url(downing_street).startswith("/files/route.gpx?address=")


class TestDownloadQuery:
    def test_round_trip(self):
        request = RideRequest(address="12 rue de l'Église, Lyon", distance_km=45.5,
                              elevation_gain_m=0, practice_type="Vélo taf")
        query = parse_qs(urlsplit(build_download_url(request)).query)
        rebuilt = ride_request_from_query(
            query["address"][0], query["distanceKm"][0],
            query["elevationGain"][0], query["practiceType"][0],
        )
        assert rebuilt == request

    def test_zero_elevation_allowed(self):
        request = ride_request_from_query("Lyon", "20", "0", "road")
        assert request.elevation_gain_m == 0

    @pytest.mark.parametrize("address, distance, elevation, practice", [
        (None, "20", "100", "road"),
        ("Lyon", None, "100", "road"),
        ("Lyon", "20", None, "road"),
        ("Lyon", "20", "100", None),
        ("  ", "20", "100", "road"),
        ("Lyon", "abc", "100", "road"),
        ("Lyon", "0", "100", "road"),
        ("Lyon", "20", "-1", "road"),
        ("Lyon", "inf", "100", "road"),
        ("Lyon", "20", "nan", "road"),
        ("Lyon", "1e12", "100", "road"),
        ("Lyon", "20", "200000", "road"),
    ])
    def test_malformed(self, address, distance, elevation, practice):
        with pytest.raises(ValueError, match="Missing or invalid query parameters"):
            ride_request_from_query(address, distance, elevation, practice)
