"""Shared pytest fixtures for the cyclocoach tests."""

from datetime import datetime, timezone

import pytest

from cyclocoach.models.ride_models import RideRequest


@pytest.fixture
def downing_street():
    return RideRequest(
        address="10 Downing Street",
        distance_km=60,
        elevation_gain_m=800,
        practice_type="road",
    )


@pytest.fixture
def bellecour_gravel():
    return RideRequest(
        address="Place Bellecour, Lyon",
        distance_km=12.5,
        elevation_gain_m=250,
        practice_type="gravel",
    )


@pytest.fixture
def fixed_start():
    return datetime(2024, 5, 1, 8, 30, 45, 123000, tzinfo=timezone.utc)
