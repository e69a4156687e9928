# path: cyclocoach/services/reply_composer.py

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode
import math

from cyclocoach import config
from cyclocoach.models.ride_models import MAX_DISTANCE_KM, MAX_ELEVATION_GAIN_M, RideRequest
from cyclocoach.services.gpx_builder import build_gpx_filename
from cyclocoach.services.practice import estimate_average_speed, practice_label
from cyclocoach.utils.numbers import format_fixed, format_number, round_half_up

# Query parameter names shared with the download endpoint.
QUERY_ADDRESS = "address"
QUERY_DISTANCE = "distanceKm"
QUERY_ELEVATION = "elevationGain"
QUERY_PRACTICE = "practiceType"


def format_duration(hours: float) -> Optional[str]:
    """1.5 -> "1h30", 2.0 -> "2h00", 0.75 -> "45 min"; None for non-positive input."""
    if not math.isfinite(hours) or hours <= 0:
        return None
    hrs, mins = divmod(round_half_up(hours * 60), 60)
    if hrs and mins:
        return f"{hrs}h{mins:02d}"
    if hrs:
        return f"{hrs}h00"
    return f"{mins} min"


def build_download_url(request: RideRequest) -> str:
    params = urlencode({
        QUERY_ADDRESS: request.address,
        QUERY_DISTANCE: format_number(request.distance_km),
        QUERY_ELEVATION: format_number(request.elevation_gain_m),
        QUERY_PRACTICE: request.practice_type,
    })
    return f"{config.GPX_DOWNLOAD_PATH}?{params}"


def _parse_query_number(value: Optional[str], upper: float, allow_zero: bool = False) -> Optional[float]:
    if not value:
        return None
    try:
        number = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(number) or number < 0 or (number == 0 and not allow_zero) or number > upper:
        return None
    return number


def ride_request_from_query(
    address: Optional[str],
    distance_km: Optional[str],
    elevation_gain: Optional[str],
    practice_type: Optional[str],
) -> RideRequest:
    """
    Rebuild the RideRequest encoded by build_download_url.
    Raises ValueError when a field is missing or not a valid number.
    """
    distance = _parse_query_number(distance_km, MAX_DISTANCE_KM)
    elevation = _parse_query_number(elevation_gain, MAX_ELEVATION_GAIN_M, allow_zero=True)
    if not address or not address.strip() or not practice_type or not practice_type.strip():
        raise ValueError("Missing or invalid query parameters.")
    if distance is None or elevation is None:
        raise ValueError("Missing or invalid query parameters.")
    return RideRequest(
        address=address,
        distance_km=distance,
        elevation_gain_m=elevation,
        practice_type=practice_type,
    )


def compose_reply(request: RideRequest) -> str:
    """Markdown summary shown in the chat, with a link to the GPX download."""
    duration = format_duration(request.distance_km / estimate_average_speed(request.practice_type))
    filename = build_gpx_filename(request)

    lines = [
        f"Here is a **{practice_label(request.practice_type)}** route starting from **{request.address}**.",
        f"- Distance: {format_fixed(request.distance_km, 1)} km",
        f"- Elevation gain: {round_half_up(request.elevation_gain_m)} m",
        f"- Estimated moving time: {duration}" if duration else None,
        f'[⬇️ Download the GPX file]({build_download_url(request)} "Download {filename}")',
        "Import this GPX into your preferred navigation app and enjoy the ride!",
    ]
    return "\n\n".join(line for line in lines if line)
