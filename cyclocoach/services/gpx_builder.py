# path: cyclocoach/services/gpx_builder.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from xml.sax.saxutils import escape
import logging
import re
import unicodedata

from cyclocoach import config
from cyclocoach.models.ride_models import RideRequest, RouteFile, TrackPoint
from cyclocoach.services.practice import practice_label
from cyclocoach.services.route_synthesizer import synthesize_track
from cyclocoach.utils.numbers import format_fixed, round_half_up

logger = logging.getLogger(__name__)

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
GPX_MEDIA_TYPE = "application/gpx+xml; charset=utf-8"
DEFAULT_SLUG = "ride"

_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}
_NON_ALNUM_RE = re.compile(r"[\W_]+")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")


def escape_xml(value: str) -> str:
    return escape(value, _QUOTE_ENTITIES)


def slugify(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value.lower())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return _NON_ALNUM_RE.sub("-", stripped).strip("-")


def format_timestamp(moment: datetime) -> str:
    # 2024-05-01T08:30:00.000Z
    if moment.tzinfo is None:
        raise ValueError("timestamps need a timezone-aware datetime")
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def route_name(request: RideRequest) -> str:
    return f"{config.BRAND_NAME} {practice_label(request.practice_type)} route"


def route_description(request: RideRequest) -> str:
    return f"{format_fixed(request.distance_km, 1)} km loop starting from {request.address}"


def build_gpx_filename(request: RideRequest, ascii_only: bool = False) -> str:
    slug = slugify(practice_label(request.practice_type))
    if ascii_only:
        # HTTP header fallback: "шосе" has no ASCII form and becomes the default.
        slug = _HYPHEN_RUN_RE.sub("-", slug.encode("ascii", "ignore").decode("ascii")).strip("-")
    slug = slug or DEFAULT_SLUG
    rounded_km = max(1, round_half_up(request.distance_km))
    return f"{config.GPX_FILE_PREFIX}-{slug}-{rounded_km}km.gpx"


def _trkpt(point: TrackPoint, start_time: datetime) -> str:
    timestamp = format_timestamp(start_time + timedelta(seconds=point.time_offset_s))
    return (
        f'      <trkpt lat="{format_fixed(point.lat, 6)}" lon="{format_fixed(point.lon, 6)}">\n'
        f"        <ele>{format_fixed(point.ele, 1)}</ele>\n"
        f"        <time>{timestamp}</time>\n"
        "      </trkpt>"
    )


def build_gpx_document(
    request: RideRequest,
    points: List[TrackPoint],
    start_time: Optional[datetime] = None,
) -> str:
    """
    GPX 1.1 document with one track and one segment.

    Timestamps start at `start_time` (default: now, UTC, truncated to the
    minute) plus each point's offset. A naive `start_time` is rejected
    with ValueError rather than guessed as local time.
    """
    if start_time is None:
        start_time = datetime.now(timezone.utc)
    elif start_time.tzinfo is None:
        raise ValueError("start_time must be timezone-aware")
    start_time = start_time.replace(second=0, microsecond=0)

    name = escape_xml(route_name(request))
    desc = escape_xml(route_description(request))
    creator = escape_xml(config.BRAND_NAME)
    segment = "\n".join(_trkpt(p, start_time) for p in points)

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<gpx version="1.1" creator="{creator}" xmlns="{GPX_NAMESPACE}">\n'
        "  <metadata>\n"
        f"    <name>{name}</name>\n"
        f"    <desc>{desc}</desc>\n"
        "  </metadata>\n"
        "  <trk>\n"
        f"    <name>{name}</name>\n"
        "    <trkseg>\n"
        f"{segment}\n"
        "    </trkseg>\n"
        "  </trk>\n"
        "</gpx>\n"
    )


def create_gpx_file(request: RideRequest, start_time: Optional[datetime] = None) -> RouteFile:
    points = synthesize_track(request)
    filename = build_gpx_filename(request)
    logger.info("Built %s (%d points)", filename, len(points))
    return RouteFile(
        filename=filename,
        ascii_filename=build_gpx_filename(request, ascii_only=True),
        content=build_gpx_document(request, points, start_time=start_time),
    )
