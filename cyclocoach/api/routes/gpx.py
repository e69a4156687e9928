# path: cyclocoach/api/routes/gpx.py

from __future__ import annotations

from typing import Optional
from urllib.parse import quote
import logging

from fastapi import APIRouter, HTTPException, Query, Response

from cyclocoach.models.ride_models import RouteFile
from cyclocoach.services.gpx_builder import GPX_MEDIA_TYPE, create_gpx_file
from cyclocoach.services.reply_composer import ride_request_from_query

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/gpx", tags=["gpx"])


def content_disposition(route_file: RouteFile) -> str:
    # Header values are latin-1; non-ASCII names go in the RFC 5987 filename* form.
    header = f'attachment; filename="{route_file.ascii_filename}"'
    if route_file.filename != route_file.ascii_filename:
        header += f"; filename*=UTF-8''{quote(route_file.filename, safe='')}"
    return header


@router.get("")
def download_gpx(
    address: Optional[str] = None,
    distance_km: Optional[str] = Query(default=None, alias="distanceKm"),
    elevation_gain: Optional[str] = Query(default=None, alias="elevationGain"),
    practice_type: Optional[str] = Query(default=None, alias="practiceType"),
) -> Response:
    # Numbers arrive as raw strings so bad input is a 400, not a 422.
    try:
        request = ride_request_from_query(address, distance_km, elevation_gain, practice_type)
    except ValueError as e:
        logger.warning("Rejected GPX download query: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    route_file = create_gpx_file(request)
    return Response(
        content=route_file.content,
        media_type=GPX_MEDIA_TYPE,
        headers={"Content-Disposition": content_disposition(route_file)},
    )
