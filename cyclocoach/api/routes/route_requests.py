# path: cyclocoach/api/routes/route_requests.py

from __future__ import annotations

import logging

from fastapi import APIRouter

from cyclocoach.models.ride_models import AssistantReply, RouteRequestIn, RouteRequestOut
from cyclocoach.services.reply_composer import compose_reply
from cyclocoach.services.request_parser import parse_ride_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/route-requests", tags=["route-requests"])


@router.post("", response_model=RouteRequestOut)
def create_route_request(body: RouteRequestIn) -> RouteRequestOut:
    # No match is a normal outcome; the caller falls back to plain chat.
    request = parse_ride_request(body.message)
    if request is None:
        return RouteRequestOut(matched=False)

    logger.info("Route request: %.1f km, %.0f m D+, %s", request.distance_km,
                request.elevation_gain_m, request.practice_type)
    return RouteRequestOut(
        matched=True,
        request=request,
        reply=AssistantReply(action="gpx", content=compose_reply(request)),
    )
