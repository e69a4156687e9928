# path: cyclocoach/models/ride_models.py

from __future__ import annotations

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Upper bounds for a ride; far larger distances push GPX timestamps past datetime.max.
MAX_DISTANCE_KM = 10_000.0
MAX_ELEVATION_GAIN_M = 100_000.0


class RideRequest(BaseModel):
    """The four parameters a route is generated from."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(min_length=1)
    distance_km: float = Field(gt=0, le=MAX_DISTANCE_KM, allow_inf_nan=False)
    elevation_gain_m: float = Field(ge=0, le=MAX_ELEVATION_GAIN_M, allow_inf_nan=False)
    practice_type: str = Field(min_length=1)

    @field_validator("address", "practice_type")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class TrackPoint(BaseModel):
    lat: float
    lon: float  # not wrapped to [-180,180), see DESIGN.md
    ele: float = Field(ge=0)
    time_offset_s: float = Field(ge=0)


class RouteFile(BaseModel):
    filename: str
    ascii_filename: str
    content: str


class AssistantReply(BaseModel):
    role: Literal["assistant"] = "assistant"
    action: Literal["msg", "gpx"]
    content: str


class RouteRequestIn(BaseModel):
    message: str = Field(min_length=1)


class RouteRequestOut(BaseModel):
    matched: bool
    request: Optional[RideRequest] = None
    reply: Optional[AssistantReply] = None
