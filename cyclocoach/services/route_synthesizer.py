# path: cyclocoach/services/route_synthesizer.py

"""
Synthetic closed-loop track for a RideRequest.

The loop is anchored at a pseudo-random location derived from
address + practice type only; the address is never geocoded. Elevation
follows three phases (climb, plateau, return to the start altitude) and
timing is spread uniformly over an estimated moving time.

Draw order on the RNG is part of the output contract: anchor lat, anchor
lon, start elevation, then per point the radius jitter followed by the
elevation-phase draw (none for the last climbing point).
"""

from __future__ import annotations

from typing import Callable, List, Tuple
import logging
import math

from cyclocoach.models.ride_models import RideRequest, TrackPoint
from cyclocoach.services.practice import estimate_average_speed, practice_roughness
from cyclocoach.utils.geo import km_to_deg, loop_radius_km, polyline_length_m
from cyclocoach.utils.numbers import round_half_up
from cyclocoach.utils.rng import DeterministicRng

logger = logging.getLogger(__name__)

MIN_POINTS = 12
MAX_POINTS = 240
POINTS_PER_KM = 6

MIN_DURATION_S = 600.0
MIN_SPEED_KMH = 5.0

Rng = Callable[[], float]


def point_count_for(distance_km: float) -> int:
    return max(MIN_POINTS, min(MAX_POINTS, round_half_up(distance_km * POINTS_PER_KM)))


def phase_split(point_count: int) -> Tuple[int, int, int]:
    """(ascent, plateau, descent) point counts."""
    ascent = max(3, round_half_up(point_count * 0.4))
    plateau = max(2, round_half_up(point_count * 0.2))
    descent = max(3, point_count - ascent - plateau)
    return ascent, plateau, descent


def total_duration_s(request: RideRequest) -> float:
    speed = max(MIN_SPEED_KMH, estimate_average_speed(request.practice_type))
    return max(MIN_DURATION_S, request.distance_km / speed * 3600)


class ElevationProfile:
    """
    Stateful climb / plateau / descent generator.

    The climb phase adds jittered steps (+/-15%) and its last point takes
    whatever gain is left, so the climb always totals exactly the requested
    gain. The plateau wobbles by +/-10% of a climb step. The descent closes
    a growing share (15% -> 55%) of the gap to just below the start altitude.
    """

    def __init__(self, rng: Rng, elevation_gain_m: float, point_count: int):
        self._rng = rng
        self.ascent_points, self.plateau_points, self.descent_points = phase_split(point_count)
        self.remaining_gain = elevation_gain_m
        self.ascent_step = elevation_gain_m / self.ascent_points
        self.elevation = 80 + rng() * 600
        self.base_elevation = self.elevation

    def advance(self, index: int) -> float:
        rng = self._rng
        if index < self.ascent_points:
            if index == self.ascent_points - 1:
                step = self.remaining_gain
            else:
                step = self.ascent_step + (rng() - 0.5) * self.ascent_step * 0.3
            applied = max(0.0, min(step, self.remaining_gain))
            self.elevation += applied
            self.remaining_gain -= applied
        elif index < self.ascent_points + self.plateau_points:
            self.elevation += (rng() - 0.5) * self.ascent_step * 0.2
        else:
            progress = (index - self.ascent_points - self.plateau_points) / max(1, self.descent_points)
            target = self.base_elevation - rng() * 20
            self.elevation += (target - self.elevation) * (0.15 + progress * 0.4)
        return max(0.0, self.elevation)


def synthesize_track(request: RideRequest) -> List[TrackPoint]:
    rng = DeterministicRng(request.address + request.practice_type)
    count = point_count_for(request.distance_km)

    base_lat = rng() * 140 - 70
    base_lon = rng() * 360 - 180
    radius_lat, radius_lon = km_to_deg(loop_radius_km(request.distance_km), base_lat)
    roughness = practice_roughness(request.practice_type)

    profile = ElevationProfile(rng, request.elevation_gain_m, count)
    interval_s = total_duration_s(request) / count

    points = []
    for i in range(count):
        angle = i / count * 2 * math.pi
        jitter = 0.7 + rng() * 0.6 * roughness
        lat = base_lat + math.sin(angle) * radius_lat * jitter
        lon = base_lon + math.cos(angle) * radius_lon * jitter
        ele = profile.advance(i)
        points.append(TrackPoint(lat=lat, lon=lon, ele=ele, time_offset_s=interval_s * i))

    # Close the loop; the last time offset stays as computed.
    first = points[0]
    points[-1] = points[-1].model_copy(update={"lat": first.lat, "lon": first.lon, "ele": first.ele})

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Synthesized %d points around (%.4f, %.4f), loop %.1f km for %.1f km requested",
            count, base_lat, base_lon,
            polyline_length_m((p.lat, p.lon) for p in points) / 1000.0,
            request.distance_km,
        )
    return points
