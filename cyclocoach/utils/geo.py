# path: cyclocoach/utils/geo.py

from __future__ import annotations

from typing import Iterable, Tuple
import math

KM_PER_DEG_LAT = 111.0
MIN_ABS_COS = 0.1


def safe_cos_lat(lat_deg: float) -> float:
    # Floor |cos| at 0.1, keeping the sign, so lon degrees don't blow up near the poles.
    cos_lat = math.cos(lat_deg * math.pi / 180)
    if abs(cos_lat) > MIN_ABS_COS:
        return cos_lat
    sign = 1.0 if cos_lat == 0 else math.copysign(1.0, cos_lat)
    return MIN_ABS_COS * sign


def loop_radius_km(distance_km: float) -> float:
    return max(1.0, distance_km / (2 * math.pi))


def km_to_deg(radius_km: float, lat_deg: float) -> Tuple[float, float]:
    """(lat degrees, lon degrees) spanned by radius_km around lat_deg."""
    return radius_km / KM_PER_DEG_LAT, radius_km / (KM_PER_DEG_LAT * safe_cos_lat(lat_deg))


def haversine_m(a_lat: float, a_lon: float, b_lat: float, b_lon: float) -> float:
    r = 6371000.0
    phi1 = math.radians(a_lat)
    phi2 = math.radians(b_lat)
    dphi = math.radians(b_lat - a_lat)
    dlmb = math.radians(b_lon - a_lon)

    s = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * r * math.asin(math.sqrt(s))


def polyline_length_m(points_latlon: Iterable[Tuple[float, float]]) -> float:
    total = 0.0
    prev = None
    for lat, lon in points_latlon:
        if prev is not None:
            total += haversine_m(prev[0], prev[1], lat, lon)
        prev = (lat, lon)
    return total
