"""
geo.py

Distance and area helpers for the shelter finder.

Features:
- Straight-line (haversine) distance in km
- Paju bounding-box check
- Administrative-area query detection (금촌동, 파주시, ...)
- Rough walking / driving estimates
"""

from math import atan2, ceil, cos, radians, sin, sqrt

from config import PAJU_LAT_MAX, PAJU_LAT_MIN, PAJU_LON_MAX, PAJU_LON_MIN

EARTH_RADIUS_KM = 6371

ADMIN_SUFFIXES = ("동", "읍", "면", "리", "시", "군", "구")


def haversine_km(lat1, lon1, lat2, lon2):
    """
    Calculate distance between two points on Earth (in km)
    """
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_in_paju(lat, lon) -> bool:
    return PAJU_LAT_MIN <= lat <= PAJU_LAT_MAX and PAJU_LON_MIN <= lon <= PAJU_LON_MAX


def is_administrative_query(query: str) -> bool:
    """
    True for area names like '금촌동' or '파주시'.
    Anything with a digit is treated as a road address instead.
    """
    q = (query or "").strip()
    if not q:
        return False
    if any(ch.isdigit() for ch in q):
        return False
    return q.endswith(ADMIN_SUFFIXES)


# ── travel estimates ─────────────────────────────────────────────────
def walk_minutes(km: float) -> int:
    return ceil(km * 12)


def drive_minutes(km: float) -> int:
    return ceil(km * 3)


def road_distance_km(km: float) -> float:
    # straight line plus a fixed detour
    return km + 0.3
