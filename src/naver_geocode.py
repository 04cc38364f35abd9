"""
naver_geocode.py

Address -> coordinate lookup through the Naver Cloud Platform geocoder,
plus outbound Naver Map links (search, directions).

The Paju fallback: if a free-form address resolves outside Paju, retry once
with the "파주시 " prefix before giving up.
"""

from typing import Dict, Optional, Tuple
from urllib.parse import quote, urlencode

import requests
import structlog

from config import CITY_NAME, CITY_PREFIX, HTTP_TIMEOUT, get_geocode_url, get_naver_credentials
from geo import is_in_paju

logger = structlog.get_logger(__name__)

NAVER_MAP_ROUTE_URL = "https://map.naver.com/index.nhn"
NAVER_MAP_SEARCH_URL = "https://map.naver.com/v5/search/"


class NaverConfigError(RuntimeError):
    """Raised when geocoder credentials are missing."""


def geocode_with_naver(query: str) -> Optional[Dict]:
    """
    Geocode one query.
    Returns {'lat', 'lon', 'address'} or None when Naver finds nothing.
    Network / HTTP errors propagate to the caller.
    """
    if not query or not query.strip():
        return None

    client_id, client_secret = get_naver_credentials()
    if not client_id or not client_secret:
        raise NaverConfigError("NAVER_MAP_CLIENT_ID / NAVER_MAP_CLIENT_SECRET are not defined")

    r = requests.get(
        get_geocode_url(),
        params={"query": query},
        headers={
            "X-NCP-APIGW-API-KEY-ID": client_id,
            "X-NCP-APIGW-API-KEY": client_secret,
            "Accept": "application/json",
        },
        timeout=HTTP_TIMEOUT,
    )
    r.raise_for_status()
    return parse_geocode_response(r.json(), query)


def parse_geocode_response(data: Dict, query: str) -> Optional[Dict]:
    if not data or data.get("status") != "OK":
        return None
    addresses = data.get("addresses") or []
    if not addresses:
        return None
    first = addresses[0]
    try:
        lat = float(first["y"])
        lon = float(first["x"])
    except (KeyError, TypeError, ValueError):
        return None
    address = first.get("roadAddress") or first.get("jibunAddress") or query
    return {"lat": lat, "lon": lon, "address": address}


def geocode_with_paju_fallback(raw_query: str, geocoder=geocode_with_naver) -> Optional[Tuple[Dict, str]]:
    """
    Two-pass geocode restricted to Paju.
    Returns (point, used_query) or None.
    """
    query = (raw_query or "").strip()
    if not query:
        return None

    # 1st pass: exactly what the user typed
    try:
        first = geocoder(query)
        if first and is_in_paju(first["lat"], first["lon"]):
            return first, query
    except Exception as e:
        logger.error("first geocode failed for %r: %s", query, e)

    if CITY_NAME in query:
        return None

    # 2nd pass: prefix the city name
    prefixed = f"{CITY_PREFIX} {query}"
    try:
        second = geocoder(prefixed)
        if second and is_in_paju(second["lat"], second["lon"]):
            return second, prefixed
    except Exception as e:
        logger.error("fallback geocode failed for %r: %s", prefixed, e)

    return None


# ── Naver Map links ──────────────────────────────────────────────────
def naver_directions_url(start_lat, start_lon, end_lat, end_lon,
                         start_name: str, end_name: str) -> str:
    """PC-web Naver Map route link (pathType=3)."""
    params = {
        "slng": start_lon,
        "slat": start_lat,
        "stext": start_name,
        "elng": end_lon,
        "elat": end_lat,
        "etext": end_name,
        "menu": "route",
        "pathType": 3,
    }
    return f"{NAVER_MAP_ROUTE_URL}?{urlencode(params, quote_via=quote)}"


def naver_search_url(keyword: str) -> str:
    return NAVER_MAP_SEARCH_URL + quote(keyword, safe="")
