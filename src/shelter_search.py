"""
shelter_search.py

Search modes and ranking for the shelter list.

    DEFAULT  - empty query: every shelter, nearest to the Paju centre first
    REGION   - area name (금촌동, 문산읍 ...): road-address substring filter
    ADDRESS  - road/building address: geocode (with Paju fallback), then the
               NEARBY_LIMIT closest shelters

Distance / travel-time info is only meaningful in ADDRESS mode.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from config import NEARBY_LIMIT, PAJU_CENTER_LAT, PAJU_CENTER_LON
from geo import haversine_km, is_administrative_query
from naver_geocode import geocode_with_naver, geocode_with_paju_fallback

MODE_DEFAULT = "DEFAULT"
MODE_REGION = "REGION"
MODE_ADDRESS = "ADDRESS"

DEFAULT_LABEL = "파주시 전체 기준, 가까운 순"
NO_RESULT_LABEL = "검색 결과가 없습니다. 도로명 주소를 다시 확인해 주세요."

DEFAULT_FACILITIES = {
    "medical": True,
    "restroom": True,
    "supplies": True,
    "wifi": False,
    "generator": False,
    "emergency_power": True,
    "pets_allowed": False,
}


@dataclass
class SearchResult:
    mode: str
    shelters: List[Dict]
    label: str
    user_pos: Optional[Dict] = None
    used_query: Optional[str] = None

    @property
    def shows_distance(self) -> bool:
        return self.mode == MODE_ADDRESS


def to_shelter(row: Dict) -> Dict:
    """Attach the display-only fields to a shelter_facilities row."""
    shelter = dict(row)
    shelter["address"] = row.get("road_addr") or ""
    shelter["is_24h_open"] = True
    shelter["facilities"] = dict(DEFAULT_FACILITIES)
    return shelter


def has_coords(shelter: Dict) -> bool:
    return bool(shelter.get("lat")) and bool(shelter.get("lon"))


def sort_by_distance(shelters: List[Dict], lat: float, lon: float) -> List[Dict]:
    """Nearest first; shelters without coordinates go last."""
    def key(s):
        if not has_coords(s):
            return float("inf")
        return haversine_km(lat, lon, s["lat"], s["lon"])
    return sorted(shelters, key=key)


def distance_for(shelter: Dict, user_pos: Optional[Dict]) -> Optional[float]:
    if shelter.get("lat") is None or shelter.get("lon") is None:
        return None
    base_lat = user_pos["lat"] if user_pos else PAJU_CENTER_LAT
    base_lon = user_pos["lon"] if user_pos else PAJU_CENTER_LON
    return haversine_km(base_lat, base_lon, shelter["lat"], shelter["lon"])


def default_result(shelters: List[Dict]) -> SearchResult:
    return SearchResult(
        mode=MODE_DEFAULT,
        shelters=sort_by_distance(shelters, PAJU_CENTER_LAT, PAJU_CENTER_LON),
        label=DEFAULT_LABEL,
    )


def run_search(shelters: List[Dict], query: str, geocoder=geocode_with_naver) -> SearchResult:
    q = (query or "").strip()

    if not q:
        return default_result(shelters)

    # 1) administrative area
    if is_administrative_query(q):
        matched = [s for s in shelters if q in (s.get("road_addr") or "")]
        return SearchResult(
            mode=MODE_REGION,
            shelters=matched,
            label=f'행정구역 "{q}" 대피소 목록',
            used_query=q,
        )

    # 2) road / building address
    found = geocode_with_paju_fallback(q, geocoder=geocoder)
    if found:
        point, used_query = found
        nearest = sort_by_distance(shelters, point["lat"], point["lon"])[:NEARBY_LIMIT]
        base = "검색 위치 기준" if used_query == q else f"검색 위치 기준 ({used_query})"
        return SearchResult(
            mode=MODE_ADDRESS,
            shelters=nearest,
            label=f"{base}, 가까운 대피소 {len(nearest)}곳",
            user_pos={"lat": point["lat"], "lon": point["lon"]},
            used_query=used_query,
        )

    # 3) nothing inside Paju; REGION hides distance info
    return SearchResult(mode=MODE_REGION, shelters=[], label=NO_RESULT_LABEL, used_query=q)


def search_context_label(mode: str, last_query: Optional[str]) -> str:
    """One-line description of how the user reached a shelter detail view."""
    if not last_query:
        return "기본 보기 (파주시 전체 기준)"
    if mode == MODE_REGION:
        return f'최근 검색: "{last_query}" (행정구역 기준)'
    if mode == MODE_ADDRESS:
        return f'최근 검색: "{last_query}" (검색 위치 기준)'
    return f'최근 검색: "{last_query}"'
