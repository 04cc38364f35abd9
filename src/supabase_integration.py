"""
supabase_integration.py

Supabase data layer for the Paju earthquake shelter service.
Pure fetchers take a client so they can be exercised without Streamlit;
the cached `load_*` wrappers are what the pages call.

Tables (public schema, RLS enabled):
    shelter_facilities     (facility_serial, name, road_addr, region_code,
                            area_sqm, capacity, lon, lat)         public read
    earthquakes            (id, occurred_at, location, distance_from_paju,
                            magnitude, depth)                     public read
    fault_lines            (id, name, coordinates jsonb, risk_level)
                                                                  public read
    earthquakerisk_paju    (risk_score)                           public read
    user_searches          (id, user_id, address, latitude, longitude)
                                                                  anon insert
    chatbot_conversations  (id, session_id, user_message, bot_response)
                                                                  anon insert

Any read failure degrades to an empty result; writes report success as bool.
"""

from typing import Dict, List, Optional

import streamlit as st
import structlog
from supabase import Client, create_client

from config import (
    CHAT_LOG_TABLE,
    EARTHQUAKE_TABLE,
    FAULT_LINE_TABLE,
    RISK_TABLE,
    SHELTER_TABLE,
    USER_SEARCH_TABLE,
    get_supabase_key,
    get_supabase_url,
)

logger = structlog.get_logger(__name__)

SHELTER_COLUMNS = "facility_serial,name,road_addr,region_code,area_sqm,capacity,lon,lat"


# ══════════════════════════════════════════════════════════════════════
# CLIENT INITIALIZATION
# ══════════════════════════════════════════════════════════════════════

def create_supabase_client() -> Optional[Client]:
    url, key = get_supabase_url(), get_supabase_key()
    if not url or not key:
        logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY not set; database disabled")
        return None
    try:
        return create_client(url, key)
    except Exception as e:
        logger.error("Supabase client creation failed: %s", e)
        return None


@st.cache_resource
def get_supabase_client() -> Optional[Client]:
    """Supabase client shared across sessions."""
    return create_supabase_client()


# ══════════════════════════════════════════════════════════════════════
# FETCHERS (raise on database errors)
# ══════════════════════════════════════════════════════════════════════

def fetch_shelters(client) -> List[Dict]:
    response = client.table(SHELTER_TABLE).select(SHELTER_COLUMNS).order("name").execute()
    return response.data or []


def fetch_shelter_capacities(client) -> List[Dict]:
    response = client.table(SHELTER_TABLE).select("capacity").execute()
    return response.data or []


def fetch_recent_earthquakes(client, limit: int = 5) -> List[Dict]:
    response = (
        client.table(EARTHQUAKE_TABLE)
        .select("*")
        .order("occurred_at", desc=True)
        .limit(limit)
        .execute()
    )
    return response.data or []


def fetch_all_earthquakes(client) -> List[Dict]:
    response = client.table(EARTHQUAKE_TABLE).select("*").order("occurred_at", desc=True).execute()
    return response.data or []


def fetch_fault_lines(client) -> List[Dict]:
    response = client.table(FAULT_LINE_TABLE).select("*").execute()
    return response.data or []


def fetch_risk_score(client) -> Optional[float]:
    """risk_score of the first earthquakerisk_paju row, or None."""
    response = client.table(RISK_TABLE).select("risk_score").limit(1).execute()
    rows = response.data or []
    if not rows or rows[0].get("risk_score") is None:
        return None
    return float(rows[0]["risk_score"])


def insert_chat_log(client, session_id: str, user_message: str, bot_response: str):
    data = {
        "session_id": session_id,
        "user_message": user_message,
        "bot_response": bot_response,
    }
    client.table(CHAT_LOG_TABLE).insert(data).execute()


def insert_user_search(client, address: str, latitude: float, longitude: float):
    data = {
        "address": address,
        "latitude": latitude,
        "longitude": longitude,
    }
    client.table(USER_SEARCH_TABLE).insert(data).execute()


def summarize_capacities(rows: List[Dict]) -> Dict:
    """Shelter count and total capacity; null capacity counts as 0."""
    return {
        "count": len(rows),
        "total_capacity": sum(r.get("capacity") or 0 for r in rows),
    }


# ══════════════════════════════════════════════════════════════════════
# CACHED LOADERS (never raise)
# ══════════════════════════════════════════════════════════════════════

def _safe_read(fetcher, default, what: str):
    client = get_supabase_client()
    if not client:
        return default
    try:
        return fetcher(client)
    except Exception as e:
        logger.error("Error loading %s: %s", what, e)
        st.sidebar.warning(f"{what} 정보를 불러오지 못했습니다.")
        return default


@st.cache_data(ttl=300)
def load_shelters() -> List[Dict]:
    return _safe_read(fetch_shelters, [], "대피소")


@st.cache_data(ttl=300)
def load_shelter_stats() -> Dict:
    rows = _safe_read(fetch_shelter_capacities, [], "대피소 통계")
    return summarize_capacities(rows)


@st.cache_data(ttl=120)
def load_recent_earthquakes(limit: int = 5) -> List[Dict]:
    return _safe_read(lambda c: fetch_recent_earthquakes(c, limit), [], "최근 지진")


@st.cache_data(ttl=300)
def load_earthquake_history() -> List[Dict]:
    return _safe_read(fetch_all_earthquakes, [], "지진 기록")


@st.cache_data(ttl=3600)
def load_fault_lines() -> List[Dict]:
    return _safe_read(fetch_fault_lines, [], "단층")


@st.cache_data(ttl=300)
def load_risk_score() -> Optional[float]:
    return _safe_read(fetch_risk_score, None, "위험도")


# ══════════════════════════════════════════════════════════════════════
# WRITE OPERATIONS (insert-only logs)
# ══════════════════════════════════════════════════════════════════════

def log_chat_turn(session_id: str, user_message: str, bot_response: str, client=None) -> bool:
    """Store one chat exchange."""
    client = client or get_supabase_client()
    if not client:
        return False
    try:
        insert_chat_log(client, session_id, user_message, bot_response)
        return True
    except Exception as e:
        logger.error("Chat log insert failed: %s", e)
        return False


def log_user_search(address: str, latitude: float, longitude: float, client=None) -> bool:
    """Record a geocoded address search for analytics."""
    client = client or get_supabase_client()
    if not client:
        return False
    try:
        insert_user_search(client, address, latitude, longitude)
        return True
    except Exception as e:
        logger.error("User search insert failed: %s", e)
        return False
