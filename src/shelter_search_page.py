"""
shelter_search_page.py

대피소 검색/추천 - list + map + detail views.

Search by area name (금촌동, 파주시) or road address (시청로 50).
Address searches are geocoded with the Paju fallback and show the ten
closest shelters with straight-line distance and rough walk/drive times.
"""

import streamlit as st
import structlog

from geo import drive_minutes, road_distance_km, walk_minutes
from geo_map import render_shelter_map
from naver_geocode import naver_directions_url, naver_search_url
from shelter_search import (
    MODE_ADDRESS,
    MODE_DEFAULT,
    default_result,
    distance_for,
    run_search,
    search_context_label,
    to_shelter,
)
from supabase_integration import load_shelters, log_user_search

logger = structlog.get_logger(__name__)

# home page hands its query over through this key
PENDING_QUERY_KEY = "pending_search_query"
MAP_VERSION_KEY = "shelter_map_version"

SAFETY_TIPS = [
    "머리를 보호하고 안전한 자세를 유지하세요.",
    "가스와 전기를 차단하고 문을 열어 대피 통로를 확보하세요.",
    "엘리베이터 대신 계단을 이용하세요.",
    "가능한 도보로 이동하고, 차량 정체를 피하세요.",
]


def _init_state(shelters):
    if "search_result" not in st.session_state:
        st.session_state.search_result = default_result(shelters)
    st.session_state.setdefault("search_view", "list")
    st.session_state.setdefault("selected_shelter", None)
    st.session_state.setdefault("search_address", "")
    st.session_state.setdefault(MAP_VERSION_KEY, 0)


def do_search(shelters, query):
    result = run_search(shelters, query)
    logger.info("shelter search %r -> %s, %d results", query, result.mode, len(result.shelters))
    st.session_state.search_result = result
    st.session_state.selected_shelter = None
    if result.mode == MODE_ADDRESS and result.user_pos:
        log_user_search(result.used_query, result.user_pos["lat"], result.user_pos["lon"])
    return result


def _select(shelter):
    st.session_state.selected_shelter = shelter


def _open_detail(shelter):
    st.session_state.selected_shelter = shelter
    st.session_state.search_view = "detail"


def _close_detail():
    st.session_state.search_view = "list"
    # new map key drops the last click the component remembers
    st.session_state[MAP_VERSION_KEY] = st.session_state.get(MAP_VERSION_KEY, 0) + 1


def _fmt_distance(d):
    return f"{d:.1f}km" if d is not None else "거리 정보 없음"


# ── detail view ──────────────────────────────────────────────────────
def render_shelter_detail(shelter, result):
    if st.button("← 목록으로", key="back_to_list"):
        _close_detail()
        st.rerun()

    st.title(shelter["name"])
    st.caption(shelter.get("road_addr") or "주소 정보가 없습니다.")
    st.caption(search_context_label(result.mode, result.used_query))

    user_pos = result.user_pos if result.mode == MODE_ADDRESS else None
    has_distance = bool(user_pos) and shelter.get("lat") is not None and shelter.get("lon") is not None

    c1, c2, c3 = st.columns(3)
    c1.metric("예상 혼잡도", "원활")
    c2.metric("최대 수용", f"{shelter['capacity']:,}명" if shelter.get("capacity") is not None else "정보 없음")
    c3.metric("면적(㎡)", f"{shelter['area_sqm']:,}" if shelter.get("area_sqm") is not None else "정보 없음")

    if has_distance:
        d = distance_for(shelter, user_pos)
        d1, d2, d3 = st.columns(3)
        d1.metric("직선 거리", _fmt_distance(d))
        d2.metric("도보", f"약 {walk_minutes(d)}분")
        d3.metric("차량", f"약 {drive_minutes(d)}분")

    st.markdown("### 시설 정보")
    st.markdown(f"- **주소**: {shelter.get('road_addr') or '주소 정보 없음'}")
    st.markdown(f"- **법정동 코드**: {shelter.get('region_code') or '정보 없음'}")
    if shelter.get("lat") is not None and shelter.get("lon") is not None:
        st.markdown(f"- **좌표**: {shelter['lat']:.5f}, {shelter['lon']:.5f}")

    with st.expander("지진 발생 시 행동 요령", expanded=True):
        for tip in SAFETY_TIPS:
            st.markdown(f"• {tip}")

    b1, b2 = st.columns(2)
    with b1:
        if has_distance:
            start_name = (result.used_query or "").strip() or "검색 위치"
            url = naver_directions_url(user_pos["lat"], user_pos["lon"],
                                       shelter["lat"], shelter["lon"],
                                       start_name, shelter["name"])
            st.link_button("🧭 길안내", url, use_container_width=True)
        elif st.button("🧭 길안내", key="directions_unavailable", use_container_width=True):
            st.warning("도로명 주소로 검색한 후에 길안내를 사용할 수 있습니다.")
    with b2:
        keyword = shelter.get("road_addr") or shelter["name"]
        st.link_button("🗺️ 네이버지도로 보기", naver_search_url(keyword), use_container_width=True)


# ── list view ────────────────────────────────────────────────────────
def _render_summary_card(shelter, result):
    d = distance_for(shelter, result.user_pos)
    if d is None:
        return
    with st.container(border=True):
        st.markdown(f"**{shelter['name']}**")
        st.caption(shelter.get("road_addr") or "주소 정보 없음")
        c1, c2 = st.columns(2)
        c1.metric("현재 거리", f"{d:.1f}km")
        c2.metric("차량 거리", f"{road_distance_km(d):.1f}km")
        c3, c4 = st.columns(2)
        c3.metric("도보 경로", f"약 {walk_minutes(d)}분")
        c4.metric("차량 경로", f"약 {drive_minutes(d)}분")


def render_shelter_list(shelters, result):
    list_col, map_col = st.columns([1, 2])

    with list_col:
        st.markdown("### 대피소 검색/추천")
        st.caption("파주시 내 지진 대피소를 검색하고, 거리·행정구역 기준으로 조회합니다.")
        with st.form("shelter_search_form", border=False):
            query = st.text_input("동/읍/면/시 또는 도로명 주소 검색",
                                  value=st.session_state.search_address,
                                  placeholder="예: 금촌동, 파주시, 시청로 50",
                                  key="search_query_input")
            submitted = st.form_submit_button("🔍 검색", key="search_submit", use_container_width=True)
        if submitted:
            st.session_state.search_address = query
            with st.spinner("검색 중..."):
                do_search(shelters, query)
            st.rerun()

        st.markdown(f"**검색 결과 {len(result.shelters)}곳**")
        st.caption(result.label)

        if not shelters:
            st.info("대피소 정보를 불러오지 못했습니다. 잠시 후 다시 시도해주세요.")

        selected = st.session_state.selected_shelter
        with st.container(height=520):
            for shelter in result.shelters:
                is_selected = selected is not None and selected.get("facility_serial") == shelter.get("facility_serial")
                with st.container(border=True):
                    st.markdown(f"{'📍 ' if is_selected else ''}**{shelter['name']}**")
                    st.caption(shelter.get("road_addr") or "주소 정보 없음")
                    if result.shows_distance:
                        st.caption(f"📏 {_fmt_distance(distance_for(shelter, result.user_pos))} · 직선거리 기준")
                    serial = shelter["facility_serial"]
                    b1, b2 = st.columns(2)
                    if b1.button("📍 선택", key=f"select_{serial}", use_container_width=True,
                                 type="primary" if is_selected else "secondary"):
                        _select(shelter)
                        st.rerun()
                    if b2.button("상세보기 ›", key=f"detail_{serial}", use_container_width=True):
                        _open_detail(shelter)
                        st.rerun()

    with map_col:
        clicked = render_shelter_map(result.shelters, user_pos=result.user_pos,
                                     selected=st.session_state.selected_shelter,
                                     key=f"shelter_map_{st.session_state[MAP_VERSION_KEY]}")
        if clicked:
            _open_detail(clicked)
            st.rerun()
        if st.session_state.selected_shelter and result.shows_distance:
            _render_summary_card(st.session_state.selected_shelter, result)


def render_shelter_search_page():
    with st.spinner("대피소 정보를 불러오는 중입니다..."):
        shelters = [to_shelter(row) for row in load_shelters()]
    _init_state(shelters)

    # query typed on the home page runs once
    pending = st.session_state.pop(PENDING_QUERY_KEY, None)
    if pending and pending.strip() and shelters:
        st.session_state.search_address = pending
        do_search(shelters, pending)
        st.session_state.search_view = "list"

    result = st.session_state.search_result
    if result.mode == MODE_DEFAULT and len(result.shelters) != len(shelters):
        # cache refreshed since the default list was built
        result = st.session_state.search_result = default_result(shelters)

    if st.session_state.search_view == "detail" and st.session_state.selected_shelter:
        render_shelter_detail(st.session_state.selected_shelter, result)
    else:
        render_shelter_list(shelters, result)
