"""
geo_map.py

Folium maps for the shelter finder:
  - Shelter markers (click -> detail view)
  - Search position marker
  - Fault lines coloured by risk level
"""

from typing import Dict, List, Optional

import folium
import streamlit as st
from streamlit_folium import st_folium

from config import PAJU_CENTER_LAT, PAJU_CENTER_LON
from shelter_search import has_coords

# ── Risk level colours ────────────────────────────────────────────────
RISK_COLORS = {
    "high":   "#DC2626",
    "medium": "#F59E0B",
    "low":    "#16A34A",
}

USER_COLOR = "#2563EB"
SELECTED_COLOR = "red"
SHELTER_COLOR = "blue"


def _risk_color(level):
    return RISK_COLORS.get(str(level).lower(), "#888888")


def build_shelter_map(
    shelters: List[Dict],
    user_pos: Optional[Dict] = None,
    selected: Optional[Dict] = None,
    zoom_start: int = 11,
) -> folium.Map:
    """
    Centre on the selected shelter, else the search position, else Paju.
    """
    if selected and has_coords(selected):
        center = [selected["lat"], selected["lon"]]
        zoom_start = max(zoom_start, 14)
    elif user_pos:
        center = [user_pos["lat"], user_pos["lon"]]
    else:
        center = [PAJU_CENTER_LAT, PAJU_CENTER_LON]

    m = folium.Map(location=center, zoom_start=zoom_start, tiles="OpenStreetMap")

    if user_pos:
        folium.CircleMarker(
            location=[user_pos["lat"], user_pos["lon"]],
            radius=8,
            color="white",
            weight=2,
            fill=True,
            fillColor=USER_COLOR,
            fillOpacity=1.0,
            tooltip="검색 위치",
        ).add_to(m)

    selected_id = selected.get("facility_serial") if selected else None
    for shelter in shelters:
        if not has_coords(shelter):
            continue
        is_selected = shelter.get("facility_serial") == selected_id
        folium.Marker(
            location=[shelter["lat"], shelter["lon"]],
            tooltip=shelter["name"],
            popup=folium.Popup(
                f"<b>{shelter['name']}</b><br>{shelter.get('road_addr') or '주소 정보 없음'}",
                max_width=250,
            ),
            icon=folium.Icon(color=SELECTED_COLOR if is_selected else SHELTER_COLOR, icon="home"),
        ).add_to(m)

    return m


def shelter_at(shelters: List[Dict], lat, lon, tolerance: float = 1e-6) -> Optional[Dict]:
    """Shelter whose marker sits at the clicked position."""
    if lat is None or lon is None:
        return None
    for shelter in shelters:
        if not has_coords(shelter):
            continue
        if abs(shelter["lat"] - lat) <= tolerance and abs(shelter["lon"] - lon) <= tolerance:
            return shelter
    return None


def render_shelter_map(shelters, user_pos=None, selected=None, height=600, key="shelter_map"):
    """
    Draw the map and return the shelter the user clicked, if any.
    """
    m = build_shelter_map(shelters, user_pos=user_pos, selected=selected)
    state = st_folium(m, width=None, height=height, key=key,
                      returned_objects=["last_object_clicked"])
    clicked = (state or {}).get("last_object_clicked")
    # st_folium keeps reporting the last click on every rerun
    if not clicked or clicked == st.session_state.get(f"{key}_handled_click"):
        return None
    st.session_state[f"{key}_handled_click"] = clicked
    return shelter_at(shelters, clicked.get("lat"), clicked.get("lng"))


def build_fault_line_map(fault_lines: List[Dict], zoom_start: int = 9) -> folium.Map:
    m = folium.Map(location=[PAJU_CENTER_LAT, PAJU_CENTER_LON], zoom_start=zoom_start,
                   tiles="OpenStreetMap")

    legend_html = """
    <div style="position:fixed;bottom:30px;left:30px;z-index:1000;
                background:rgba(255,255,255,0.92);padding:10px 14px;
                border-radius:8px;border:1px solid #ccc;font-size:12px;">
      <b>단층 위험도</b><br>
      <span style="color:#DC2626;">&#9632;</span> 높음<br>
      <span style="color:#F59E0B;">&#9632;</span> 보통<br>
      <span style="color:#16A34A;">&#9632;</span> 낮음
    </div>
    """
    m.get_root().html.add_child(folium.Element(legend_html))

    for line in fault_lines:
        coords = line.get("coordinates") or []
        points = [[c["lat"], c["lng"]] for c in coords if "lat" in c and "lng" in c]
        if len(points) < 2:
            continue
        folium.PolyLine(
            points,
            color=_risk_color(line.get("risk_level")),
            weight=5,
            opacity=0.8,
            tooltip=folium.Tooltip(
                f"<b>{line.get('name', '단층')}</b><br>위험도: {line.get('risk_level', '-')}"
            ),
        ).add_to(m)

    folium.Marker(
        location=[PAJU_CENTER_LAT, PAJU_CENTER_LON],
        tooltip="파주시청",
        icon=folium.Icon(color="blue", icon="info-sign"),
    ).add_to(m)
    return m
