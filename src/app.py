"""
app.py - Paju Earthquake Shelter Finder
🏫 지진 대피소 찾기 · AI 대피 가이드 · 대피 시뮬레이션

Pages:
- 홈             (stats, recent earthquakes, quick search)
- 대피소 찾기     (area / address search, map, detail)
- AI 대피 가이드  (chat, backed by chat_api.py)
- 대피 시뮬레이션 (four-step scenario wizard)
- 지진 위험도     (risk score, fault lines, earthquake record)

Run:
    streamlit run src/app.py
"""

import streamlit as st

from ai_guide_page import render_ai_guide_page
from config import setup_logging
from evacuation_simulation_page import render_evacuation_simulation_page
from home_page import render_home_page
from risk_page import render_risk_page
from shelter_search_page import render_shelter_search_page

setup_logging()

# ========== PAGE CONFIGURATION ==========
st.set_page_config(
    page_title="파주시 지진 대피소",
    page_icon="🏫",
    layout="wide",
    initial_sidebar_state="expanded"
)

PAGES = {
    "home":       ("🏠 홈", render_home_page),
    "search":     ("📍 대피소 찾기", render_shelter_search_page),
    "guide":      ("💬 AI 대피 가이드", render_ai_guide_page),
    "simulation": ("🧭 대피 시뮬레이션", render_evacuation_simulation_page),
    "risk":       ("📈 지진 위험도", render_risk_page),
}


# ========== SIDEBAR ==========
def render_sidebar():
    with st.sidebar:
        st.markdown("<h2 style='color:#2563EB;margin-bottom:0;'>파주시 지진 안전</h2>",
                    unsafe_allow_html=True)
        st.caption("Earthquake Evacuation Service")
        st.divider()

        current = st.session_state.get("page", "home")
        for key, (label, _) in PAGES.items():
            if st.button(label, key=f"nav_{key}", use_container_width=True,
                         type="primary" if key == current else "secondary"):
                st.session_state.page = key
                st.rerun()

        st.divider()
        st.caption("긴급 신고: **119**  ·  경찰: **112**")


# ========== MAIN APP ROUTING ==========
def main():
    if st.session_state.get("page") not in PAGES:
        st.session_state.page = "home"

    render_sidebar()
    _, render = PAGES[st.session_state.page]
    render()


if __name__ == "__main__":
    main()
