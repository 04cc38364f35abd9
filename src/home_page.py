"""
home_page.py

Landing screen: hero search, feature shortcuts, stats board,
recent earthquakes and city contacts.
"""

from datetime import datetime, timedelta, timezone

import streamlit as st

from shelter_search_page import PENDING_QUERY_KEY
from supabase_integration import load_recent_earthquakes, load_risk_score, load_shelter_stats

STRONG_MAGNITUDE = 3.0
KST = timezone(timedelta(hours=9))


def navigate(page):
    st.session_state.page = page
    st.rerun()


def format_risk_score(score):
    return f"{score:.3f}" if score is not None else "-"


def format_occurred_at(value):
    """ISO timestamp -> 'YYYY. MM. DD. HH:MM' in KST; unparseable values pass through."""
    if not value:
        return "-"
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    if dt.tzinfo is not None:
        dt = dt.astimezone(KST)
    return dt.strftime("%Y. %m. %d. %H:%M")


def _render_hero():
    st.markdown("""
    <div style='background: linear-gradient(135deg, #1e3a8a 0%, #2563eb 100%);
                padding: 40px 20px; border-radius: 12px; margin-bottom: 20px; text-align:center;'>
        <h1 style='color: white; margin: 0;'>파주시 지진 안전 대피소 시스템</h1>
        <p style='color: #e5e7eb; margin: 12px 0 0 0; font-size: 18px;'>
            파주시에서 가장 가까운 지진 대피소를 빠르고 안전하게 찾으세요.
            귀하의 가족을 보호하기 위한 실시간 안전정보를 제공합니다.
        </p>
    </div>
    """, unsafe_allow_html=True)

    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        with st.form("home_search", border=True):
            query = st.text_input("주소 검색", placeholder="주소 또는 동네 입력",
                                  label_visibility="collapsed")
            if st.form_submit_button("🔍 검색", use_container_width=True, type="primary"):
                if query.strip():
                    st.session_state[PENDING_QUERY_KEY] = query.strip()
                    navigate("search")
        b1, b2 = st.columns(2)
        if b1.button("파주시 대피소 찾기", use_container_width=True):
            navigate("search")
        if b2.button("AI에게 물어보기", use_container_width=True):
            navigate("guide")


def _render_features():
    st.markdown("## 주요 기능")
    features = [
        ("📍 지능형 대피소 추천", "사용자의 현재 위치를 검색하여 가까운 대피소를 추천합니다.", "search"),
        ("💬 맞춤형 AI 가이드", "AI 챗봇이 지진 발생 상황에 맞춰 대피 요령과 준비사항을 즉시 안내해 줍니다.", "guide"),
        ("🧭 대피 시뮬레이션", "우리 집에서 대피 연습하기. 주소와 상황을 입력하면 최적의 대피 경로와 준비사항을 안내합니다.", "simulation"),
    ]
    cols = st.columns(3)
    for col, (title, desc, page) in zip(cols, features):
        with col:
            with st.container(border=True):
                st.markdown(f"### {title}")
                st.write(desc)
                if st.button("자세히 보기 →", key=f"feature_{page}"):
                    navigate(page)


def _render_stats():
    st.markdown("## 현황판")
    stats = load_shelter_stats()
    risk = load_risk_score()
    col1, col2, col3 = st.columns(3)
    col1.metric("등록된 대피소", f"{stats['count']:,}", help="파주 관내 전체 개소")
    col2.metric("총 수용 인원", f"{stats['total_capacity']:,}명")
    col3.metric("위험도", format_risk_score(risk))


def _render_recent_earthquakes():
    st.markdown("## 최근 지진 정보")
    quakes = load_recent_earthquakes()
    if not quakes:
        st.success("✅ 최근 24시간 이내 파주 반경 100km 내에서 감지된 지진이 없습니다.")
        return

    for eq in quakes:
        magnitude = eq.get("magnitude")
        with st.container(border=True):
            c1, c2, c3 = st.columns([2, 2, 1])
            c1.caption("발생 위치 및 시간")
            c1.write(format_occurred_at(eq.get("occurred_at")))
            c2.caption("위치")
            c2.write(f"{eq.get('location', '-')} ({eq.get('distance_from_paju', '-')}km)")
            c3.caption("규모")
            if magnitude is not None and float(magnitude) >= STRONG_MAGNITUDE:
                c3.markdown(f"### :red[{magnitude}]")
            else:
                c3.markdown(f"### :orange[{magnitude}]")

    c1, c2 = st.columns(2)
    if c1.button("전체 기록 보기 →"):
        navigate("risk")
    if c2.button("지진 위험도 지도 보기 →"):
        navigate("risk")


def _render_footer():
    st.divider()
    c1, c2, c3 = st.columns(3)
    with c1:
        st.markdown("**파주시청**")
        st.caption("비상연락처  \n전화: 031-940-4114  \n이메일: safety@paju.go.kr  \n경기도 파주시 시청로 50")
    with c2:
        st.markdown("**바로가기**")
        st.caption("국민재난안전포털: https://www.safekorea.go.kr  \n기상청 지진정보: https://www.weather.go.kr")
    with c3:
        st.markdown("**법적 고지**")
        st.caption("개인정보처리방침  \n이용약관  \n오픈소스 라이선스")


def render_home_page():
    _render_hero()
    _render_features()
    _render_stats()
    _render_recent_earthquakes()
    _render_footer()
