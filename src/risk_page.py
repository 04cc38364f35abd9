"""
risk_page.py

지진 위험도 - Paju risk score, fault lines and the full earthquake record.
"""

import pandas as pd
import plotly.express as px
import streamlit as st
from streamlit_folium import st_folium

from geo_map import build_fault_line_map
from home_page import format_occurred_at, format_risk_score
from supabase_integration import load_earthquake_history, load_fault_lines, load_risk_score

RISK_LABELS = {"high": "높음", "medium": "보통", "low": "낮음"}


def earthquakes_frame(quakes):
    """Earthquake rows as a display table, newest first."""
    columns = ["occurred_at", "location", "distance_from_paju", "magnitude", "depth"]
    df = pd.DataFrame(quakes, columns=columns)
    if df.empty:
        return df
    df["occurred_at"] = pd.to_datetime(df["occurred_at"], errors="coerce", utc=True)
    df = df.sort_values("occurred_at", ascending=False).reset_index(drop=True)
    df["magnitude"] = pd.to_numeric(df["magnitude"], errors="coerce")
    df["distance_from_paju"] = pd.to_numeric(df["distance_from_paju"], errors="coerce")
    return df


def render_risk_page():
    st.title("지진 위험도")
    st.caption("파주시 지진 위험도 지표와 주변 단층, 지진 발생 기록입니다.")

    risk = load_risk_score()
    faults = load_fault_lines()
    quakes = earthquakes_frame(load_earthquake_history())

    c1, c2, c3 = st.columns(3)
    c1.metric("파주 위험도 점수", format_risk_score(risk))
    c2.metric("주변 단층", f"{len(faults)}개")
    c3.metric("기록된 지진", f"{len(quakes)}건")

    st.markdown("### 🗺️ 주변 단층 지도")
    if faults:
        st_folium(build_fault_line_map(faults), width=None, height=480, returned_objects=[])
        st.dataframe(
            pd.DataFrame([
                {"단층": f.get("name"), "위험도": RISK_LABELS.get(str(f.get("risk_level")).lower(), f.get("risk_level"))}
                for f in faults
            ]),
            use_container_width=True, hide_index=True,
        )
    else:
        st.info("단층 정보를 불러오지 못했습니다.")

    st.markdown("### 📈 지진 발생 기록")
    if quakes.empty:
        st.success("✅ 기록된 지진이 없습니다.")
        return

    plotted = quakes.dropna(subset=["occurred_at", "magnitude"])
    fig = px.scatter(
        plotted, x="occurred_at", y="magnitude", size="magnitude", color="distance_from_paju",
        hover_data=["location", "depth"], color_continuous_scale="Reds_r",
        labels={"occurred_at": "발생 시각", "magnitude": "규모", "distance_from_paju": "파주와의 거리(km)"},
    )
    fig.add_hline(y=3.0, line_dash="dash", line_color="red")
    st.plotly_chart(fig, use_container_width=True)

    table = quakes.copy()
    table["occurred_at"] = table["occurred_at"].map(lambda t: format_occurred_at(t.isoformat()) if pd.notna(t) else "-")
    table.columns = ["발생 시각", "위치", "파주와의 거리(km)", "규모", "깊이(km)"]
    st.dataframe(table, use_container_width=True, hide_index=True)
