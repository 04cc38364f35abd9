"""
evacuation_simulation_page.py

"우리 집에서 대피 연습하기" - four-step evacuation scenario wizard.

    1  address
    2  housing type   (apartment / house)
    3  family size    (alone / couple / family)
    4  magnitude band (3-4 / 4-5 / 5+)

The result page combines the magnitude scenario, a four-step route to the
nearest shelter, shelter capacity from the database and a go-bag checklist.
"""

from typing import Dict, List, Optional

import streamlit as st
import structlog

from geo import haversine_km
from naver_geocode import geocode_with_naver, geocode_with_paju_fallback
from supabase_integration import load_shelters

logger = structlog.get_logger(__name__)

HOUSING_OPTIONS = {"apartment": "🏢 아파트", "house": "🏠 단독주택"}
FAMILY_OPTIONS = {"alone": "1인 가구", "couple": "2인 가구", "family": "3인 이상 가족"}
MAGNITUDE_OPTIONS = {"3-4": "규모 3.0-4.0", "4-5": "규모 4.0-5.0", "5+": "규모 5.0 이상"}

SCENARIOS = {
    "3-4": {
        "title": "규모 3.0-4.0: 실내 대피",
        "description": "약한 흔들림이 느껴지지만 구조물 피해는 적습니다.",
        "actions": [
            "튼튼한 탁자나 책상 아래로 대피",
            "머리와 목을 보호",
            "창문과 유리에서 멀리 떨어지기",
            "가스와 전기 차단",
            "문을 열어 탈출로 확보",
        ],
        "color": "yellow",
    },
    "4-5": {
        "title": "규모 4.0-5.0: 옥외 대피소 이동",
        "description": "강한 흔들림으로 건물 내부에 균열이 발생할 수 있습니다.",
        "actions": [
            "즉시 건물 밖으로 대피",
            "엘리베이터 사용 금지 (계단 이용)",
            "낙하물 주의하며 이동",
            "넓은 공터나 지정 대피소로 이동",
            "비상 물품 가방 휴대",
            "가족과 연락처 공유",
        ],
        "color": "orange",
    },
    "5+": {
        "title": "규모 5.0 이상: 긴급 대피",
        "description": "건물 붕괴 위험이 높습니다. 즉시 대피해야 합니다.",
        "actions": [
            "즉시 건물에서 탈출",
            "지정된 긴급 대피소로 이동",
            "가족 비상 연락망 가동",
            "구호물품 지원 장소 확인",
            "여진에 대비하여 장기 체류 준비",
            "정부 재난 문자 확인",
        ],
        "color": "red",
    },
}

SCENARIO_BOX = {
    "yellow": "#FEF9C3",
    "orange": "#FFEDD5",
    "red":    "#FEE2E2",
}

PREPARATION_ITEMS = {
    "essential": [
        {"name": "신분증/여권", "icon": "📇"},
        {"name": "현금 (소액권)", "icon": "💰"},
        {"name": "휴대폰 충전기", "icon": "🔌"},
        {"name": "상비약", "icon": "💊"},
    ],
    "food": [
        {"name": "생수 (3일분)", "icon": "💧"},
        {"name": "비상식량", "icon": "🍞"},
        {"name": "영양바/초콜릿", "icon": "🍫"},
    ],
    "emergency": [
        {"name": "손전등", "icon": "🔦"},
        {"name": "구급함", "icon": "🏥"},
        {"name": "라디오", "icon": "📻"},
        {"name": "담요", "icon": "🛏️"},
    ],
}

PREPARATION_TITLES = {"essential": "필수품", "food": "식량/식수", "emergency": "비상용품"}

FAMILY_PLANS = {
    "alone": "혼자 대피하는 경우 주변에 알리고 이동하세요.",
    "couple": "2인 가구는 서로 위치를 확인하며 함께 이동하세요.",
    "family": "가족 모두의 안전을 확인하고 함께 대피하세요.",
}

SHELTER_CAUTIONS = [
    "마스크를 꼭 착용하고 입소하세요",
    "가스와 전기를 반드시 차단하고 나오세요",
    "엘리베이터 대신 계단을 이용하세요",
    "차량 이용 시 키는 꽂아두고 대피하세요",
]

EMERGENCY_CONTACTS = [
    ("재난신고", "119"),
    ("경찰", "112"),
    ("파주시청 재난안전", "031-940-4114"),
]

_STATE_KEYS = ["sim_step", "sim_address", "sim_housing", "sim_family",
               "sim_magnitude", "sim_show_results", "sim_shelter"]


# ── scenario helpers ─────────────────────────────────────────────────
def get_scenario_info(magnitude: Optional[str]) -> Optional[Dict]:
    if not magnitude:
        return None
    return SCENARIOS.get(magnitude)


def get_evacuation_route(address: str, housing_type: Optional[str], shelter_name: str) -> List[Dict]:
    final_name = shelter_name or "가장 가까운 대피소"
    leave_home = (
        "엘리베이터 사용하지 않고 계단으로 이동"
        if housing_type == "apartment"
        else "대문을 통해 안전하게 나가기"
    )
    return [
        {"step": 1, "action": "현재 위치에서 출발",
         "detail": f"{address}에서 가장 가까운 대피소로 이동을 시작합니다.", "time": "0분"},
        {"step": 2, "action": "집에서 나오기", "detail": leave_home, "time": "2-3분"},
        {"step": 3, "action": "주요 도로로 이동",
         "detail": "건물과 전봇대에서 멀리 떨어져 중앙으로 이동", "time": "5-7분"},
        {"step": 4, "action": f"{final_name} 도착",
         "detail": "대피소 입구에서 등록 후 지정된 장소로 이동", "time": "15분"},
    ]


def get_preparation_items() -> Dict[str, List[Dict]]:
    return {k: [dict(item) for item in v] for k, v in PREPARATION_ITEMS.items()}


def family_plan_message(family_size: Optional[str]) -> str:
    return FAMILY_PLANS.get(family_size, "")


def _summary(row: Dict) -> Dict:
    return {
        "name": row.get("name"),
        "address": row.get("road_addr") or "",
        "capacity": row.get("capacity"),
    }


def find_nearest_shelter(address: str, shelters: List[Dict], geocoder=geocode_with_naver) -> Optional[Dict]:
    """
    Nearest shelter to the geocoded address.
    When the address cannot be placed inside Paju the first row is used.
    """
    if not shelters:
        return None

    found = geocode_with_paju_fallback(address, geocoder=geocoder)
    if not found:
        logger.info("simulation address %r not geocoded; using first shelter", address)
        return _summary(shelters[0])

    point, _ = found
    best = shelters[0]
    best_dist = float("inf")
    for row in shelters:
        if row.get("lat") is None or row.get("lon") is None:
            continue
        d = haversine_km(point["lat"], point["lon"], row["lat"], row["lon"])
        if d < best_dist:
            best_dist = d
            best = row
    return _summary(best)


# ── state ────────────────────────────────────────────────────────────
def _init_state():
    defaults = {"sim_step": 1, "sim_address": "", "sim_housing": None, "sim_family": None,
                "sim_magnitude": None, "sim_show_results": False, "sim_shelter": None}
    for k, v in defaults.items():
        if k not in st.session_state:
            st.session_state[k] = v


def reset_simulation():
    for k in _STATE_KEYS:
        st.session_state.pop(k, None)
    st.session_state.pop("sim_address_input", None)


def _go(step):
    st.session_state.sim_step = step
    st.rerun()


# ── rendering ────────────────────────────────────────────────────────
def _render_step_indicator(step):
    dots = []
    for s in range(1, 5):
        bg = "#2563EB" if step >= s else "#E5E7EB"
        fg = "white" if step >= s else "#4B5563"
        dots.append(
            f"<span style='display:inline-block;width:36px;height:36px;line-height:36px;"
            f"border-radius:50%;background:{bg};color:{fg};text-align:center;font-weight:bold;'>{s}</span>"
        )
        if s < 4:
            bar = "#2563EB" if step > s else "#E5E7EB"
            dots.append(f"<span style='display:inline-block;width:80px;height:4px;"
                        f"background:{bar};margin:0 8px;vertical-align:middle;'></span>")
    st.markdown(f"<div style='text-align:center;margin:1rem 0 2rem;'>{''.join(dots)}</div>",
                unsafe_allow_html=True)


def _choice_buttons(options: Dict[str, str], state_key: str):
    cols = st.columns(len(options))
    for col, (value, label) in zip(cols, options.items()):
        chosen = st.session_state[state_key] == value
        if col.button(label, key=f"{state_key}_{value}", use_container_width=True,
                      type="primary" if chosen else "secondary"):
            st.session_state[state_key] = value
            st.rerun()


def _render_inputs():
    step = st.session_state.sim_step
    _render_step_indicator(step)

    if step == 1:
        address = st.text_input("주소 입력", value=st.session_state.sim_address,
                                placeholder="예: 경기도 파주시 금촌동", key="sim_address_input")
        st.session_state.sim_address = address
        st.caption("현재 위치를 기준으로 가장 가까운 대피소까지의 경로를 계산합니다.")
        if st.button("다음 단계", type="primary", disabled=not address.strip()):
            _go(2)

    elif step == 2:
        st.markdown("**거주 환경**")
        _choice_buttons(HOUSING_OPTIONS, "sim_housing")
        c1, c2 = st.columns(2)
        if c1.button("이전", use_container_width=True):
            _go(1)
        if c2.button("다음 단계", type="primary", use_container_width=True,
                     disabled=not st.session_state.sim_housing):
            _go(3)

    elif step == 3:
        st.markdown("**가족 구성**")
        _choice_buttons(FAMILY_OPTIONS, "sim_family")
        c1, c2 = st.columns(2)
        if c1.button("이전", use_container_width=True):
            _go(2)
        if c2.button("다음 단계", type="primary", use_container_width=True,
                     disabled=not st.session_state.sim_family):
            _go(4)

    elif step == 4:
        st.markdown("**지진 규모 시나리오 선택**")
        _choice_buttons(MAGNITUDE_OPTIONS, "sim_magnitude")
        c1, c2 = st.columns(2)
        if c1.button("이전", use_container_width=True):
            _go(3)
        ready = all([st.session_state.sim_address, st.session_state.sim_housing,
                     st.session_state.sim_family, st.session_state.sim_magnitude])
        if c2.button("시뮬레이션 시작", type="primary", use_container_width=True, disabled=not ready):
            with st.spinner("계획 생성 중... 대피소 정보를 불러오는 중입니다..."):
                st.session_state.sim_shelter = find_nearest_shelter(
                    st.session_state.sim_address, load_shelters())
            st.session_state.sim_show_results = True
            st.rerun()


def _render_results():
    address = st.session_state.sim_address
    housing = st.session_state.sim_housing
    family = st.session_state.sim_family
    shelter = st.session_state.sim_shelter

    if st.button("← 새로운 시뮬레이션"):
        reset_simulation()
        st.rerun()

    st.markdown("## 대피 계획 결과")
    st.caption("입력하신 정보를 바탕으로 최적의 대피 계획을 생성했습니다.")

    left, right = st.columns([2, 1])

    with left:
        scenario = get_scenario_info(st.session_state.sim_magnitude)
        if scenario:
            bg = SCENARIO_BOX[scenario["color"]]
            actions = "".join(f"<li>{a}</li>" for a in scenario["actions"])
            st.markdown(
                f"<div style='background:{bg};padding:1.2rem;border-radius:12px;'>"
                f"<h3 style='margin-top:0;'>⚠️ {scenario['title']}</h3>"
                f"<p>{scenario['description']}</p><b>행동 요령:</b><ul>{actions}</ul></div>",
                unsafe_allow_html=True,
            )

        st.markdown("### 🧭 대피 경로")
        for route in get_evacuation_route(address, housing, (shelter or {}).get("name") or ""):
            st.markdown(f"**{route['step']}. {route['action']}**  ·  ⏱️ {route['time']}")
            st.caption(route["detail"])

        st.markdown("### 🏫 대피소 상세 정보")
        st.markdown(f"**{(shelter or {}).get('name') or '가까운 대피소'}**")
        st.caption((shelter or {}).get("address") or "주소 정보 없음")
        capacity = (shelter or {}).get("capacity")
        st.metric("수용 인원", f"{capacity:,}명" if capacity is not None else "정보 없음")
        st.markdown("**대피 시 주의사항**")
        for c in SHELTER_CAUTIONS:
            st.markdown(f"- {c}")

    with right:
        st.markdown("### 🎒 챙겨야 할 물품")
        for group, items in get_preparation_items().items():
            st.markdown(f"**{PREPARATION_TITLES[group]}**")
            for i, item in enumerate(items):
                st.checkbox(f"{item['icon']} {item['name']}", key=f"prep_{group}_{i}")

        st.markdown("### 👨‍👩‍👧 가족 대피 계획")
        st.info(family_plan_message(family))

        st.markdown("### 📞 긴급 연락처")
        for label, number in EMERGENCY_CONTACTS:
            st.markdown(f"{label}: [{number}](tel:{number.replace('-', '')})")


def render_evacuation_simulation_page():
    _init_state()
    st.title("대피 시뮬레이션")
    st.caption("우리 집에서 대피 연습하기 - 주소와 상황을 입력하면 최적의 대피 경로를 생성합니다.")

    if st.session_state.sim_show_results:
        _render_results()
    else:
        _render_inputs()
