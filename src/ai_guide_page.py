"""
ai_guide_page.py

AI 대피 가이드 - chat screen.
Turns are posted to the /api/chat endpoint (chat_api.py) and every exchange
is stored in chatbot_conversations under a per-session UUID.
"""

import uuid
from typing import Dict, List, Optional

import requests
import streamlit as st
import structlog

from config import get_chat_api_url
from supabase_integration import log_chat_turn

logger = structlog.get_logger(__name__)

GREETING = (
    "안녕하세요! 지진 대피 AI 가이드입니다. 지진 발생 시 행동 요령, "
    "대피 준비물, 대피소 정보 등에 대해 질문해주세요."
)
ERROR_REPLY = "죄송합니다. 현재 AI 서버에 문제가 발생했습니다. 잠시 후 다시 시도해주세요."

QUICK_QUESTIONS = [
    "지진이 났는데 어떻게 해야 하나요?",
    "집에서 나갈 때 무엇을 챙겨야 하나요?",
    "여진이 계속되는데 언제까지 대피소에 있어야 하나요?",
    "가족과 연락이 안 될 때는 어떻게 하나요?",
]

CHAT_TIMEOUT = 30


def build_payload(history: List[Dict]) -> Dict:
    """
    Conversation turns for /api/chat.
    The local greeting and error placeholders never leave the browser session.
    """
    turns = [m for m in history if not m.get("greeting") and not m.get("failed")]
    return {"messages": [{"role": m["role"], "content": m["content"]} for m in turns]}


def fetch_reply(history: List[Dict], url=None) -> Optional[str]:
    """Reply text from /api/chat, or None when the request fails."""
    try:
        r = requests.post(url or get_chat_api_url(), json=build_payload(history), timeout=CHAT_TIMEOUT)
        r.raise_for_status()
        return r.json()["reply"]
    except Exception as e:
        logger.error("chat request failed: %s", e)
        return None


def append_exchange(history: List[Dict], text: str, url=None) -> str:
    """Add the user turn and the reply (or a marked error placeholder) to history."""
    history.append({"role": "user", "content": text})
    reply = fetch_reply(history, url=url)
    if reply is None:
        history.append({"role": "assistant", "content": ERROR_REPLY, "failed": True})
        return ERROR_REPLY
    history.append({"role": "assistant", "content": reply})
    return reply


def _init_state():
    if "chat_session_id" not in st.session_state:
        st.session_state.chat_session_id = str(uuid.uuid4())
    if "chat_messages" not in st.session_state:
        st.session_state.chat_messages = [
            {"role": "assistant", "content": GREETING, "greeting": True}
        ]


def send_message(text: str):
    reply = append_exchange(st.session_state.chat_messages, text)
    log_chat_turn(st.session_state.chat_session_id, text, reply)


def render_ai_guide_page():
    _init_state()

    st.title("AI 대피 가이드")
    st.caption("지진 상황별 행동 요령과 대피 준비사항을 AI에게 물어보세요.")

    chat_col, side_col = st.columns([2, 1])

    with side_col:
        st.markdown("#### 자주 묻는 질문")
        for i, q in enumerate(QUICK_QUESTIONS):
            if st.button(q, key=f"quick_{i}", use_container_width=True):
                with st.spinner("답변 생성 중..."):
                    send_message(q)
                st.rerun()

        st.error(
            "**🚨 긴급 상황 대응**\n\n"
            "지진이 발생하면 즉시 아래 행동을 취하세요.\n\n"
            "1. 몸을 보호하세요\n2. 탁자 아래로 대피\n3. 대피소로 이동"
        )

        st.markdown("#### 대피 준비도 점검")
        st.markdown("- 비상 연락망 ✅ 완료\n- 비상 물품 ⏳ 진행 중\n- 대피 경로 ⬜ 미완료")

        if len(st.session_state.chat_messages) > 1:
            if st.button("🗑️ 대화 지우기", use_container_width=True):
                st.session_state.pop("chat_messages", None)
                st.session_state.pop("chat_session_id", None)
                st.rerun()

    with chat_col:
        st.markdown("**🤖 AI 안전 가이드**  ·  :green[온라인]")
        with st.container(height=520):
            for msg in st.session_state.chat_messages:
                with st.chat_message(msg["role"]):
                    st.write(msg["content"])

        if prompt := st.chat_input("지진 대피에 대해 무엇이든 물어보세요..."):
            if prompt.strip():
                with st.spinner("답변 생성 중..."):
                    send_message(prompt)
                st.rerun()
