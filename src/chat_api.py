"""
chat_api.py

HTTP endpoint behind the AI evacuation guide.

    POST /api/chat   {"messages": [{"role": ..., "content": ...}]}  ->  {"reply": ...}

Forwards the turns to the hosted completion API with a fixed Korean system
prompt and fixed sampling parameters.

Run:
    uvicorn chat_api:app --app-dir src --port 8000
"""

from typing import Dict, List, Literal

import anthropic
import structlog
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from config import (
    CHAT_MAX_TOKENS,
    CHAT_TEMPERATURE,
    get_anthropic_key,
    get_chat_model,
    setup_logging,
)

setup_logging()
logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = (
    "너는 한국 파주시 기준의 지진 대피 안전 가이드야. "
    "최대한 간단하고 실질적인 행동요령을 한국어로 설명하고, 불필요하게 겁을 주지 말고 침착하게 안내해."
)

EMPTY_REPLY = "지금은 답변을 생성하지 못했습니다. 잠시 후 다시 시도해주세요."
UPSTREAM_ERROR = "AI 요청 중 오류가 발생했습니다."


# ── Schemas ──────────────────────────────────────────────────────────
class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(min_length=1)


class ChatResponse(BaseModel):
    reply: str


# ── Completion client ────────────────────────────────────────────────
def split_system(messages: List[ChatMessage]):
    """
    Fixed prompt first, then any client-sent system text.
    Returns (system_prompt, user/assistant turns).
    """
    extra = [m.content for m in messages if m.role == "system" and m.content.strip()]
    system = "\n\n".join([SYSTEM_PROMPT] + extra)
    turns = [{"role": m.role, "content": m.content} for m in messages if m.role != "system"]
    return system, turns


class GuideCompleter:
    """Thin wrapper over the Anthropic Messages API."""

    def __init__(self, api_key=None, model=None):
        self.api_key = api_key or get_anthropic_key()
        self.model = model or get_chat_model()
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    def complete(self, system: str, turns: List[Dict]) -> str:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=CHAT_MAX_TOKENS,
            temperature=CHAT_TEMPERATURE,
            system=system,
            messages=turns,
        )
        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        return text


def get_completer() -> GuideCompleter:
    return GuideCompleter()


# ── App ──────────────────────────────────────────────────────────────
app = FastAPI(title="Paju Earthquake AI Guide", version="1.0.0")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/chat", response_model=ChatResponse)
def chat(request: ChatRequest, completer: GuideCompleter = Depends(get_completer)):
    system, turns = split_system(request.messages)
    try:
        reply = completer.complete(system, turns)
    except Exception as e:
        logger.exception("completion request failed: %s", e)
        return JSONResponse(status_code=500, content={"error": UPSTREAM_ERROR})

    if not reply or not reply.strip():
        reply = EMPTY_REPLY
    return ChatResponse(reply=reply)


@app.api_route("/api/chat", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def chat_method_not_allowed():
    return JSONResponse(status_code=405, content={"error": "Method not allowed"})
