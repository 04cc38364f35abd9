"""
Smoke tests: the Streamlit app starts and routes between screens with the
database left unconfigured.
"""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

APP_PATH = str(Path(__file__).resolve().parent.parent / "src" / "app.py")


@pytest.fixture
def app(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    return at


def test_home_page_renders(app):
    assert not app.exception
    assert app.session_state["page"] == "home"
    assert any(m.label == "등록된 대피소" for m in app.metric)


def test_sidebar_navigation_to_simulation(app):
    app.button(key="nav_simulation").click().run()
    assert not app.exception
    assert app.session_state["page"] == "simulation"
    assert app.title[0].value == "대피 시뮬레이션"
    assert app.session_state["sim_step"] == 1


def test_sidebar_navigation_to_guide(app):
    app.button(key="nav_guide").click().run()
    assert not app.exception
    assert app.title[0].value == "AI 대피 가이드"
    assert len(app.session_state["chat_messages"]) == 1
