"""
config.py

Environment-driven settings for the Paju earthquake shelter service.
Values come from the process environment, with a `.env` file at the project
root loaded first when it exists.

    SUPABASE_URL / SUPABASE_ANON_KEY           managed database
    NAVER_MAP_CLIENT_ID / NAVER_MAP_CLIENT_SECRET  geocoder credentials
    NAVER_GEOCODE_URL                          geocoder endpoint
    ANTHROPIC_API_KEY / CHAT_MODEL             hosted completion API
    CHAT_API_URL                               where the UI posts chat turns
    LOG_LEVEL                                  logging threshold
    LOG_FORMAT                                 "json" (default) or "console"
"""

import logging
import os
import sys
from pathlib import Path

import structlog
from dotenv import load_dotenv

_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_ROOT / ".env")


# ── Paju geography ───────────────────────────────────────────────────
PAJU_CENTER_LAT = 37.7599
PAJU_CENTER_LON = 126.78

PAJU_LAT_MIN = 37.6
PAJU_LAT_MAX = 37.95
PAJU_LON_MIN = 126.6
PAJU_LON_MAX = 127.1

CITY_NAME = "파주"
CITY_PREFIX = "파주시"

# max shelters listed around a geocoded address
NEARBY_LIMIT = 10

# ── Database tables ──────────────────────────────────────────────────
SHELTER_TABLE = "shelter_facilities"
EARTHQUAKE_TABLE = "earthquakes"
FAULT_LINE_TABLE = "fault_lines"
USER_SEARCH_TABLE = "user_searches"
CHAT_LOG_TABLE = "chatbot_conversations"
RISK_TABLE = "earthquakerisk_paju"

# ── Chat completion ──────────────────────────────────────────────────
CHAT_TEMPERATURE = 0.3
CHAT_MAX_TOKENS = 512

HTTP_TIMEOUT = 10

DEFAULT_GEOCODE_URL = "https://maps.apigw.ntruss.com/map-geocode/v2/geocode"
DEFAULT_CHAT_MODEL = "claude-sonnet-4-6"
DEFAULT_CHAT_API_URL = "http://localhost:8000/api/chat"


def _env(name, default=None):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_supabase_url():
    return _env("SUPABASE_URL")


def get_supabase_key():
    return _env("SUPABASE_ANON_KEY")


def get_naver_credentials():
    """(client_id, client_secret); either may be None."""
    return _env("NAVER_MAP_CLIENT_ID"), _env("NAVER_MAP_CLIENT_SECRET")


def get_geocode_url():
    return _env("NAVER_GEOCODE_URL", DEFAULT_GEOCODE_URL)


def get_anthropic_key():
    return _env("ANTHROPIC_API_KEY")


def get_chat_model():
    return _env("CHAT_MODEL", DEFAULT_CHAT_MODEL)


def get_chat_api_url():
    return _env("CHAT_API_URL", DEFAULT_CHAT_API_URL)


def setup_logging(level=None):
    """
    Route structlog through stdlib logging.
    Handlers are installed once; later calls only adjust the level.
    """
    level_name = (level or _env("LOG_LEVEL", "INFO")).upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level_name, format="%(message)s", stream=sys.stdout)
    else:
        root.setLevel(level_name)

    if _env("LOG_FORMAT", "json").lower() == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    else:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
