"""
Tests for environment settings and logging setup.
"""

import structlog

import config


class TestSettings:

    def test_defaults_when_unset(self, monkeypatch):
        for name in ("NAVER_GEOCODE_URL", "CHAT_MODEL", "CHAT_API_URL"):
            monkeypatch.delenv(name, raising=False)
        assert config.get_geocode_url() == config.DEFAULT_GEOCODE_URL
        assert config.get_chat_model() == config.DEFAULT_CHAT_MODEL
        assert config.get_chat_api_url() == config.DEFAULT_CHAT_API_URL

    def test_blank_value_counts_as_unset(self, monkeypatch):
        monkeypatch.setenv("CHAT_MODEL", "   ")
        assert config.get_chat_model() == config.DEFAULT_CHAT_MODEL

    def test_values_are_trimmed(self, monkeypatch):
        monkeypatch.setenv("NAVER_MAP_CLIENT_ID", " id ")
        monkeypatch.setenv("NAVER_MAP_CLIENT_SECRET", "secret")
        assert config.get_naver_credentials() == ("id", "secret")


class TestLogging:

    def test_structlog_routed_through_stdlib(self, monkeypatch):
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        config.setup_logging("INFO")
        cfg = structlog.get_config()
        assert isinstance(cfg["logger_factory"], structlog.stdlib.LoggerFactory)
        assert isinstance(cfg["processors"][-1], structlog.processors.JSONRenderer)

    def test_console_format(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "console")
        config.setup_logging("INFO")
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
        monkeypatch.delenv("LOG_FORMAT")
        config.setup_logging("INFO")
