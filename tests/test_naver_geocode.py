"""
Tests for the Naver geocoder client and the Paju two-pass fallback.
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest
import requests

import naver_geocode
from naver_geocode import (
    NaverConfigError,
    geocode_with_naver,
    geocode_with_paju_fallback,
    naver_directions_url,
    naver_search_url,
    parse_geocode_response,
)

CITY_HALL = {"lat": 37.7609, "lon": 126.7801, "address": "경기도 파주시 시청로 50"}
SEOUL = {"lat": 37.5665, "lon": 126.9780, "address": "서울특별시 중구 세종대로 110"}


class FakeHttpResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


@pytest.fixture
def naver_keys(monkeypatch):
    monkeypatch.setenv("NAVER_MAP_CLIENT_ID", "id-123")
    monkeypatch.setenv("NAVER_MAP_CLIENT_SECRET", "secret-456")


class TestParseResponse:

    def test_road_address_preferred(self):
        data = {"status": "OK", "addresses": [
            {"roadAddress": "경기도 파주시 시청로 50", "jibunAddress": "경기도 파주시 금촌동 1",
             "x": "126.7801", "y": "37.7609"}]}
        assert parse_geocode_response(data, "시청로 50") == CITY_HALL

    def test_jibun_then_query_fallback(self):
        data = {"status": "OK", "addresses": [{"roadAddress": "", "jibunAddress": "금촌동 1", "x": "126.1", "y": "37.1"}]}
        assert parse_geocode_response(data, "q")["address"] == "금촌동 1"
        data = {"status": "OK", "addresses": [{"x": "126.1", "y": "37.1"}]}
        assert parse_geocode_response(data, "q")["address"] == "q"

    def test_non_ok_status(self):
        assert parse_geocode_response({"status": "INVALID_REQUEST", "addresses": []}, "q") is None

    def test_no_addresses(self):
        assert parse_geocode_response({"status": "OK", "addresses": []}, "q") is None


class TestGeocodeWithNaver:

    def test_blank_query_makes_no_request(self, monkeypatch, naver_keys):
        def boom(*args, **kwargs):
            raise AssertionError("request should not be sent")
        monkeypatch.setattr(naver_geocode.requests, "get", boom)
        assert geocode_with_naver("   ") is None

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("NAVER_MAP_CLIENT_ID", raising=False)
        monkeypatch.delenv("NAVER_MAP_CLIENT_SECRET", raising=False)
        with pytest.raises(NaverConfigError):
            geocode_with_naver("시청로 50")

    def test_sends_keys_and_parses(self, monkeypatch, naver_keys):
        seen = {}

        def fake_get(url, params=None, headers=None, timeout=None):
            seen.update(url=url, params=params, headers=headers, timeout=timeout)
            return FakeHttpResponse({"status": "OK", "addresses": [
                {"roadAddress": "경기도 파주시 시청로 50", "x": "126.7801", "y": "37.7609"}]})

        monkeypatch.setattr(naver_geocode.requests, "get", fake_get)
        assert geocode_with_naver("시청로 50") == CITY_HALL
        assert seen["params"] == {"query": "시청로 50"}
        assert seen["headers"]["X-NCP-APIGW-API-KEY-ID"] == "id-123"
        assert seen["headers"]["X-NCP-APIGW-API-KEY"] == "secret-456"
        assert seen["timeout"] == 10

    def test_http_error_propagates(self, monkeypatch, naver_keys):
        monkeypatch.setattr(naver_geocode.requests, "get",
                            lambda *a, **k: FakeHttpResponse({}, status_code=401))
        with pytest.raises(requests.HTTPError):
            geocode_with_naver("시청로 50")


class TestPajuFallback:

    def test_first_pass_inside_paju(self, stub_geocoder):
        geocoder = stub_geocoder({"시청로 50": CITY_HALL})
        assert geocode_with_paju_fallback("  시청로 50 ", geocoder=geocoder) == (CITY_HALL, "시청로 50")
        assert geocoder.calls == ["시청로 50"]

    def test_outside_paju_retries_once_with_prefix(self, stub_geocoder):
        geocoder = stub_geocoder({"중앙로 242": SEOUL, "파주시 중앙로 242": CITY_HALL})
        assert geocode_with_paju_fallback("중앙로 242", geocoder=geocoder) == (CITY_HALL, "파주시 중앙로 242")
        assert geocoder.calls == ["중앙로 242", "파주시 중앙로 242"]

    def test_both_passes_outside_gives_up(self, stub_geocoder):
        geocoder = stub_geocoder({"세종대로 110": SEOUL, "파주시 세종대로 110": SEOUL})
        assert geocode_with_paju_fallback("세종대로 110", geocoder=geocoder) is None
        assert len(geocoder.calls) == 2

    def test_no_retry_when_city_name_present(self, stub_geocoder):
        geocoder = stub_geocoder({"파주 중앙로 242": SEOUL})
        assert geocode_with_paju_fallback("파주 중앙로 242", geocoder=geocoder) is None
        assert geocoder.calls == ["파주 중앙로 242"]

    def test_first_pass_error_still_tries_fallback(self, stub_geocoder):
        geocoder = stub_geocoder({"시청로 50": RuntimeError("network"), "파주시 시청로 50": CITY_HALL})
        assert geocode_with_paju_fallback("시청로 50", geocoder=geocoder) == (CITY_HALL, "파주시 시청로 50")

    def test_errors_on_both_passes_return_none(self, stub_geocoder):
        geocoder = stub_geocoder({"a 1": RuntimeError("x"), "파주시 a 1": RuntimeError("y")})
        assert geocode_with_paju_fallback("a 1", geocoder=geocoder) is None

    def test_blank_query(self, stub_geocoder):
        geocoder = stub_geocoder({})
        assert geocode_with_paju_fallback("  ", geocoder=geocoder) is None
        assert geocoder.calls == []

    def test_not_found_then_found(self, stub_geocoder):
        geocoder = stub_geocoder({"파주시 금정로 3": CITY_HALL})
        assert geocode_with_paju_fallback("금정로 3", geocoder=geocoder) == (CITY_HALL, "파주시 금정로 3")


def test_directions_url():
    url = naver_directions_url(37.76, 126.78, 37.86, 126.79, "시청로 50", "문산체육관")
    parsed = urlparse(url)
    qs = parse_qs(parsed.query)
    assert parsed.netloc == "map.naver.com"
    assert qs["slat"] == ["37.76"]
    assert qs["elng"] == ["126.79"]
    assert qs["stext"] == ["시청로 50"]
    assert qs["etext"] == ["문산체육관"]
    assert qs["menu"] == ["route"]
    assert qs["pathType"] == ["3"]


def test_search_url_encodes_keyword():
    url = naver_search_url("경기도 파주시 시청로 50")
    assert url.startswith("https://map.naver.com/v5/search/")
    assert " " not in url
    assert "%EA%B2%BD" in url
