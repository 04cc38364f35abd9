"""
Pytest fixtures for the shelter finder: a fake Supabase client, sample rows,
and a stub geocoder.
"""

from __future__ import annotations

import pytest


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Chainable stand-in for a supabase-py query builder."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.ops = []

    def _record(self, name, *args, **kwargs):
        self.ops.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._record("limit", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._record("eq", *args, **kwargs)

    def insert(self, data):
        self.client.inserted.setdefault(self.table, []).append(data)
        return self._record("insert", data)

    def execute(self):
        self.client.executed.append((self.table, self.ops))
        if self.client.fail:
            raise RuntimeError("database unavailable")
        return FakeResponse(self.client.tables.get(self.table, []))


class FakeSupabase:
    def __init__(self, tables=None, fail=False):
        self.tables = tables or {}
        self.fail = fail
        self.inserted = {}
        self.executed = []

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture
def shelter_rows():
    return [
        {"facility_serial": 1, "name": "금촌초등학교 체육관", "road_addr": "경기도 파주시 금촌동 123-45",
         "region_code": 4148010100, "area_sqm": 1200, "capacity": 300, "lat": 37.7599, "lon": 126.7816},
        {"facility_serial": 2, "name": "문산체육관", "road_addr": "경기도 파주시 문산읍 당동리",
         "region_code": 4148025000, "area_sqm": 1500, "capacity": 400, "lat": 37.8603, "lon": 126.7881},
        {"facility_serial": 3, "name": "교하초등학교", "road_addr": "경기도 파주시 교하동 512-1",
         "region_code": None, "area_sqm": None, "capacity": 350, "lat": 37.7012, "lon": 126.7456},
        {"facility_serial": 4, "name": "좌표없는 대피소", "road_addr": "경기도 파주시 금촌동 77",
         "region_code": None, "area_sqm": None, "capacity": None, "lat": None, "lon": None},
        {"facility_serial": 5, "name": "파주시청 대강당", "road_addr": "경기도 파주시 시청로 50",
         "region_code": None, "area_sqm": 800, "capacity": 300, "lat": 37.7609, "lon": 126.7801},
    ]


@pytest.fixture
def fake_db():
    return FakeSupabase


class StubGeocoder:
    """Maps query text to a point (or an exception) and records every call."""

    def __init__(self, answers):
        self.answers = answers
        self.calls = []

    def __call__(self, query):
        self.calls.append(query)
        answer = self.answers.get(query)
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def stub_geocoder():
    return StubGeocoder
