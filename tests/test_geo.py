"""
Unit tests for distance and area helpers.
"""

import pytest

from geo import (
    drive_minutes,
    haversine_km,
    is_administrative_query,
    is_in_paju,
    road_distance_km,
    walk_minutes,
)


class TestHaversine:
    """Tests for haversine distance calculation."""

    def test_same_point_returns_zero(self):
        assert haversine_km(37.7599, 126.78, 37.7599, 126.78) == 0.0

    def test_one_degree_of_latitude(self):
        # 2 * pi * 6371 / 360
        assert haversine_km(37.0, 127.0, 38.0, 127.0) == pytest.approx(111.195, abs=0.01)

    def test_seoul_to_busan(self):
        distance = haversine_km(37.5665, 126.9780, 35.1796, 129.0756)
        assert 320 < distance < 330

    def test_symmetry(self):
        a = haversine_km(37.7599, 126.7816, 37.8603, 126.7881)
        b = haversine_km(37.8603, 126.7881, 37.7599, 126.7816)
        assert a == pytest.approx(b)

    def test_geumchon_to_munsan(self):
        # ~11 km north
        assert 10.5 < haversine_km(37.7599, 126.7816, 37.8603, 126.7881) < 11.5


class TestPajuBounds:

    def test_city_hall_inside(self):
        assert is_in_paju(37.7609, 126.7801)

    def test_edges_are_inclusive(self):
        assert is_in_paju(37.6, 126.6)
        assert is_in_paju(37.95, 127.1)

    def test_seoul_outside(self):
        assert not is_in_paju(37.5665, 126.9780)

    def test_just_outside_longitude(self):
        assert not is_in_paju(37.76, 127.1001)


class TestAdministrativeQuery:

    @pytest.mark.parametrize("query", ["금촌동", "파주시", "문산읍", "적성면", " 당동리 ", "일산서구"])
    def test_area_names(self, query):
        assert is_administrative_query(query)

    @pytest.mark.parametrize("query", ["시청로 50", "금촌2동", "", "   ", "중앙로", "파주운동장"])
    def test_not_area_names(self, query):
        assert not is_administrative_query(query)

    def test_none_is_not_area(self):
        assert not is_administrative_query(None)


def test_travel_estimates():
    assert walk_minutes(1.0) == 12
    assert walk_minutes(0.51) == 7
    assert drive_minutes(2.1) == 7
    assert drive_minutes(0) == 0
    assert road_distance_km(1.0) == pytest.approx(1.3)
