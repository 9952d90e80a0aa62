"""
지리 유틸리티 단위 테스트

Haversine 거리, 좌표 검증, 경계 상자 계산을 테스트합니다.
"""

import math

import pytest
from hypothesis import given, strategies as st
from pydantic import ValidationError

from safety_core.common.geo import (
    EARTH_RADIUS_M, bounding_box, distance_meters, haversine_distance_m, validate_coordinates
)
from safety_core.core.errors import InvalidArgumentError
from safety_core.core.models import GeoPoint

lats = st.floats(min_value=-90, max_value=90, allow_nan=False, allow_infinity=False)
lngs = st.floats(min_value=-180, max_value=180, allow_nan=False, allow_infinity=False)
points = st.builds(GeoPoint, lat=lats, lng=lngs)


class TestHaversineDistance:
    """Haversine 거리 계산 테스트"""

    def test_same_point_is_zero(self):
        """같은 지점 간 거리 테스트"""
        p = GeoPoint(lat=18.5204, lng=73.8567)
        assert distance_meters(p, p) == 0.0

    def test_pune_regression_fixture(self):
        """푸네 시내 두 지점 회귀 픽스처"""
        a = GeoPoint(lat=18.5204, lng=73.8567)
        b = GeoPoint(lat=18.5362, lng=73.8797)
        d = distance_meters(a, b)
        # 구면 Haversine 기준 약 2.99 km
        assert 2980 <= d <= 3010

    def test_one_degree_on_meridian(self):
        """자오선상 1도 거리"""
        d = haversine_distance_m(0, 0, 1, 0)
        assert d == pytest.approx(EARTH_RADIUS_M * math.pi / 180, rel=1e-9)

    def test_antipodal_points(self):
        """대척점은 지구 둘레의 절반"""
        d = haversine_distance_m(0, 0, 0, 180)
        assert d == pytest.approx(math.pi * EARTH_RADIUS_M, rel=1e-9)

    @given(a=points, b=points)
    def test_symmetry(self, a: GeoPoint, b: GeoPoint):
        """distance(a, b) == distance(b, a)"""
        assert distance_meters(a, b) == distance_meters(b, a)

    @given(a=points)
    def test_zero_identity(self, a: GeoPoint):
        assert distance_meters(a, a) == 0.0

    @given(a=points, b=points)
    def test_non_negative_and_finite(self, a: GeoPoint, b: GeoPoint):
        d = distance_meters(a, b)
        assert d >= 0
        assert math.isfinite(d)

    @pytest.mark.parametrize("coords", [
        (91, 0, 0, 0),
        (0, 181, 0, 0),
        (float("nan"), 0, 0, 0),
        (0, 0, float("inf"), 0),
    ])
    def test_invalid_coordinates_rejected(self, coords):
        """범위 밖이나 비유한 좌표는 InvalidArgumentError"""
        with pytest.raises(InvalidArgumentError):
            haversine_distance_m(*coords)


class TestValidation:
    """좌표 검증 테스트"""

    def test_validate_coordinates(self):
        assert validate_coordinates(18.5, 73.8)
        assert validate_coordinates(-90, -180)
        assert not validate_coordinates(90.1, 0)
        assert not validate_coordinates(0, float("nan"))

    def test_geopoint_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            GeoPoint(lat=100, lng=0)
        with pytest.raises(ValidationError):
            GeoPoint(lat=0, lng=float("inf"))

    def test_geopoint_is_immutable(self):
        p = GeoPoint(lat=1, lng=2)
        with pytest.raises(ValidationError):
            p.lat = 3


class TestBoundingBox:
    """경계 상자 테스트"""

    def test_box_contains_radius(self):
        center = GeoPoint(lat=18.5204, lng=73.8567)
        min_lat, min_lng, max_lat, max_lng = bounding_box(center, 10_000)
        assert min_lat < center.lat < max_lat
        assert min_lng < center.lng < max_lng
        # 상자의 북쪽 끝까지가 반경과 같음
        assert haversine_distance_m(center.lat, center.lng, max_lat, center.lng) == pytest.approx(10_000, rel=1e-6)

    def test_box_across_antimeridian_spans_all_longitudes(self):
        center = GeoPoint(lat=0, lng=179.99)
        _, min_lng, _, max_lng = bounding_box(center, 10_000)
        assert (min_lng, max_lng) == (-180.0, 180.0)
