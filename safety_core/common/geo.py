"""
Geographic utilities for safety-core.

This module provides great-circle distance calculation on a
spherical Earth plus coordinate validation helpers.
"""

import math
from typing import Tuple
from safety_core.core.errors import InvalidArgumentError
from safety_core.core.models import GeoPoint

# 지구 반지름 (미터)
EARTH_RADIUS_M = 6_371_000.0

def validate_coordinates(lat: float, lng: float) -> bool:
    """
    좌표가 유효한지 확인합니다.

    Args:
        lat: 위도
        lng: 경도

    Returns:
        유한한 값이며 범위 안이면 True
    """
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180

def haversine_distance_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    두 지점 간의 Haversine 거리를 계산합니다 (미터).

    Args:
        lat1: 첫 번째 지점의 위도
        lng1: 첫 번째 지점의 경도
        lat2: 두 번째 지점의 위도
        lng2: 두 번째 지점의 경도

    Returns:
        두 지점 간의 거리 (미터, 0 이상)

    Raises:
        InvalidArgumentError: 좌표가 범위를 벗어나거나 유한하지 않은 경우
    """
    if not validate_coordinates(lat1, lng1) or not validate_coordinates(lat2, lng2):
        raise InvalidArgumentError(
            f"invalid coordinates: ({lat1}, {lng1}) -> ({lat2}, {lng2})"
        )

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)

    # 차이는 절대값으로 계산해서 인자 순서와 무관하게 한다
    dlat = abs(lat2_rad - lat1_rad)
    dlng = abs(math.radians(lng2) - math.radians(lng1))

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2)
    # 반올림 오차로 1을 넘는 경우(대척점) 방지
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c

def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """두 GeoPoint 사이의 거리 (미터)"""
    return haversine_distance_m(a.lat, a.lng, b.lat, b.lng)

def bounding_box(center: GeoPoint, radius_m: float) -> Tuple[float, float, float, float]:
    """
    반경을 감싸는 위경도 경계 상자를 계산합니다.

    저장소 조회의 1차 필터용이며 정확한 판정은 distance_meters 로 합니다.

    Returns:
        (min_lat, min_lng, max_lat, max_lng)
    """
    dlat = math.degrees(radius_m / EARTH_RADIUS_M)
    cos_lat = math.cos(math.radians(center.lat))
    if cos_lat < 1e-6:
        # 극점 근처는 경도 전체
        return (max(-90.0, center.lat - dlat), -180.0, min(90.0, center.lat + dlat), 180.0)
    dlng = dlat / cos_lat
    min_lng, max_lng = center.lng - dlng, center.lng + dlng
    if min_lng < -180.0 or max_lng > 180.0:
        # 날짜변경선을 넘으면 경도 전체
        min_lng, max_lng = -180.0, 180.0
    return (
        max(-90.0, center.lat - dlat),
        min_lng,
        min(90.0, center.lat + dlat),
        max_lng,
    )
