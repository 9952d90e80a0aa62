"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.
"""

import math
import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from safety_core.core.models import AlertHistoryEntry, DangerZoneReport, GeoPoint, Guardian

# 위도 1도의 길이 (R = 6,371 km 구면)
METERS_PER_DEGREE = 6_371_000 * math.pi / 180

NOW = datetime(2026, 10, 1, 12, 0, 0, tzinfo=timezone.utc)

# 푸네 중심
PUNE = GeoPoint(lat=18.5204, lng=73.8567)


def north_of(origin: GeoPoint, meters: float) -> GeoPoint:
    """origin 에서 정북으로 meters 만큼 떨어진 지점 (자오선 거리는 정확)"""
    return GeoPoint(lat=origin.lat + meters / METERS_PER_DEGREE, lng=origin.lng)


def make_report(report_id: str, point: GeoPoint, *, days_ago: float = 0.0,
                category: str = "Harassment", now: datetime = NOW) -> DangerZoneReport:
    return DangerZoneReport(
        id=report_id,
        lat=point.lat,
        lng=point.lng,
        category=category,
        timestamp=now - timedelta(days=days_ago),
    )


def make_guardian(guardian_id: str, location, *, status: str = "active",
                  opt_in: bool = True, **kwargs) -> Guardian:
    return Guardian(id=guardian_id, name=f"Guardian {guardian_id}", location=location,
                    status=status, opt_in=opt_in, **kwargs)


def accepted_history(count: int, *, minutes_to_respond: float = 2.0,
                     status: str = "accepted") -> list:
    entries = []
    for i in range(count):
        created = NOW - timedelta(days=i + 1)
        entries.append(AlertHistoryEntry(
            incident_id=f"inc-{i}",
            created_at=created,
            status=status,
            responded_at=created + timedelta(minutes=minutes_to_respond),
        ))
    return entries


@pytest.fixture
def now():
    """고정된 기준 시각"""
    return NOW


@pytest.fixture
def incident():
    """테스트용 사건 위치"""
    return PUNE


@pytest.fixture
def temp_db_path():
    """임시 데이터베이스 파일 경로"""
    with tempfile.NamedTemporaryFile(suffix='.db', delete=False) as f:
        temp_path = f.name
    yield temp_path
    # 테스트 후 파일 정리
    if os.path.exists(temp_path):
        os.unlink(temp_path)


# pytest 설정
def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "slow: 느린 테스트 마커"
    )
    config.addinivalue_line(
        "markers", "integration: 통합 테스트 마커"
    )


def pytest_collection_modifyitems(config, items):
    """테스트 아이템 수정"""
    for item in items:
        # 통합 테스트 마커 추가
        if "integration" in item.name or "end_to_end" in item.name:
            item.add_marker(pytest.mark.integration)
