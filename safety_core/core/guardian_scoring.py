"""
Guardian suitability scoring for safety-core.

This module implements the composite guardian score relative to an
incident location: distance gate, linear distance score, priority
bonus, response-history score and availability.
"""

import math
from typing import Iterable, Optional
from safety_core.common.geo import distance_meters
from safety_core.core.models import (
    AlertHistoryEntry,
    GeoPoint,
    Guardian,
    GuardianAvailability,
    RESPONDED_STATUSES,
    ScoreBreakdown,
    ScoredGuardian,
)
from safety_core.settings import MatchingPolicy
from safety_core.observability.logging_setup import get_logger

log = get_logger("safety.scoring")

# 점수 구성 상수
DISTANCE_POINTS = 40.0
PRIORITY_BONUS = 10.0
HISTORY_WEIGHT = 0.4
ACTIVE_AVAILABILITY = 10.0
INACTIVE_AVAILABILITY = 5.0

RESPONSE_RATE_POINTS = 50.0
SPEED_BONUS_POINTS = 25.0
SPEED_ZERO_MINUTES = 15.0
RELIABILITY_BONUS = 25.0
RELIABILITY_MIN_RESPONSES = 3
RELIABILITY_STEP = 8

def round_half_up(value: float) -> int:
    """0.5 는 올림 (은행가 반올림 아님)"""
    return int(math.floor(value + 0.5))

def response_history_score(
    entries: Iterable[AlertHistoryEntry],
    *,
    window: int = 20,
    neutral: int = 50,
) -> int:
    """
    가디언의 최근 알림 이력으로 응답 점수(0-100)를 계산합니다.

    Args:
        entries: 알림 이력 (순서 무관)
        window: 볼 최근 이력 개수
        neutral: 이력이 없을 때의 기본 점수

    Returns:
        0-100 정수 점수
    """
    recent = sorted(entries, key=lambda e: e.created_at, reverse=True)[:window]
    if not recent:
        return neutral

    responded = 0
    total_minutes = 0.0
    timed = 0
    for entry in recent:
        if entry.status not in RESPONDED_STATUSES:
            continue
        responded += 1
        if entry.responded_at is not None:
            total_minutes += (entry.responded_at - entry.created_at).total_seconds() / 60.0
            timed += 1

    response_rate = responded / len(recent) * RESPONSE_RATE_POINTS

    speed_bonus = 0.0
    if timed > 0:
        avg_minutes = total_minutes / timed
        speed_bonus = SPEED_BONUS_POINTS - (avg_minutes / SPEED_ZERO_MINUTES * SPEED_BONUS_POINTS)
        speed_bonus = min(SPEED_BONUS_POINTS, max(0.0, speed_bonus))

    if responded >= RELIABILITY_MIN_RESPONSES:
        reliability = RELIABILITY_BONUS
    else:
        reliability = float(responded * RELIABILITY_STEP)

    return min(100, round_half_up(response_rate + speed_bonus + reliability))

def availability_score(guardian: Guardian) -> float:
    return ACTIVE_AVAILABILITY if guardian.status == "active" else INACTIVE_AVAILABILITY

def guardian_availability(guardian: Optional[Guardian]) -> GuardianAvailability:
    """가디언이 지금 알림을 받을 수 있는지 조회합니다."""
    if guardian is None:
        return GuardianAvailability(available=False, status="not_found", opt_in=False)
    return GuardianAvailability(
        available=guardian.opt_in and guardian.status == "active",
        status=guardian.status,
        opt_in=guardian.opt_in,
    )

class GuardianScorer:
    """사건 위치 기준 가디언 적합도 점수 계산기"""

    def __init__(self, policy: Optional[MatchingPolicy] = None):
        self.policy = policy or MatchingPolicy()

    @property
    def max_distance_m(self) -> float:
        return self.policy.max_distance_km * 1000

    @property
    def priority_distance_m(self) -> float:
        return self.policy.priority_distance_km * 1000

    def distance_of(self, guardian: Guardian, incident: GeoPoint) -> Optional[float]:
        """위치가 없거나 최대 거리 밖이면 None"""
        if guardian.location is None:
            return None
        d = distance_meters(guardian.location, incident)
        if d > self.max_distance_m:
            return None
        return d

    def distance_score(self, distance_m: float) -> float:
        # 경계에서 0, 사건 위치에서 40 인 선형 감소
        return DISTANCE_POINTS * (1 - distance_m / self.max_distance_m)

    def score(
        self,
        guardian: Guardian,
        incident: GeoPoint,
        history_score: int,
        *,
        distance_m: Optional[float] = None,
    ) -> Optional[ScoredGuardian]:
        """
        가디언 한 명의 종합 점수를 계산합니다.

        Args:
            guardian: 평가할 가디언
            incident: 사건 위치
            history_score: response_history_score 결과 (0-100)
            distance_m: 이미 계산한 거리가 있으면 재사용

        Returns:
            점수 결과, 거리 게이트에서 제외되면 None
        """
        if distance_m is None:
            distance_m = self.distance_of(guardian, incident)
            if distance_m is None:
                return None
        elif distance_m > self.max_distance_m:
            return None

        history_raw = max(0, min(100, int(history_score)))
        breakdown = ScoreBreakdown(
            distance=self.distance_score(distance_m),
            priority=PRIORITY_BONUS if distance_m <= self.priority_distance_m else 0.0,
            history=history_raw * HISTORY_WEIGHT,
            history_raw=history_raw,
            availability=availability_score(guardian),
        )
        total = breakdown.distance + breakdown.priority + breakdown.history + breakdown.availability

        log.debug("가디언 점수 계산",
                  guardian_id=guardian.id,
                  distance_m=round(distance_m, 1),
                  total=round(total, 2))

        return ScoredGuardian(
            guardian=guardian,
            distance_m=distance_m,
            breakdown=breakdown,
            total=total,
        )
