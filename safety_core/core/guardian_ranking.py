"""
Guardian ranking for safety-core.

This module scores the opted-in guardian population against an
incident location, isolating history-lookup failures per guardian,
and selects the top candidates for notification.
"""

import asyncio
import time
from typing import List, Optional, Sequence
from safety_core.core.guardian_scoring import (
    GuardianScorer,
    response_history_score,
    round_half_up,
)
from safety_core.core.models import GeoPoint, Guardian, GuardianCandidate, ScoredGuardian
from safety_core.ports.guardians import GuardianRepositoryPort
from safety_core.settings import MatchingPolicy
from safety_core.observability import metrics
from safety_core.observability.logging_setup import get_logger, with_context

log = get_logger("safety.ranking")

def select_top(ranked: Sequence[ScoredGuardian], n: int = 10) -> List[ScoredGuardian]:
    """정렬된 결과에서 상위 n 명을 고릅니다."""
    return list(ranked[:max(0, n)])

def to_candidate(scored: ScoredGuardian) -> GuardianCandidate:
    """알림 발송기에 넘길 형태로 변환합니다."""
    g = scored.guardian
    return GuardianCandidate(
        id=g.id,
        name=g.name or "Guardian",
        distance_m=round_half_up(scored.distance_m),
        distance_km=round(scored.distance_m / 1000, 2),
        location=g.location,
        phone=g.phone,
        email=g.email,
        score=round_half_up(scored.total),
    )

class GuardianRanker:
    """가디언 순위 산정기"""

    def __init__(self,
                 repository: GuardianRepositoryPort,
                 *,
                 policy: Optional[MatchingPolicy] = None,
                 scorer: Optional[GuardianScorer] = None):
        """
        초기화합니다.

        Args:
            repository: 가디언 저장소 포트
            policy: 매칭 정책 (거리, 이력 개수, 타임아웃)
            scorer: 점수 계산기, 없으면 policy 로 생성
        """
        self.repository = repository
        self.policy = policy or MatchingPolicy()
        self.scorer = scorer or GuardianScorer(self.policy)

    async def _history_score(self, guardian_id: str) -> int:
        """이력 조회 실패나 타임아웃은 중립 점수로 대체합니다."""
        neutral = self.policy.neutral_history_score
        try:
            lookup = self.repository.recent_alert_history(guardian_id, self.policy.history_window)
            if self.policy.history_timeout_sec is not None:
                entries = await asyncio.wait_for(lookup, timeout=self.policy.history_timeout_sec)
            else:
                entries = await lookup
        except asyncio.TimeoutError:
            metrics.history_lookup_failures.labels(kind="timeout").inc()
            log.warning(f"이력 조회 타임아웃, 중립 점수 사용 guardian:{guardian_id}")
            return neutral
        except Exception as e:
            metrics.history_lookup_failures.labels(kind="error").inc()
            log.warning(f"이력 조회 실패, 중립 점수 사용 guardian:{guardian_id} error:{e}")
            return neutral
        return response_history_score(entries, window=self.policy.history_window, neutral=neutral)

    async def _evaluate(self, guardian: Guardian, incident: GeoPoint,
                        distance_m: float) -> Optional[ScoredGuardian]:
        """한 가디언의 평가 실패는 그 가디언만 제외합니다."""
        history = await self._history_score(guardian.id)
        try:
            return self.scorer.score(guardian, incident, history, distance_m=distance_m)
        except Exception as e:
            metrics.guardians_excluded.labels(reason="scoring_error").inc()
            log.error(f"가디언 점수 계산 실패, 제외 guardian:{guardian.id} error:{e}")
            return None

    async def rank(self, guardians: Sequence[Guardian], incident: GeoPoint) -> List[ScoredGuardian]:
        """
        가디언들을 사건 위치 기준으로 평가해 점수 내림차순으로 정렬합니다.

        위치가 없거나 동의하지 않았거나 최대 거리 밖인 가디언은 이력 조회 전에
        제외됩니다. 동점은 가디언 ID 오름차순.

        Args:
            guardians: 후보 가디언들
            incident: 사건 위치

        Returns:
            정렬된 점수 결과 (잘리지 않음)
        """
        started = time.perf_counter()
        with with_context(incident=f"{incident.lat},{incident.lng}"):
            ranked = await self._rank(guardians, incident)
        metrics.guardians_ranked.inc(len(ranked))
        metrics.ranking_seconds.observe(time.perf_counter() - started)
        return ranked

    async def _rank(self, guardians: Sequence[Guardian], incident: GeoPoint) -> List[ScoredGuardian]:
        eligible = []
        for g in guardians:
            if not g.opt_in:
                metrics.guardians_excluded.labels(reason="not_opted_in").inc()
                continue
            if g.location is None:
                metrics.guardians_excluded.labels(reason="no_location").inc()
                continue
            d = self.scorer.distance_of(g, incident)
            if d is None:
                metrics.guardians_excluded.labels(reason="too_far").inc()
                continue
            eligible.append((g, d))

        # 이력 조회는 가디언별로 독립적으로 동시에 수행
        scored = await asyncio.gather(*(self._evaluate(g, incident, d) for g, d in eligible))
        ranked = sorted((s for s in scored if s is not None), key=lambda s: (-s.total, s.guardian.id))
        log.info(f"가디언 순위 산정 완료 candidates:{len(guardians)} ranked:{len(ranked)}")
        return ranked

    async def select_top(self, incident: GeoPoint, n: Optional[int] = None) -> List[ScoredGuardian]:
        """저장소의 가디언으로 순위를 매기고 상위 n 명을 반환합니다."""
        if n is None:
            n = self.policy.max_guardians_to_notify
        guardians = await self.repository.list_opted_in_guardians()
        return select_top(await self.rank(guardians, incident), n)

    async def top_candidates(self, incident: GeoPoint,
                             max_count: Optional[int] = None) -> List[GuardianCandidate]:
        """
        알림 발송기가 사용하는 상위 후보 목록.

        Args:
            incident: 사건 위치
            max_count: 최대 인원, 없으면 정책의 max_guardians_to_notify

        Returns:
            후보 목록 (점수 내림차순)
        """
        return [to_candidate(s) for s in await self.select_top(incident, max_count)]
