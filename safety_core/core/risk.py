"""
Risk scoring for danger-zone clusters.

This module implements the recency-weighted risk score and the
misuse-resistant mapping from score to risk level.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence
from safety_core.core.models import (
    DangerZoneCluster,
    DangerZoneReport,
    RiskAssessment,
    RiskLevel,
    ensure_utc,
)
from safety_core.settings import DangerZonePolicy

SECONDS_PER_DAY = 86400.0

def recency_weight(timestamp: datetime, now: datetime,
                   policy: Optional[DangerZonePolicy] = None) -> float:
    """
    신고 경과 기간에 따른 가중치를 계산합니다.

    Args:
        timestamp: 신고 시각
        now: 기준 시각
        policy: 구간/가중치 설정

    Returns:
        7일 이내 1.5, 30일 이내 1.0, 그 이후 0.5 (기본 정책)
    """
    policy = policy or DangerZonePolicy()
    days = (ensure_utc(now) - ensure_utc(timestamp)).total_seconds() / SECONDS_PER_DAY
    if days <= policy.very_recent_days:
        return policy.very_recent_weight
    if days <= policy.recent_days:
        return policy.recent_weight
    return policy.old_weight

def risk_score(reports: Iterable[DangerZoneReport], now: datetime,
               policy: Optional[DangerZonePolicy] = None) -> float:
    return sum(recency_weight(r.timestamp, now, policy) for r in reports)

def risk_level(score: float, report_count: int,
               policy: Optional[DangerZonePolicy] = None) -> RiskLevel:
    """
    점수를 위험 등급으로 변환합니다.

    신고 한 건만으로는 점수와 무관하게 high 가 될 수 없습니다.
    """
    policy = policy or DangerZonePolicy()
    if score >= policy.risk_high_threshold and report_count >= policy.min_reports_for_high_risk:
        return "high"
    if score >= policy.risk_medium_threshold:
        return "medium"
    return "low"

def score_cluster(cluster: DangerZoneCluster, now: datetime,
                  policy: Optional[DangerZonePolicy] = None) -> RiskAssessment:
    score = risk_score(cluster.reports, now, policy)
    return RiskAssessment(risk_score=score, risk_level=risk_level(score, cluster.report_count, policy))

def assess_clusters(clusters: Sequence[DangerZoneCluster], now: datetime,
                    policy: Optional[DangerZonePolicy] = None) -> List[DangerZoneCluster]:
    """위험도가 채워진 클러스터 사본들을 반환합니다."""
    out = []
    for c in clusters:
        a = score_cluster(c, now, policy)
        out.append(c.model_copy(update={"risk_score": a.risk_score, "risk_level": a.risk_level}))
    return out
