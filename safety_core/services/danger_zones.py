"""
Danger-zone query service for safety-core.

This module loads community reports from the report repository,
clusters them and attaches a risk assessment to each cluster.
Clusters are recomputed on every call.
"""

import time
from datetime import datetime, timezone
from typing import Callable, List, Optional
from safety_core.common.geo import distance_meters
from safety_core.core.clustering import cluster_reports
from safety_core.core.models import DangerZoneCluster, DangerZoneReport, GeoPoint, RegionFilter
from safety_core.core.risk import assess_clusters
from safety_core.ports.reports import ReportRepositoryPort
from safety_core.settings import DangerZonePolicy
from safety_core.observability import metrics
from safety_core.observability.logging_setup import get_logger

log = get_logger("safety.danger_zones")

Clock = Callable[[], datetime]

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class DangerZoneService:
    """위험 지역 조회 서비스"""

    def __init__(self,
                 reports: ReportRepositoryPort,
                 *,
                 policy: Optional[DangerZonePolicy] = None,
                 clock: Clock = _utcnow):
        """
        초기화합니다.

        Args:
            reports: 신고 저장소 포트
            policy: 클러스터링/위험도 정책
            clock: 현재 시각 공급자 (테스트에서 고정)
        """
        self.reports = reports
        self.policy = policy or DangerZonePolicy()
        self.clock = clock

    def build_zones(self, reports: List[DangerZoneReport]) -> List[DangerZoneCluster]:
        """신고 스냅샷으로 클러스터를 만들고 위험도를 매깁니다."""
        started = time.perf_counter()
        clusters = cluster_reports(reports, clustering_distance_m=self.policy.clustering_distance_m)
        zones = assess_clusters(clusters, self.clock(), self.policy)
        for z in zones:
            metrics.danger_zone_clusters.labels(level=z.risk_level).inc()
        metrics.clustering_seconds.observe(time.perf_counter() - started)
        return zones

    async def zones_near(self, center: GeoPoint,
                         radius_km: Optional[float] = None) -> List[DangerZoneCluster]:
        """
        중심점 반경 안의 신고만 묶은 위험 지역 목록.

        Args:
            center: 조회 중심
            radius_km: 반경, 없으면 정책 기본값

        Returns:
            위험도가 채워진 클러스터 목록
        """
        if radius_km is None:
            radius_km = self.policy.default_radius_km
        region = RegionFilter(center=center, radius_km=radius_km)
        reports = await self.reports.list_reports(region)
        radius_m = radius_km * 1000
        nearby = [r for r in reports if distance_meters(center, r.point) <= radius_m]
        zones = self.build_zones(nearby)
        log.info(f"위험 지역 조회 center:({center.lat},{center.lng}) radius_km:{radius_km} "
                 f"reports:{len(nearby)} zones:{len(zones)}")
        return zones

    async def all_zones(self) -> List[DangerZoneCluster]:
        """전체 신고로 만든 위험 지역 목록 (관리자 지도용)"""
        reports = await self.reports.list_reports()
        zones = self.build_zones(reports)
        log.info(f"전체 위험 지역 조회 reports:{len(reports)} zones:{len(zones)}")
        return zones
