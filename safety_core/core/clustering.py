"""
Danger-zone report clustering for safety-core.

Single-pass greedy clustering: each unprocessed report seeds a
cluster and absorbs every other unprocessed report within the
clustering distance of the seed. Output depends on input order.
"""

from typing import List, Sequence
from safety_core.common.geo import haversine_distance_m
from safety_core.core.models import DangerZoneCluster, DangerZoneReport, GeoPoint, ReportCategory
from safety_core.observability.logging_setup import get_logger

log = get_logger("safety.clustering")

CLUSTERING_DISTANCE_M = 500.0

def _build_cluster(seed_index: int, members: List[DangerZoneReport]) -> DangerZoneCluster:
    count = len(members)
    categories: List[ReportCategory] = []
    for r in members:
        if r.category not in categories:
            categories.append(r.category)
    timestamps = [r.timestamp for r in members]
    return DangerZoneCluster(
        id=f"cluster_{seed_index}",
        centroid=GeoPoint(
            lat=sum(r.lat for r in members) / count,
            lng=sum(r.lng for r in members) / count,
        ),
        reports=members,
        categories=categories,
        first_reported_at=min(timestamps),
        last_reported_at=max(timestamps),
        report_count=count,
    )

def cluster_reports(
    reports: Sequence[DangerZoneReport],
    *,
    clustering_distance_m: float = CLUSTERING_DISTANCE_M,
) -> List[DangerZoneCluster]:
    """
    신고들을 위험 지역 클러스터로 묶습니다.

    모든 신고는 정확히 하나의 클러스터에 속하며, 각 클러스터의 구성원은
    시드(첫 번째 신고)에서 clustering_distance_m 이내입니다.
    위험도 필드는 비어 있으며 risk 모듈에서 채웁니다.

    Args:
        reports: 신고 목록 (입력 순서대로 처리)
        clustering_distance_m: 시드 기준 묶음 거리 (미터)

    Returns:
        클러스터 목록 (시드의 입력 순서)
    """
    clusters: List[DangerZoneCluster] = []
    processed = set()

    for i, seed in enumerate(reports):
        if i in processed:
            continue
        processed.add(i)
        members = [seed]

        for j, other in enumerate(reports):
            if j in processed:
                continue
            d = haversine_distance_m(seed.lat, seed.lng, other.lat, other.lng)
            if d <= clustering_distance_m:
                members.append(other)
                processed.add(j)

        clusters.append(_build_cluster(i, members))

    log.debug(f"신고 클러스터링 완료 reports:{len(reports)} clusters:{len(clusters)}")
    return clusters
