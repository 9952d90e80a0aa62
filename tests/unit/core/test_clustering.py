"""
위험 지역 신고 클러스터링 단위 테스트

커버리지, 시드 거리 제한, 입력 순서 의존성, 클러스터 요약 값을 테스트합니다.
"""

from datetime import timedelta

import pytest
from hypothesis import given, settings, strategies as st

from safety_core.common.geo import haversine_distance_m
from safety_core.core.clustering import cluster_reports
from safety_core.core.models import DangerZoneReport, GeoPoint

from conftest import NOW, PUNE, make_report, north_of


@st.composite
def report_sets(draw):
    """푸네 주변 약 3 km 상자 안의 신고 목록"""
    offsets = draw(st.lists(
        st.tuples(st.floats(min_value=0, max_value=0.03), st.floats(min_value=0, max_value=0.03)),
        max_size=40,
    ))
    return [
        DangerZoneReport(
            id=f"r{i}",
            lat=PUNE.lat + dlat,
            lng=PUNE.lng + dlng,
            category="Poor Lighting",
            timestamp=NOW - timedelta(days=i),
        )
        for i, (dlat, dlng) in enumerate(offsets)
    ]


class TestClusterCoverage:
    """모든 신고가 정확히 한 번 배정되는지"""

    @settings(max_examples=60)
    @given(reports=report_sets())
    def test_every_report_assigned_once(self, reports):
        clusters = cluster_reports(reports)
        assert sum(c.report_count for c in clusters) == len(reports)
        ids = [r.id for c in clusters for r in c.reports]
        assert sorted(ids) == sorted(r.id for r in reports)

    @settings(max_examples=60)
    @given(reports=report_sets())
    def test_members_within_distance_of_seed(self, reports):
        for c in cluster_reports(reports):
            seed = c.seed
            for r in c.reports:
                assert haversine_distance_m(seed.lat, seed.lng, r.lat, r.lng) <= 500

    def test_empty_input(self):
        assert cluster_reports([]) == []


class TestClusterShape:
    """클러스터 요약 값 테스트"""

    def test_nearby_reports_merge(self):
        reports = [
            make_report("a", PUNE, days_ago=3, category="Harassment"),
            make_report("b", north_of(PUNE, 200), days_ago=1, category="Stalking"),
            make_report("c", north_of(PUNE, 400), days_ago=10, category="Harassment"),
            make_report("far", north_of(PUNE, 5000)),
        ]
        clusters = cluster_reports(reports)

        assert len(clusters) == 2
        main, lone = clusters
        assert main.id == "cluster_0"
        assert lone.id == "cluster_3"
        assert [r.id for r in main.reports] == ["a", "b", "c"]
        assert main.report_count == 3
        assert main.categories == ["Harassment", "Stalking"]
        assert main.first_reported_at == NOW - timedelta(days=10)
        assert main.last_reported_at == NOW - timedelta(days=1)
        assert main.centroid.lat == pytest.approx((reports[0].lat + reports[1].lat + reports[2].lat) / 3)
        assert main.centroid.lng == pytest.approx(PUNE.lng)
        assert main.risk_level is None

    def test_seed_distance_not_chained(self):
        """시드에서 먼 신고는 다른 구성원과 가까워도 합류하지 않음"""
        reports = [
            make_report("a", PUNE),
            make_report("b", north_of(PUNE, 400)),
            make_report("c", north_of(PUNE, 800)),
        ]
        clusters = cluster_reports(reports)
        assert [[r.id for r in c.reports] for c in clusters] == [["a", "b"], ["c"]]

    def test_order_dependent(self):
        """같은 신고라도 입력 순서에 따라 경계가 달라진다"""
        a = make_report("a", PUNE)
        b = make_report("b", north_of(PUNE, 400))
        c = make_report("c", north_of(PUNE, 800))

        assert len(cluster_reports([a, b, c])) == 2
        reordered = cluster_reports([b, a, c])
        assert len(reordered) == 1
        assert [r.id for r in reordered[0].reports] == ["b", "a", "c"]

    def test_custom_distance(self):
        reports = [make_report("a", PUNE), make_report("b", north_of(PUNE, 400))]
        assert len(cluster_reports(reports, clustering_distance_m=100)) == 2

    def test_centroid_is_geopoint(self):
        clusters = cluster_reports([make_report("a", PUNE)])
        assert clusters[0].centroid == GeoPoint(lat=PUNE.lat, lng=PUNE.lng)
