"""
Storage Adapter 모듈 단위 테스트

이 모듈은 SQLite 기반 가디언/신고 저장소 어댑터들의 기능을 테스트합니다.
"""

import os
from datetime import timedelta

import pytest

from safety_core.adapters.storage.sqlite_guardians import SQLiteGuardianStore
from safety_core.adapters.storage.sqlite_reports import SQLiteReportStore
from safety_core.core.guardian_ranking import GuardianRanker
from safety_core.core.models import GeoPoint, RegionFilter
from safety_core.services.danger_zones import DangerZoneService

from conftest import NOW, PUNE, make_guardian, make_report, north_of


class TestSQLiteGuardianStore:
    """SQLite 가디언 저장소 테스트"""

    @pytest.fixture
    async def store(self, temp_db_path):
        """스키마가 초기화된 저장소"""
        store = SQLiteGuardianStore(temp_db_path)
        await store.init()
        return store

    @pytest.mark.asyncio
    async def test_init_schema(self, store):
        assert os.path.exists(store.path)

    @pytest.mark.asyncio
    async def test_upsert_and_get(self, store):
        await store.upsert_guardian(make_guardian("g1", PUNE, phone="+91100"))
        g = await store.get_guardian("g1")

        assert g is not None
        assert g.name == "Guardian g1"
        assert g.phone == "+91100"
        assert g.location == PUNE
        assert g.opt_in is True

        await store.upsert_guardian(make_guardian("g1", None, opt_in=False))
        g = await store.get_guardian("g1")
        assert g.location is None
        assert g.opt_in is False

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        assert await store.get_guardian("nobody") is None

    @pytest.mark.asyncio
    async def test_list_opted_in_only(self, store):
        await store.upsert_guardian(make_guardian("b", PUNE))
        await store.upsert_guardian(make_guardian("a", PUNE))
        await store.upsert_guardian(make_guardian("out", PUNE, opt_in=False))

        ids = [g.id for g in await store.list_opted_in_guardians()]
        assert ids == ["a", "b"]

    @pytest.mark.asyncio
    async def test_update_location_and_availability(self, store):
        await store.upsert_guardian(make_guardian("g1", None))
        target = north_of(PUNE, 1000)

        assert await store.update_location("g1", target) is True
        assert await store.update_location("ghost", target) is False
        assert (await store.get_guardian("g1")).location == target

        assert await store.set_availability("g1", False) is True
        assert (await store.get_guardian("g1")).status == "unavailable"
        assert await store.set_availability("g1", True) is True
        assert (await store.get_guardian("g1")).status == "active"
        assert await store.set_availability("ghost", True) is False

    @pytest.mark.asyncio
    async def test_alert_history_roundtrip(self, store):
        await store.upsert_guardian(make_guardian("g1", PUNE))
        for i in range(3):
            await store.record_alert("g1", f"inc-{i}", created_at=NOW - timedelta(days=3 - i))
        # 같은 사건 중복 기록은 무시
        await store.record_alert("g1", "inc-0", created_at=NOW)

        assert await store.record_response("g1", "inc-2", "accepted",
                                           responded_at=NOW - timedelta(days=1) + timedelta(minutes=3))
        assert not await store.record_response("g1", "missing", "declined")

        history = await store.recent_alert_history("g1", 20)
        assert [e.incident_id for e in history] == ["inc-2", "inc-1", "inc-0"]
        assert history[0].status == "accepted"
        assert history[0].responded_at - history[0].created_at == timedelta(minutes=3)
        assert history[1].status == "notified"
        assert history[1].responded_at is None

        assert len(await store.recent_alert_history("g1", 2)) == 2

    @pytest.mark.asyncio
    async def test_record_response_rejects_unknown_action(self, store):
        with pytest.raises(ValueError):
            await store.record_response("g1", "inc-1", "maybe")

    @pytest.mark.asyncio
    async def test_store_feeds_ranker(self, store):
        """저장소를 포트로 사용한 순위 산정"""
        await store.upsert_guardian(make_guardian("near", north_of(PUNE, 1000)))
        await store.upsert_guardian(make_guardian("far", north_of(PUNE, 30_000)))
        await store.record_alert("near", "inc-1", created_at=NOW)
        await store.record_response("near", "inc-1", "responding", responded_at=NOW + timedelta(minutes=1))

        candidates = await GuardianRanker(store).top_candidates(PUNE)
        assert [c.id for c in candidates] == ["near"]


class TestSQLiteReportStore:
    """SQLite 신고 저장소 테스트"""

    @pytest.fixture
    async def store(self, temp_db_path):
        store = SQLiteReportStore(temp_db_path)
        await store.init()
        return store

    @pytest.mark.asyncio
    async def test_add_and_list_in_order(self, store):
        for rid in ("c", "a", "b"):
            assert await store.add_report(make_report(rid, PUNE, days_ago=1))

        reports = await store.list_reports()
        assert [r.id for r in reports] == ["c", "a", "b"]
        assert reports[0].timestamp == NOW - timedelta(days=1)
        assert await store.get_count() == 3

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, store):
        assert await store.add_report(make_report("dup", PUNE))
        assert not await store.add_report(make_report("dup", north_of(PUNE, 10)))
        assert await store.get_count() == 1

    @pytest.mark.asyncio
    async def test_region_prefilter(self, store):
        await store.add_report(make_report("in", north_of(PUNE, 2000)))
        await store.add_report(make_report("out", north_of(PUNE, 50_000)))

        region = RegionFilter(center=PUNE, radius_km=10)
        assert [r.id for r in await store.list_reports(region)] == ["in"]

    @pytest.mark.asyncio
    async def test_empty_store(self, store):
        assert await store.list_reports() == []
        assert await store.get_count() == 0

    @pytest.mark.asyncio
    async def test_store_feeds_danger_zone_service(self, store):
        for i in range(4):
            await store.add_report(make_report(f"r{i}", north_of(PUNE, i * 40)))
        await store.add_report(make_report("elsewhere", GeoPoint(lat=19.076, lng=72.8777)))

        zones = await DangerZoneService(store, clock=lambda: NOW).zones_near(PUNE, 5)
        assert len(zones) == 1
        assert zones[0].report_count == 4
        assert zones[0].risk_level == "high"
