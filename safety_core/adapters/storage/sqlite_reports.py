"""
SQLite-based danger-zone report store for safety-core.
"""

import aiosqlite
from datetime import datetime
from typing import List, Optional
from safety_core.common.geo import bounding_box
from safety_core.core.models import DangerZoneReport, RegionFilter, ensure_utc
from safety_core.observability.logging_setup import get_logger

log = get_logger("safety.storage.reports")

# SQLite 스키마
SCHEMA = """
CREATE TABLE IF NOT EXISTS danger_reports (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    lat REAL NOT NULL,
    lng REAL NOT NULL,
    category TEXT NOT NULL,
    description TEXT,
    timestamp TEXT NOT NULL,
    user_id TEXT
);
CREATE INDEX IF NOT EXISTS idx_reports_lat_lng ON danger_reports(lat, lng);
"""

def _row_to_report(row) -> DangerZoneReport:
    return DangerZoneReport(
        id=row["id"],
        lat=row["lat"],
        lng=row["lng"],
        category=row["category"],
        description=row["description"],
        timestamp=datetime.fromisoformat(row["timestamp"]),
        user_id=row["user_id"],
    )

class SQLiteReportStore:
    """SQLite 기반 위험 지역 신고 저장소"""

    def __init__(self, path: str):
        self.path = path
        log.info(f"SQLiteReportStore 초기화: {path}")

    async def init(self) -> None:
        """데이터베이스를 초기화합니다."""
        async with aiosqlite.connect(self.path) as db:
            await db.executescript(SCHEMA)
            await db.commit()
        log.info(f"SQLiteReportStore 스키마 초기화 완료: {self.path}")

    async def add_report(self, report: DangerZoneReport) -> bool:
        """
        신고를 저장합니다. 신고는 저장 후 바뀌지 않습니다.

        Returns:
            새로 저장되면 True, 같은 ID 가 이미 있으면 False
        """
        try:
            async with aiosqlite.connect(self.path) as db:
                await db.execute(
                    "INSERT INTO danger_reports (id, lat, lng, category, description, timestamp, user_id) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (report.id, report.lat, report.lng, report.category, report.description,
                     ensure_utc(report.timestamp).isoformat(), report.user_id)
                )
                await db.commit()
                return True
        except aiosqlite.IntegrityError:
            # 이미 존재하는 신고
            return False

    async def list_reports(self, region: Optional[RegionFilter] = None) -> List[DangerZoneReport]:
        """
        신고 목록을 저장 순서대로 조회합니다.

        region 이 있으면 경계 상자로 1차 필터링만 합니다.
        """
        query = "SELECT * FROM danger_reports"
        params: tuple = ()
        if region is not None:
            min_lat, min_lng, max_lat, max_lng = bounding_box(region.center, region.radius_km * 1000)
            query += " WHERE lat BETWEEN ? AND ? AND lng BETWEEN ? AND ?"
            params = (min_lat, max_lat, min_lng, max_lng)
        query += " ORDER BY seq"

        async with aiosqlite.connect(self.path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
            return [_row_to_report(r) for r in rows]

    async def get_count(self) -> int:
        async with aiosqlite.connect(self.path) as db:
            cursor = await db.execute("SELECT COUNT(*) FROM danger_reports")
            result = await cursor.fetchone()
            return result[0] if result else 0
