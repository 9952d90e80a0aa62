"""
SQLite-based guardian store for safety-core.

This module implements the guardian repository port on SQLite,
plus the write side used by registration, location updates and the
notification dispatcher's response feedback.
"""

import aiosqlite
from datetime import datetime, timezone
from typing import List, Optional
from safety_core.core.models import AlertHistoryEntry, GeoPoint, Guardian, ensure_utc
from safety_core.observability.logging_setup import get_logger

log = get_logger("safety.storage.guardians")

# SQLite 스키마
SCHEMA = """
CREATE TABLE IF NOT EXISTS guardians (
    id TEXT PRIMARY KEY,
    name TEXT,
    phone TEXT,
    email TEXT,
    lat REAL,
    lng REAL,
    opt_in INTEGER NOT NULL DEFAULT 0,
    status TEXT NOT NULL DEFAULT 'active',
    status_updated_at TEXT
);
CREATE INDEX IF NOT EXISTS idx_guardians_opt_in ON guardians(opt_in);

CREATE TABLE IF NOT EXISTS guardian_alerts (
    guardian_id TEXT NOT NULL,
    incident_id TEXT NOT NULL,
    created_at TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'notified',
    responded_at TEXT,
    PRIMARY KEY (guardian_id, incident_id)
);
CREATE INDEX IF NOT EXISTS idx_alerts_created ON guardian_alerts(guardian_id, created_at);
"""

def _iso(value: datetime) -> str:
    return ensure_utc(value).isoformat()

def _row_to_guardian(row) -> Guardian:
    location = None
    if row["lat"] is not None and row["lng"] is not None:
        location = GeoPoint(lat=row["lat"], lng=row["lng"])
    return Guardian(
        id=row["id"],
        name=row["name"],
        phone=row["phone"],
        email=row["email"],
        location=location,
        opt_in=bool(row["opt_in"]),
        status=row["status"],
    )

class SQLiteGuardianStore:
    """SQLite 기반 가디언 저장소"""

    def __init__(self, path: str):
        """
        초기화합니다.

        Args:
            path: SQLite 데이터베이스 파일 경로
        """
        self.path = path
        log.info(f"SQLiteGuardianStore 초기화: {path}")

    async def init(self) -> None:
        """데이터베이스를 초기화합니다."""
        async with aiosqlite.connect(self.path) as db:
            await db.executescript(SCHEMA)
            await db.commit()
        log.info(f"SQLiteGuardianStore 스키마 초기화 완료: {self.path}")

    async def upsert_guardian(self, guardian: Guardian) -> None:
        """가디언을 등록하거나 갱신합니다."""
        lat = guardian.location.lat if guardian.location else None
        lng = guardian.location.lng if guardian.location else None
        async with aiosqlite.connect(self.path) as db:
            await db.execute(
                """
                INSERT INTO guardians (id, name, phone, email, lat, lng, opt_in, status)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name, phone=excluded.phone, email=excluded.email,
                    lat=excluded.lat, lng=excluded.lng,
                    opt_in=excluded.opt_in, status=excluded.status
                """,
                (guardian.id, guardian.name, guardian.phone, guardian.email,
                 lat, lng, 1 if guardian.opt_in else 0, guardian.status)
            )
            await db.commit()

    async def update_location(self, guardian_id: str, location: GeoPoint) -> bool:
        """가디언의 마지막 위치를 갱신합니다. 없는 가디언이면 False."""
        async with aiosqlite.connect(self.path) as db:
            cursor = await db.execute(
                "UPDATE guardians SET lat = ?, lng = ? WHERE id = ?",
                (location.lat, location.lng, guardian_id)
            )
            await db.commit()
            return cursor.rowcount > 0

    async def set_availability(self, guardian_id: str, available: bool) -> bool:
        """가용 상태를 active/unavailable 로 바꿉니다."""
        status = "active" if available else "unavailable"
        async with aiosqlite.connect(self.path) as db:
            cursor = await db.execute(
                "UPDATE guardians SET status = ?, status_updated_at = ? WHERE id = ?",
                (status, _iso(datetime.now(timezone.utc)), guardian_id)
            )
            await db.commit()
            return cursor.rowcount > 0

    async def get_guardian(self, guardian_id: str) -> Optional[Guardian]:
        async with aiosqlite.connect(self.path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM guardians WHERE id = ?", (guardian_id,))
            row = await cursor.fetchone()
            return _row_to_guardian(row) if row else None

    async def list_opted_in_guardians(self) -> List[Guardian]:
        async with aiosqlite.connect(self.path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM guardians WHERE opt_in = 1 ORDER BY id")
            rows = await cursor.fetchall()
            return [_row_to_guardian(r) for r in rows]

    async def record_alert(self, guardian_id: str, incident_id: str,
                           created_at: Optional[datetime] = None) -> None:
        """가디언에게 알림을 보냈다는 이력을 남깁니다."""
        created_at = created_at or datetime.now(timezone.utc)
        async with aiosqlite.connect(self.path) as db:
            await db.execute(
                "INSERT OR IGNORE INTO guardian_alerts (guardian_id, incident_id, created_at, status) "
                "VALUES (?, ?, ?, 'notified')",
                (guardian_id, incident_id, _iso(created_at))
            )
            await db.commit()

    async def record_response(self, guardian_id: str, incident_id: str, action: str,
                              responded_at: Optional[datetime] = None) -> bool:
        """
        가디언의 응답(accepted/responding/declined/ignored)을 기록합니다.

        Returns:
            갱신된 이력이 있으면 True
        """
        if action not in ("accepted", "responding", "declined", "ignored"):
            raise ValueError(f"unknown response action: {action}")
        responded_at = responded_at or datetime.now(timezone.utc)
        try:
            async with aiosqlite.connect(self.path) as db:
                cursor = await db.execute(
                    "UPDATE guardian_alerts SET status = ?, responded_at = ? "
                    "WHERE guardian_id = ? AND incident_id = ?",
                    (action, _iso(responded_at), guardian_id, incident_id)
                )
                await db.commit()
                return cursor.rowcount > 0
        except aiosqlite.Error as e:
            log.error(f"응답 기록 실패 guardian:{guardian_id} incident:{incident_id} error:{e}")
            raise

    async def recent_alert_history(self, guardian_id: str, limit: int) -> List[AlertHistoryEntry]:
        async with aiosqlite.connect(self.path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT incident_id, created_at, status, responded_at FROM guardian_alerts "
                "WHERE guardian_id = ? ORDER BY created_at DESC LIMIT ?",
                (guardian_id, limit)
            )
            rows = await cursor.fetchall()
            return [
                AlertHistoryEntry(
                    incident_id=r["incident_id"],
                    created_at=datetime.fromisoformat(r["created_at"]),
                    status=r["status"],
                    responded_at=datetime.fromisoformat(r["responded_at"]) if r["responded_at"] else None,
                )
                for r in rows
            ]
