"""
In-memory repositories for safety-core.

These adapters satisfy the guardian and report ports from plain
Python collections. They are used by tests and local demos.
"""

from typing import Dict, Iterable, List, Optional
from safety_core.core.models import AlertHistoryEntry, DangerZoneReport, Guardian, RegionFilter

class InMemoryGuardianRepository:
    """메모리 기반 가디언 저장소"""

    def __init__(self,
                 guardians: Iterable[Guardian] = (),
                 history: Optional[Dict[str, List[AlertHistoryEntry]]] = None):
        self._guardians: Dict[str, Guardian] = {g.id: g for g in guardians}
        self._history: Dict[str, List[AlertHistoryEntry]] = {
            k: list(v) for k, v in (history or {}).items()
        }

    def add(self, guardian: Guardian, history: Iterable[AlertHistoryEntry] = ()) -> None:
        self._guardians[guardian.id] = guardian
        self._history.setdefault(guardian.id, []).extend(history)

    async def list_opted_in_guardians(self) -> List[Guardian]:
        return [g for g in self._guardians.values() if g.opt_in]

    async def recent_alert_history(self, guardian_id: str, limit: int) -> List[AlertHistoryEntry]:
        entries = sorted(self._history.get(guardian_id, []),
                         key=lambda e: e.created_at, reverse=True)
        return entries[:limit]

class InMemoryReportRepository:
    """메모리 기반 신고 저장소 (범위 힌트는 무시)"""

    def __init__(self, reports: Iterable[DangerZoneReport] = ()):
        self._reports: List[DangerZoneReport] = list(reports)

    def add(self, report: DangerZoneReport) -> None:
        self._reports.append(report)

    async def list_reports(self, region: Optional[RegionFilter] = None) -> List[DangerZoneReport]:
        return list(self._reports)
