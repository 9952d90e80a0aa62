"""
Danger-zone report repository port interface.
"""

from typing import List, Optional, Protocol
from safety_core.core.models import DangerZoneReport, RegionFilter

class ReportRepositoryPort(Protocol):
    """위험 지역 신고 저장소 포트 인터페이스 (읽기 전용)"""

    async def list_reports(self, region: Optional[RegionFilter] = None) -> List[DangerZoneReport]:
        """
        신고 목록을 조회합니다.

        Args:
            region: 조회 범위 힌트. 저장소는 이보다 넓게 돌려줘도 된다.

        Returns:
            신고 목록
        """
        ...
