"""
Guardian repository port interface.

This module defines the protocol for reading guardians and
their alert history.
"""

from typing import List, Protocol
from safety_core.core.models import AlertHistoryEntry, Guardian

class GuardianRepositoryPort(Protocol):
    """가디언 저장소 포트 인터페이스 (읽기 전용)"""

    async def list_opted_in_guardians(self) -> List[Guardian]:
        """
        알림 수신에 동의한 가디언 목록을 조회합니다.

        Returns:
            opt_in 이 True 인 가디언들
        """
        ...

    async def recent_alert_history(self, guardian_id: str, limit: int) -> List[AlertHistoryEntry]:
        """
        가디언의 최근 알림 이력을 조회합니다.

        Args:
            guardian_id: 가디언 ID
            limit: 최대 개수 (최신순)

        Returns:
            알림 이력 목록
        """
        ...
