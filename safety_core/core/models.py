"""
Core domain models for safety-core.

This module defines the guardian, danger-zone and evidence models
using Pydantic v2 for type safety and validation.
"""

from datetime import datetime, timezone
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

# 알림 이력 상태
AlertStatus = Literal["notified", "accepted", "responding", "declined", "ignored"]

# 응답한 것으로 간주하는 상태
RESPONDED_STATUSES = ("accepted", "responding")

# 위험 지역 신고 카테고리
ReportCategory = Literal[
    "Harassment",
    "Poor Lighting",
    "Stalking",
    "Suspicious Activity",
    "Unsafe Transport Stop",
]

RiskLevel = Literal["high", "medium", "low"]


def ensure_utc(value: datetime) -> datetime:
    """naive datetime 은 UTC 로 간주합니다."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class GeoPoint(BaseModel):
    """위경도 좌표 (불변)"""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class Guardian(BaseModel):
    """SOS 알림을 받는 자원봉사 가디언"""
    id: str
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    location: Optional[GeoPoint] = None
    opt_in: bool = False
    status: str = "active"


class AlertHistoryEntry(BaseModel):
    """가디언별 알림 이력 항목"""
    incident_id: str
    created_at: datetime
    status: AlertStatus = "notified"
    responded_at: Optional[datetime] = None

    @field_validator("created_at", "responded_at")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None


class GuardianAvailability(BaseModel):
    """가디언 가용성 조회 결과"""
    available: bool
    status: str
    opt_in: bool


class ScoreBreakdown(BaseModel):
    """가디언 점수 구성 요소"""
    distance: float
    priority: float
    history: float          # 가중치(0.4) 적용 후 기여분
    history_raw: int        # 0-100 원점수
    availability: float


class ScoredGuardian(BaseModel):
    """점수가 매겨진 가디언"""
    guardian: Guardian
    distance_m: float
    breakdown: ScoreBreakdown
    total: float


class GuardianCandidate(BaseModel):
    """알림 발송기로 넘기는 후보 정보"""
    id: str
    name: str
    distance_m: int
    distance_km: float
    location: GeoPoint
    phone: Optional[str] = None
    email: Optional[str] = None
    score: int


class DangerZoneReport(BaseModel):
    """커뮤니티 위험 지역 신고 1건"""
    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    category: ReportCategory
    description: Optional[str] = None
    timestamp: datetime
    user_id: Optional[str] = None

    @field_validator("timestamp")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


class RegionFilter(BaseModel):
    """신고 조회 범위 힌트"""
    center: GeoPoint
    radius_km: float = Field(gt=0)


class RiskAssessment(BaseModel):
    """클러스터 위험도 평가 결과"""
    risk_score: float
    risk_level: RiskLevel


class DangerZoneCluster(BaseModel):
    """신고를 묶은 위험 지역 (저장하지 않고 매번 계산)"""
    id: str
    centroid: GeoPoint
    reports: List[DangerZoneReport]
    categories: List[ReportCategory]
    first_reported_at: datetime
    last_reported_at: datetime
    report_count: int
    risk_score: Optional[float] = None
    risk_level: Optional[RiskLevel] = None

    @property
    def seed(self) -> DangerZoneReport:
        return self.reports[0]


class IncidentFacts(BaseModel):
    """증거 지문에 묶이는 사건의 핵심 사실"""
    incident_id: str
    timestamp: datetime
    location: GeoPoint
    status: str = "active"

    @field_validator("timestamp")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class EvidenceRecord(BaseModel):
    """무결성 검증용 증거 기록"""
    incident_id: str
    evidence_hash: str
    generated_at: str
    timestamp: str
    coordinates: str
    status: str
