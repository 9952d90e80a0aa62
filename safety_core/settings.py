# safety_core/settings.py
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class MatchingPolicy(BaseModel):
    # build_settings() 의 환경 변수 대입도 검증
    model_config = ConfigDict(validate_assignment=True)

    max_distance_km: float = Field(default=20.0, gt=0)             # 이 거리 밖의 가디언은 제외
    priority_distance_km: float = Field(default=5.0, gt=0)         # 이 거리 안이면 +10 보너스
    max_guardians_to_notify: int = Field(default=10, ge=1)
    history_window: int = Field(default=20, ge=1)                  # 최근 알림 이력 개수
    history_timeout_sec: Optional[float] = Field(default=5.0, gt=0)  # None 이면 제한 없음
    neutral_history_score: int = Field(default=50, ge=0, le=100)

class DangerZonePolicy(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    clustering_distance_m: float = Field(default=500.0, gt=0)
    risk_high_threshold: float = Field(default=5.0, gt=0)
    risk_medium_threshold: float = Field(default=2.0, gt=0)
    min_reports_for_high_risk: int = Field(default=2, ge=1)
    very_recent_days: float = Field(default=7.0, ge=0)
    very_recent_weight: float = Field(default=1.5, ge=0)
    recent_days: float = Field(default=30.0, ge=0)
    recent_weight: float = Field(default=1.0, ge=0)
    old_weight: float = Field(default=0.5, ge=0)
    default_radius_km: float = Field(default=10.0, gt=0)

class Storage(BaseModel):
    guardians_path: str = "/data/guardians.db"
    reports_path: str = "/data/danger_zones.db"

class Observability(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    http_host: str = "0.0.0.0"
    http_port: int = Field(default=8099, ge=1, le=65535)
    metrics_enabled: bool = True
    service_name: str = "safety-core"
    build_version: str = "0.1.0"
    build_date: str = "2026-10-01"
    log_level: str = "INFO"
    log_json: bool = False                    # True 면 JSON 한 줄 로그

class Settings(BaseModel):
    # 하위 섹션 (기본값/팩토리로 누락 방지)
    matching: MatchingPolicy = Field(default_factory=MatchingPolicy)
    danger_zones: DangerZonePolicy = Field(default_factory=DangerZonePolicy)
    storage: Storage = Field(default_factory=Storage)
    observability: Observability = Field(default_factory=Observability)
