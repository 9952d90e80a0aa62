"""
HTTP endpoints for safety-core.

This module implements health, readiness, metrics and info endpoints,
plus the two read-side queries consumed by the map UI and the
notification dispatcher.
"""

import time
from typing import Optional
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response, JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from pydantic import BaseModel, Field
from safety_core.core.guardian_ranking import GuardianRanker
from safety_core.core.models import GeoPoint
from safety_core.services.danger_zones import DangerZoneService
from safety_core.settings import Settings
from safety_core.observability import metrics
from safety_core.observability.logging_setup import get_logger

log = get_logger("safety.http")

class CandidatesRequest(BaseModel):
    lat: float = Field(ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(ge=-180, le=180, allow_inf_nan=False)
    max_count: Optional[int] = Field(default=None, ge=1, le=100)

def create_app(settings: Settings,
               *,
               danger_zones: Optional[DangerZoneService] = None,
               ranker: Optional[GuardianRanker] = None) -> FastAPI:
    """FastAPI 애플리케이션을 생성합니다."""
    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="Guardian ranking and danger-zone service"
    )

    start_time = time.time()

    @app.get("/health")
    async def health():
        """헬스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ok",
            "service": settings.observability.service_name,
            "timestamp": time.time()
        })

    @app.get("/ready")
    async def ready():
        """레디니스 체크 엔드포인트"""
        is_ready = danger_zones is not None and ranker is not None
        return JSONResponse({
            "status": "ready" if is_ready else "degraded",
            "danger_zones": danger_zones is not None,
            "guardian_ranking": ranker is not None,
            "timestamp": time.time()
        }, status_code=200 if is_ready else 503)

    @app.get("/metrics")
    async def metrics_endpoint():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")
        metrics.uptime_seconds.set(time.time() - start_time)
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/info")
    async def info():
        """서비스 정보 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "build_date": settings.observability.build_date,
            "uptime_seconds": int(time.time() - start_time),
            "metrics_enabled": settings.observability.metrics_enabled,
            "log_level": settings.observability.log_level,
            "matching": settings.matching.model_dump(),
            "danger_zones": settings.danger_zones.model_dump(),
        })

    @app.get("/danger-zones")
    async def get_danger_zones(
        lat: float = Query(ge=-90, le=90),
        lng: float = Query(ge=-180, le=180),
        radius_km: Optional[float] = Query(default=None, gt=0, le=100),
    ):
        """주변 위험 지역 클러스터"""
        if danger_zones is None:
            raise HTTPException(status_code=503, detail="danger zones unavailable")
        zones = await danger_zones.zones_near(GeoPoint(lat=lat, lng=lng), radius_km)
        return {"count": len(zones), "zones": [z.model_dump(mode="json") for z in zones]}

    @app.post("/guardians/candidates")
    async def guardian_candidates(payload: CandidatesRequest):
        """사건 위치 기준 상위 가디언 후보"""
        if ranker is None:
            raise HTTPException(status_code=503, detail="guardian ranking unavailable")
        location = GeoPoint(lat=payload.lat, lng=payload.lng)
        candidates = await ranker.top_candidates(location, payload.max_count)
        return {"count": len(candidates), "guardians": [c.model_dump(mode="json") for c in candidates]}

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "endpoints": {
                "health": "/health",
                "ready": "/ready",
                "metrics": "/metrics",
                "info": "/info",
                "danger_zones": "/danger-zones",
                "guardian_candidates": "/guardians/candidates"
            }
        })

    return app
