# safety_core/main.py
import os, asyncio
from pathlib import Path
import uvicorn
from safety_core.settings import Settings
from safety_core.observability.health import create_app
from safety_core.observability.logging_setup import setup_logging, get_logger
from safety_core.adapters.storage import SQLiteGuardianStore, SQLiteReportStore
from safety_core.core.guardian_ranking import GuardianRanker
from safety_core.services.danger_zones import DangerZoneService

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def _opt_float(name, default):
    raw = os.getenv(name)
    if raw is None: return default
    if raw.lower() in ("", "none", "off"): return None
    return float(raw)

def build_settings() -> Settings:
    s = Settings()

    # 가디언 매칭
    s.matching.max_distance_km = float(os.getenv("MAX_DISTANCE_KM", s.matching.max_distance_km))
    s.matching.priority_distance_km = float(os.getenv("PRIORITY_DISTANCE_KM", s.matching.priority_distance_km))
    s.matching.max_guardians_to_notify = int(os.getenv("MAX_GUARDIANS_TO_NOTIFY", s.matching.max_guardians_to_notify))
    s.matching.history_window = int(os.getenv("HISTORY_WINDOW", s.matching.history_window))
    s.matching.history_timeout_sec = _opt_float("HISTORY_TIMEOUT_SEC", s.matching.history_timeout_sec)

    # 위험 지역
    s.danger_zones.clustering_distance_m = float(os.getenv("CLUSTERING_DISTANCE_M", s.danger_zones.clustering_distance_m))
    s.danger_zones.risk_high_threshold = float(os.getenv("RISK_HIGH_THRESHOLD", s.danger_zones.risk_high_threshold))
    s.danger_zones.risk_medium_threshold = float(os.getenv("RISK_MEDIUM_THRESHOLD", s.danger_zones.risk_medium_threshold))
    s.danger_zones.min_reports_for_high_risk = int(os.getenv("MIN_REPORTS_FOR_HIGH_RISK", s.danger_zones.min_reports_for_high_risk))
    s.danger_zones.default_radius_km = float(os.getenv("DANGER_ZONE_RADIUS_KM", s.danger_zones.default_radius_km))

    # 저장소
    s.storage.guardians_path = os.getenv("GUARDIANS_DB_PATH", s.storage.guardians_path)
    s.storage.reports_path = os.getenv("REPORTS_DB_PATH", s.storage.reports_path)

    # 관측성
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)
    s.observability.http_host = os.getenv("HTTP_HOST", s.observability.http_host)
    s.observability.http_port = int(os.getenv("HTTP_PORT", s.observability.http_port))
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)
    s.observability.log_json = _b("LOG_JSON", s.observability.log_json)

    return s

async def main():
    s = build_settings()
    setup_logging(s.observability.log_level, json_output=s.observability.log_json)
    log = get_logger("safety.main")
    log.info("설정 로드 완료")

    for path in (s.storage.guardians_path, s.storage.reports_path):
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    guardians = SQLiteGuardianStore(s.storage.guardians_path); await guardians.init()
    reports = SQLiteReportStore(s.storage.reports_path); await reports.init()

    ranker = GuardianRanker(guardians, policy=s.matching)
    danger_zones = DangerZoneService(reports, policy=s.danger_zones)

    app = create_app(s, danger_zones=danger_zones, ranker=ranker)
    server = uvicorn.Server(uvicorn.Config(
        app,
        host=s.observability.http_host,
        port=s.observability.http_port,
        log_level=s.observability.log_level.lower(),
    ))
    log.info(f"HTTP 서버 시작 host:{s.observability.http_host} port:{s.observability.http_port}")
    await server.serve()

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
