"""
Evidence fingerprinting for safety-core.

This module builds the SHA-256 fingerprint that binds an incident's
id, time and location so that evidence reports can be re-derived
and checked for tampering.
"""

import hashlib
import hmac
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Union
from safety_core.core.models import EvidenceRecord, GeoPoint, IncidentFacts, ensure_utc

Timestamp = Union[str, datetime]

def to_iso8601(value: datetime) -> str:
    """밀리초 정밀도의 UTC ISO-8601 문자열 (예: 2024-01-01T00:00:00.000Z)"""
    value = ensure_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"

def format_coordinate(value: float) -> str:
    """
    좌표를 최단 왕복 표현으로 출력합니다.

    정수 값은 소수부 없이(18.0 -> "18"), 1e-6 이상은 지수 표기 없이 출력해서
    기존 서비스가 저장한 해시와 같은 문자열을 만든다.
    """
    if value == 0:
        return "0"
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    if abs(value) >= 1e-6:
        return format(Decimal(text), "f")
    mantissa, exponent = text.split("e")
    return f"{mantissa}e{int(exponent)}"

def canonical_evidence_string(incident_id: str, timestamp: Timestamp, location: GeoPoint) -> str:
    if isinstance(timestamp, datetime):
        timestamp = to_iso8601(timestamp)
    return f"{incident_id}|{timestamp}|{format_coordinate(location.lat)},{format_coordinate(location.lng)}"

def generate_evidence_hash(incident_id: str, timestamp: Timestamp, location: GeoPoint) -> str:
    """
    사건 핵심 사실의 SHA-256 지문을 생성합니다.

    Args:
        incident_id: 사건 ID
        timestamp: ISO-8601 문자열 또는 datetime
        location: 사건 위치

    Returns:
        64자리 16진수 해시
    """
    evidence = canonical_evidence_string(incident_id, timestamp, location)
    return hashlib.sha256(evidence.encode("utf-8")).hexdigest()

def verify_evidence_hash(stored_hash: str, incident_id: str, timestamp: Timestamp,
                         location: GeoPoint) -> bool:
    """저장된 해시와 다시 계산한 해시가 일치하는지 확인합니다."""
    expected = generate_evidence_hash(incident_id, timestamp, location)
    return hmac.compare_digest(expected, stored_hash.lower())

def build_evidence_record(facts: IncidentFacts,
                          *,
                          generated_at: Optional[datetime] = None) -> EvidenceRecord:
    """사건 사실로 증거 기록을 만듭니다."""
    timestamp = to_iso8601(facts.timestamp)
    return EvidenceRecord(
        incident_id=facts.incident_id,
        evidence_hash=generate_evidence_hash(facts.incident_id, timestamp, facts.location),
        generated_at=to_iso8601(generated_at or datetime.now(timezone.utc)),
        timestamp=timestamp,
        coordinates=f"{format_coordinate(facts.location.lat)}, {format_coordinate(facts.location.lng)}",
        status=facts.status,
    )
