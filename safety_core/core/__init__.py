"""
Core domain models and pure functions for safety-core.

This module contains the domain models and the scoring, clustering
and fingerprinting logic that is independent of storage and I/O.
Modules that depend on safety_core.common.geo (scoring, ranking,
clustering) are imported from their own modules, since geo itself
imports core.models.
"""

from .models import (
    AlertHistoryEntry,
    DangerZoneCluster,
    DangerZoneReport,
    GeoPoint,
    Guardian,
    GuardianCandidate,
    ScoredGuardian,
)
from .errors import InvalidArgumentError
from .risk import assess_clusters, score_cluster
from .evidence import generate_evidence_hash, verify_evidence_hash

__all__ = [
    "AlertHistoryEntry", "DangerZoneCluster", "DangerZoneReport", "GeoPoint",
    "Guardian", "GuardianCandidate", "ScoredGuardian", "InvalidArgumentError",
    "assess_clusters", "score_cluster",
    "generate_evidence_hash", "verify_evidence_hash",
]
