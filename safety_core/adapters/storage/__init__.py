"""
Storage adapters for safety-core hexagonal architecture.

SQLite-backed implementations of the guardian and report ports.
"""

from .sqlite_guardians import SQLiteGuardianStore
from .sqlite_reports import SQLiteReportStore

__all__ = ["SQLiteGuardianStore", "SQLiteReportStore"]
