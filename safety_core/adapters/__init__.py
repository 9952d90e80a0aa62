"""
Adapters for safety-core hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle persistence.
"""

from .memory import InMemoryGuardianRepository, InMemoryReportRepository
from .storage import SQLiteGuardianStore, SQLiteReportStore

__all__ = [
    "InMemoryGuardianRepository", "InMemoryReportRepository",
    "SQLiteGuardianStore", "SQLiteReportStore",
]
