"""
Port interfaces for safety-core hexagonal architecture.

This module defines the port interfaces (Protocols) that define
the contracts between the core domain and external storage.
"""

from .guardians import GuardianRepositoryPort
from .reports import ReportRepositoryPort

__all__ = ["GuardianRepositoryPort", "ReportRepositoryPort"]
