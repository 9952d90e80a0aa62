"""
Application services for safety-core.
"""

from .danger_zones import DangerZoneService

__all__ = ["DangerZoneService"]
