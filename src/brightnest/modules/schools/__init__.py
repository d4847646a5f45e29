"""
Schools module - School tenant directory.
"""

from brightnest.modules.schools.models import School, SchoolStatus
from brightnest.modules.schools.repository import SchoolRepository

__all__ = ["School", "SchoolStatus", "SchoolRepository"]
