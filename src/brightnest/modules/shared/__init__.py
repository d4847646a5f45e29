"""
Shared module - Base model and helpers used by every domain module.
"""

from brightnest.modules.shared.filters import status_in
from brightnest.modules.shared.models import BaseModel

__all__ = ["BaseModel", "status_in"]
