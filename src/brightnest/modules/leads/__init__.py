"""
Leads module - Prospective enrollment records.

Leads are created by intake and advanced by the admission workflow; the
registration flow only reads them.
"""

from brightnest.modules.leads.models import Lead, LeadStatus
from brightnest.modules.leads.repository import LeadRepository

__all__ = ["Lead", "LeadStatus", "LeadRepository"]
