"""
Waitlist Display Helpers

Pure functions turning stored priority scores, positions and statuses into
the labels shown to staff and parents.
"""

import math

from brightnest.modules.leads.models import LeadStatus

# Statuses that take an entry out of the live queue
TERMINAL_WAITLIST_STATUSES = frozenset({LeadStatus.DECLINED.value, LeadStatus.ENROLLED.value})

# Lead statuses hidden from the parent waitlist view
PARENT_HIDDEN_LEAD_STATUSES = frozenset({LeadStatus.ENROLLED.value, LeadStatus.REGISTERED.value})

PARENT_FACING_STATUS_LABELS = {
    LeadStatus.CONTACTED.value: "Contacted",
    LeadStatus.INTERESTED.value: "Interested",
    LeadStatus.TOURED.value: "Toured",
    LeadStatus.ENROLLED.value: "Enrolled",
    LeadStatus.DECLINED.value: "Declined",
}
DEFAULT_PARENT_FACING_STATUS = "Waitlisted"

# Staff edit priority on 1-10; storage uses 0-100
PRIORITY_SCALE = 10


def normalize_status(status: str | None) -> str:
    return (status or "").strip().lower()


def is_terminal_status(status: str | None) -> bool:
    return normalize_status(status) in TERMINAL_WAITLIST_STATUSES


def staff_priority_label(priority_score: int) -> str:
    """Label used in the staff waitlist table."""
    if priority_score >= 80:
        return "High"
    if priority_score >= 50:
        return "Medium"
    return "Standard"


def parent_priority_label(priority_score: int) -> str:
    """Label used in the parent waitlist view."""
    if priority_score >= 100:
        return "High"
    if priority_score >= 50:
        return "Sibling"
    return "Standard"


def to_ui_priority(priority_score: int | None) -> int:
    """Convert a stored 0-100 score to the 1-10 scale (never below 1)."""
    # Halves round up (25 -> 3)
    ui_score = math.floor(priority_score / PRIORITY_SCALE + 0.5) if priority_score else 0
    return ui_score if ui_score > 0 else 1


def from_ui_priority(ui_score: int) -> int:
    """Convert a 1-10 UI score to the stored 0-100 scale."""
    return ui_score * PRIORITY_SCALE


def estimate_wait_time(position: int) -> str:
    if position <= 3:
        return "1-2 weeks"
    if position <= 6:
        return "2-4 weeks"
    if position <= 10:
        return "1-2 months"
    return "2-3 months"


def parent_facing_status(status: str | None) -> str:
    return PARENT_FACING_STATUS_LABELS.get(normalize_status(status), DEFAULT_PARENT_FACING_STATUS)
