"""
Waitlist module - Per-program waitlists, staff management and parent view.
"""

from brightnest.modules.waitlist.models import WaitlistEntry, WaitlistSequence

__all__ = ["WaitlistEntry", "WaitlistSequence"]
