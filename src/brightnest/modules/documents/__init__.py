"""
Documents module - Files uploaded against a lead or student.
"""

from brightnest.modules.documents.models import DocumentCategory, DocumentStatus, StudentDocument

__all__ = ["DocumentCategory", "DocumentStatus", "StudentDocument"]
