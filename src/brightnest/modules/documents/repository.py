"""
Student Document Repository
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from brightnest.modules.documents.models import DocumentCategory, DocumentStatus, StudentDocument

logger = logging.getLogger(__name__)


async def create(
    db: AsyncSession,
    *,
    student_id: str,
    school_id: str,
    document_type: str,
    category: DocumentCategory,
    file_name: str,
    file_path: str,
    file_url: str,
    storage_provider: str,
    file_size: int,
    mime_type: str,
    uploaded_by: str,
    upload_date: datetime,
    notes: str | None = None,
) -> StudentDocument:
    """Persist a document record in PENDING status."""
    document = StudentDocument(
        student_id=student_id,
        school_id=school_id,
        document_type=document_type,
        category=category,
        file_name=file_name,
        file_path=file_path,
        file_url=file_url,
        storage_provider=storage_provider,
        file_size=file_size,
        mime_type=mime_type,
        uploaded_by=uploaded_by,
        upload_date=upload_date,
        status=DocumentStatus.PENDING,
        notes=notes,
    )

    db.add(document)
    await db.commit()
    await db.refresh(document)

    logger.info(f"Created document record {document.id} ({document_type}) for {student_id}")
    return document
