"""
Student Document Models
"""

import enum
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, Index, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from brightnest.modules.shared import BaseModel


class DocumentCategory(str, enum.Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"


class DocumentStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class StudentDocument(BaseModel):
    """
    A stored file reference.

    ``student_id`` holds the lead id while the child is still a lead; the
    bytes themselves live in object storage at ``file_path``.
    """

    __tablename__ = "student_documents"

    student_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    school_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
    )

    document_type: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[DocumentCategory] = mapped_column(
        Enum(
            DocumentCategory,
            name="document_category",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=DocumentCategory.OPTIONAL,
    )

    # File
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    storage_provider: Mapped[str] = mapped_column(String(20), nullable=False, default="s3")
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)

    # Provenance
    uploaded_by: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    upload_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    status: Mapped[DocumentStatus] = mapped_column(
        Enum(
            DocumentStatus,
            name="document_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=DocumentStatus.PENDING,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_student_documents_student_id", "student_id"),
        Index("ix_student_documents_school_id", "school_id"),
    )

    def __repr__(self) -> str:
        return f"<StudentDocument(id={self.id}, type={self.document_type}, status={self.status.value})>"
