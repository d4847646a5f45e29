"""
Payment Models
"""

import enum
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from brightnest.modules.shared import BaseModel


class PaymentStatus(str, enum.Enum):
    """Lifecycle of a payment intent."""

    PENDING = "pending"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Transaction(BaseModel):
    """
    A payment intent.

    Created eagerly before capture; ``metadata`` links it back to the lead
    and school that started it.
    """

    __tablename__ = "transactions"

    # Null for anonymous (parent registration) payments
    user_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False), nullable=True)
    school_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="usd")
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(
            PaymentStatus,
            name="payment_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    payment_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # "metadata" is reserved on declarative classes
    transaction_metadata: Mapped[dict | None] = mapped_column("metadata", JSONB, nullable=True)

    __table_args__ = (Index("ix_transactions_school_id", "school_id"),)

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, status={self.status.value}, amount={self.amount})>"
