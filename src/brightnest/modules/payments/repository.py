"""
Transaction Repository
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from brightnest.modules.payments.models import PaymentStatus, Transaction

logger = logging.getLogger(__name__)


async def create_pending(
    db: AsyncSession,
    *,
    school_id: str,
    amount: Decimal,
    currency: str,
    payment_type: str | None,
    description: str | None,
    metadata: dict,
    user_id: str | None = None,
) -> Transaction:
    """Persist a new transaction in PENDING status."""
    transaction = Transaction(
        user_id=user_id,
        school_id=school_id,
        amount=amount,
        currency=currency,
        status=PaymentStatus.PENDING,
        payment_type=payment_type,
        description=description,
        transaction_metadata=metadata,
    )

    db.add(transaction)
    await db.commit()
    await db.refresh(transaction)

    logger.info(f"Created pending transaction {transaction.id} for school {school_id}")
    return transaction
