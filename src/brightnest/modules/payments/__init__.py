"""
Payments module - Payment intent records.

Transactions are created pending by the registration flow; capture and the
terminal status are handled by the payment-processing flow.
"""

from brightnest.modules.payments.models import PaymentStatus, Transaction

__all__ = ["PaymentStatus", "Transaction"]
