"""
Payment Provider Client

Builds the Stripe client from configuration. Payment capture happens in a
separate flow; the registration flow only records pending transactions.
"""

import logging

import stripe

from brightnest.core.config import settings

logger = logging.getLogger(__name__)

_stripe_client: stripe.StripeClient | None = None


def init_payment_client() -> stripe.StripeClient | None:
    """
    Create the Stripe client if a secret key is configured.

    Call this on application startup. A missing key disables payment
    capture but is not an error.
    """
    global _stripe_client
    if not settings.stripe_secret_key:
        logger.warning("STRIPE_SECRET_KEY not set; payment capture is disabled.")
        _stripe_client = None
        return None

    _stripe_client = stripe.StripeClient(settings.stripe_secret_key)
    logger.info("Stripe client initialized")
    return _stripe_client


def is_payment_provider_available() -> bool:
    return _stripe_client is not None
