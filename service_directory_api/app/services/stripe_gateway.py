"""
Thin wrapper around the Stripe SDK.

Card payments, wallet top‑ups, refunds and withdrawals all talk to
Stripe through ``StripeGateway`` so the rest of the service layer never
imports ``stripe`` directly.  Amounts are passed in major units
(dollars) and converted to the smallest currency unit here.
"""

import logging
from typing import Any, Dict, Optional

import stripe

from service_directory_api.app.core.config import settings


class PaymentGatewayError(Exception):
    """Raised when Stripe is not configured or rejects a request."""


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


class StripeGateway:
    """Stateless helper issuing Stripe API calls with the configured key."""

    @classmethod
    def _configure(cls) -> None:
        if not settings.stripe_secret_key:
            raise PaymentGatewayError("Stripe is not configured")
        stripe.api_key = settings.stripe_secret_key

    @staticmethod
    def _intent_to_dict(intent: Any) -> Dict[str, Any]:
        return {
            "id": intent.id,
            "client_secret": getattr(intent, "client_secret", None),
            "status": intent.status,
            "amount": getattr(intent, "amount", None),
            "metadata": dict(getattr(intent, "metadata", None) or {}),
        }

    @classmethod
    def create_payment_intent(
        cls,
        amount: float,
        currency: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Create a PaymentIntent for ``amount`` and return its id, secret and status."""
        logger = logging.getLogger(__name__)
        cls._configure()
        try:
            intent = stripe.PaymentIntent.create(
                amount=to_minor_units(amount),
                currency=currency or settings.currency,
                metadata=metadata or {},
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as exc:
            logger.error("Stripe PaymentIntent creation failed: %s", exc)
            raise PaymentGatewayError(str(exc)) from exc
        logger.info("Created PaymentIntent %s for %.2f", intent.id, amount)
        return cls._intent_to_dict(intent)

    @classmethod
    def retrieve_payment_intent(cls, payment_intent_id: str) -> Dict[str, Any]:
        cls._configure()
        try:
            intent = stripe.PaymentIntent.retrieve(payment_intent_id)
        except stripe.StripeError as exc:
            logging.getLogger(__name__).error("Stripe PaymentIntent %s lookup failed: %s", payment_intent_id, exc)
            raise PaymentGatewayError(str(exc)) from exc
        return cls._intent_to_dict(intent)

    @classmethod
    def refund(cls, payment_intent_id: str) -> str:
        """Refund a PaymentIntent in full and return the refund id."""
        cls._configure()
        try:
            refund = stripe.Refund.create(payment_intent=payment_intent_id)
        except stripe.StripeError as exc:
            logging.getLogger(__name__).error("Stripe refund of %s failed: %s", payment_intent_id, exc)
            raise PaymentGatewayError(str(exc)) from exc
        return refund.id

    @classmethod
    def create_payout(cls, amount: float, destination: str, currency: Optional[str] = None) -> str:
        """Send ``amount`` to an external bank account and return the payout id."""
        cls._configure()
        try:
            payout = stripe.Payout.create(
                amount=to_minor_units(amount),
                currency=currency or settings.currency,
                destination=destination,
            )
        except stripe.StripeError as exc:
            logging.getLogger(__name__).error("Stripe payout failed: %s", exc)
            raise PaymentGatewayError(str(exc)) from exc
        return payout.id
