# storefront/services/payment_service.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict

import stripe

from storefront.domain.errors import PaymentDeclined, PaymentGatewayError, ValidationFailed
from storefront.domain.schemas import PaymentIntentIn
from storefront.utils.settings import STRIPE_SECRET_KEY, PAYMENT_RETURN_URL, DEFAULT_CURRENCY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ACTION_STATUSES = ("requires_action", "requires_source_action")


class PaymentService:
    """
    Thin adapter over Stripe payment intents.

    ``intents`` is anything with a ``create(**params)`` returning an object
    with ``id``, ``status``, ``client_secret`` and ``amount``; by default the
    Stripe SDK's ``PaymentIntent`` resource.
    """

    def __init__(self, intents=None, api_key: str = STRIPE_SECRET_KEY, return_url: str = PAYMENT_RETURN_URL):
        self.intents = intents or stripe.PaymentIntent
        self.api_key = api_key
        self.return_url = return_url

    def create_payment_intent(self, payload: PaymentIntentIn, idempotency_key: str | None = None) -> Dict[str, Any]:
        if not payload.payment_method_id:
            raise ValidationFailed("Payment method ID is required")

        if not payload.amount or payload.amount <= 0:
            raise ValidationFailed("Valid amount is required")

        #halves round up, the checkout page sends amounts like 100.5
        amount = int(Decimal(str(payload.amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        currency = (payload.currency or DEFAULT_CURRENCY).lower()

        logger.info(f"Creating payment intent: {amount} {currency}")

        params = {
            "amount": amount,
            "currency": currency,
            "payment_method": payload.payment_method_id,
            "confirmation_method": "manual",
            "confirm": True,
            "return_url": self.return_url,
            "metadata": {"integration_check": "accept_a_payment"},
            "api_key": self.api_key,
        }
        if payload.email:
            params["receipt_email"] = payload.email
        if idempotency_key:
            params["idempotency_key"] = idempotency_key

        try:
            intent = self.intents.create(**params)
        except stripe.StripeError as e:
            logger.error(f"Stripe payment error: {e}")
            raise PaymentGatewayError(e.user_message or str(e)) from e

        logger.info(f"Payment intent {intent.id} status {intent.status}")
        return self._map_status(intent)

    @staticmethod
    def _map_status(intent) -> Dict[str, Any]:
        status = intent.status

        if status in ACTION_STATUSES:
            return {
                "requires_action": True,
                "payment_intent_client_secret": intent.client_secret,
                "status": status,
            }

        if status == "succeeded":
            return {
                "success": True,
                "payment_intent_id": intent.id,
                "status": status,
            }

        if status == "requires_payment_method":
            raise PaymentDeclined(
                "Payment failed. Please try with a different payment method.", status
            )

        logger.warning(f"Unexpected payment status: {status}")
        raise PaymentDeclined(f"Payment status: {status}. Please try again.", status)
