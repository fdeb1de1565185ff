"""Payment provider adapter (Stripe).

``classify_stripe_error`` is the only place that inspects Stripe error codes
and messages; everything downstream works with ``CancellationOutcome``.
"""

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

import stripe

from src.rosterhub.core.config import get_settings
from src.rosterhub.core.logging import get_logger

logger = get_logger(__name__)


class CancellationOutcome(StrEnum):
    CANCELED = "canceled"
    ALREADY_CANCELED = "already_canceled"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class CancellationResult:
    outcome: CancellationOutcome
    subscription_id: str | None = None
    error: str | None = None

    @property
    def safe_to_proceed(self) -> bool:
        """True when the customer is confirmed to no longer be billed."""
        return self.outcome is not CancellationOutcome.FAILED


class PaymentGateway(Protocol):
    async def cancel_subscription(self, subscription_id: str) -> CancellationResult: ...


def classify_stripe_error(error: stripe.StripeError) -> CancellationOutcome:
    """Map a Stripe SDK error to a cancellation outcome.

    - ``resource_missing`` / "No such subscription" => NOT_FOUND
    - invalid request against an already canceled subscription => ALREADY_CANCELED
    - anything else (network, auth, rate limit, billing state) => FAILED
    """
    if isinstance(error, stripe.InvalidRequestError):
        message = (error.user_message or str(error) or "").lower()
        if error.code == "resource_missing" or "no such subscription" in message:
            return CancellationOutcome.NOT_FOUND
        if "canceled subscription" in message or "already been canceled" in message:
            return CancellationOutcome.ALREADY_CANCELED
    return CancellationOutcome.FAILED


class StripePaymentGateway:
    """Cancels subscriptions through the Stripe SDK.

    The SDK is synchronous; calls run in a worker thread.
    """

    def __init__(self, api_key: str | None) -> None:
        self._api_key = api_key

    async def cancel_subscription(self, subscription_id: str) -> CancellationResult:
        if not self._api_key:
            return CancellationResult(
                outcome=CancellationOutcome.FAILED,
                subscription_id=subscription_id,
                error="Stripe is not configured",
            )

        try:
            subscription = await asyncio.to_thread(
                stripe.Subscription.retrieve, subscription_id, api_key=self._api_key
            )
            if subscription.status == "canceled":
                logger.info("Stripe subscription already canceled", subscription_id=subscription_id)
                return CancellationResult(
                    outcome=CancellationOutcome.ALREADY_CANCELED,
                    subscription_id=subscription_id,
                )

            await asyncio.to_thread(
                stripe.Subscription.cancel, subscription_id, api_key=self._api_key
            )
        except stripe.StripeError as e:
            outcome = classify_stripe_error(e)
            log = logger.error if outcome is CancellationOutcome.FAILED else logger.info
            log(
                "Stripe subscription cancellation",
                subscription_id=subscription_id,
                outcome=outcome.value,
                error=str(e),
            )
            return CancellationResult(
                outcome=outcome,
                subscription_id=subscription_id,
                error=str(e) if outcome is CancellationOutcome.FAILED else None,
            )

        return CancellationResult(
            outcome=CancellationOutcome.CANCELED,
            subscription_id=subscription_id,
        )


def get_payment_gateway() -> PaymentGateway:
    return StripePaymentGateway(get_settings().stripe_secret_key)
