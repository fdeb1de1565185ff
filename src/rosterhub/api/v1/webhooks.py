"""Stripe webhook endpoint."""

import json
from typing import Annotated, Any

import stripe
from fastapi import APIRouter, Header, HTTPException, Request, status

from src.rosterhub.api.dependencies import SubscriptionServiceDep
from src.rosterhub.core.config import get_settings
from src.rosterhub.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/stripe", summary="Stripe webhook")
async def stripe_webhook(
    request: Request,
    service: SubscriptionServiceDep,
    stripe_signature: Annotated[str | None, Header(alias="Stripe-Signature")] = None,
) -> dict[str, Any]:
    """Verify the signature and apply subscription lifecycle events.

    Event types other than customer.subscription.* are acknowledged and ignored.
    """
    secret = get_settings().stripe_webhook_secret
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Stripe webhooks are not configured",
        )

    payload = await request.body()
    try:
        stripe.Webhook.construct_event(payload, stripe_signature or "", secret)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid payload",
        ) from e
    except stripe.SignatureVerificationError as e:
        logger.warning("Stripe webhook signature rejected")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid signature",
        ) from e

    # Verified above; plain dicts are easier to work with than StripeObject.
    event = json.loads(payload)
    event_type = event.get("type", "")
    stripe_object = (event.get("data") or {}).get("object") or {}

    subscription = await service.sync_from_stripe_event(event_type, stripe_object)
    logger.info(
        "Stripe webhook processed",
        event_id=event.get("id"),
        event_type=event_type,
        applied=subscription is not None,
    )
    return {"received": True}
