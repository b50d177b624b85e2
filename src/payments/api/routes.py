"""FastAPI routes for payments — intent creation, public config and processor webhooks.

These routes run inside the ordering domain context: intents are created for
orders and webhooks confirm payment on orders.
"""

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from protean.utils.globals import current_domain

from ordering.order.payment import ConfirmPayment
from ordering.order.queries import get_order
from payments.api.schemas import (
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    PublicConfigResponse,
    WebhookResponse,
)
from payments.gateway import get_gateway
from payments.intents import create_intent, get_public_config
from shared.api import current_actor
from shared.identity import Actor

logger = structlog.get_logger(__name__)

payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/create-payment-intent", status_code=201, response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: CreatePaymentIntentRequest,
    actor: Actor = Depends(current_actor),
) -> PaymentIntentResponse:
    order = get_order(body.order_id, actor)
    intent = create_intent(order)
    return PaymentIntentResponse(
        intent_id=intent.intent_id,
        client_secret=intent.client_secret,
        amount=intent.amount,
        currency=intent.currency,
    )


@payment_router.get("/config", response_model=PublicConfigResponse)
async def public_config() -> PublicConfigResponse:
    return PublicConfigResponse(**get_public_config())


@payment_router.post("/webhook", response_model=WebhookResponse)
async def process_webhook(
    request: Request,
    stripe_signature: str = Header(default=""),
) -> WebhookResponse:
    """Confirm payment for a succeeded intent reported by the processor."""
    try:
        payload = (await request.body()).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="Webhook payload must be UTF-8 JSON") from exc

    gateway = get_gateway()
    if not gateway.verify_webhook_signature(payload, stripe_signature):
        raise HTTPException(status_code=401, detail="Invalid webhook signature")

    notification = gateway.parse_webhook(payload)
    if not notification.succeeded or not notification.order_id:
        logger.info("webhook_ignored", intent_id=notification.intent_id)
        return WebhookResponse(status="ignored", order_id=notification.order_id)

    command = ConfirmPayment(
        order_id=notification.order_id,
        amount_paid=notification.amount_received,
        payment_reference=notification.intent_id,
    )
    recorded = current_domain.process(command, asynchronous=False)
    return WebhookResponse(
        status="confirmed" if recorded else "already_confirmed",
        order_id=notification.order_id,
    )
