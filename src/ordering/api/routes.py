"""FastAPI routes for the Ordering domain — orders."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    ConfirmPaymentRequest,
    OrderIdResponse,
    OrderResponse,
    PaymentConfirmationResponse,
    PlaceOrderRequest,
    StatusResponse,
    UpdateOrderStatusRequest,
)
from ordering.order.order import OrderStatus
from ordering.order.payment import ConfirmPayment
from ordering.order.placement import PlaceOrder
from ordering.order.queries import get_order, list_orders, list_orders_for_user
from ordering.order.status import UpdateOrderStatus
from shared.api import current_actor
from shared.errors import Forbidden
from shared.identity import Actor

order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest, actor: Actor = Depends(current_actor)) -> OrderIdResponse:
    command = PlaceOrder(
        user_id=actor.user_id,
        items=json.dumps([item.model_dump(mode="json") for item in body.items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
        payment_method=body.payment_method.value if body.payment_method else None,
        checkout_token=body.checkout_token,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=order_id)


@order_router.get("/mine", response_model=list[OrderResponse])
async def my_orders(actor: Actor = Depends(current_actor)) -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in list_orders_for_user(actor.user_id)]


@order_router.get("", response_model=list[OrderResponse])
async def all_orders(
    status: OrderStatus | None = None,
    actor: Actor = Depends(current_actor),
) -> list[OrderResponse]:
    orders = list_orders(actor, status.value if status else None)
    return [OrderResponse.from_order(order) for order in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def order_detail(order_id: str, actor: Actor = Depends(current_actor)) -> OrderResponse:
    return OrderResponse.from_order(get_order(order_id, actor))


@order_router.put("/{order_id}/pay", response_model=PaymentConfirmationResponse)
async def confirm_payment(
    order_id: str,
    body: ConfirmPaymentRequest,
    actor: Actor = Depends(current_actor),
) -> PaymentConfirmationResponse:
    """Record a payment settled outside the gateway webhook. Admin only."""
    if not actor.is_admin:
        raise Forbidden("Only admins can confirm payments manually")

    command = ConfirmPayment(
        order_id=order_id,
        amount_paid=body.amount_paid,
        payment_reference=body.payment_reference,
    )
    recorded = current_domain.process(command, asynchronous=False)
    return PaymentConfirmationResponse(order_id=order_id, is_paid=True, already_confirmed=not recorded)


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    actor: Actor = Depends(current_actor),
) -> StatusResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status.value,
        actor_role=actor.role,
        tracking_number=body.tracking_number,
        expected_status=body.expected_status.value if body.expected_status else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status=body.status.value)
