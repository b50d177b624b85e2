"""Payment confirmation — command and handler.

Confirmation arrives from the client after the processor approves the
payment, or from the processor's webhook. Both may arrive for the same
payment, so a repeated confirmation for the same amount is a no-op.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ConfirmPayment:
    order_id = Identifier(required=True)
    amount_paid = Integer(required=True)  # minor units
    payment_reference = String(max_length=255)


@ordering.command_handler(part_of=Order)
class ConfirmPaymentHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        recorded = order.confirm_payment(
            amount=command.amount_paid,
            payment_reference=command.payment_reference,
        )
        if not recorded:
            logger.info(
                "payment_already_confirmed",
                order_id=str(order.id),
                amount=command.amount_paid,
            )
            return False

        repo.add(order)
        logger.info("order_paid", order_id=str(order.id), amount=command.amount_paid)
        return True
