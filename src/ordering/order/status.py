"""Fulfillment status updates — command and handler.

Only admins move orders through the status machine.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from shared.errors import Forbidden
from shared.identity import Role

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    actor_role = String(required=True, max_length=20)
    tracking_number = String(max_length=255)
    expected_status = String(choices=OrderStatus)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        if command.actor_role != Role.ADMIN.value:
            raise Forbidden("Only admins can change order status")

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous_status = order.status

        order.change_status(
            command.status,
            tracking_number=command.tracking_number,
            expected_status=command.expected_status,
        )
        repo.add(order)

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.status,
        )
