"""Order cancellation and refund — commands and handler.

Cancelling a paid order puts its wand back into the available pool.
Refunds only touch the order: a wand sold to a completed order stays Sold.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.utils.lookup import find_by_id
from storefront.wand.wand import Wand

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class RefundOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CancellationHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = find_by_id(Order, command.order_id)
        previous = order.status
        order.cancel()
        current_domain.repository_for(Order).add(order)

        wand = current_domain.repository_for(Wand).find_claimed_by(order.id)
        if wand is not None:
            wand.release(order.id)
            current_domain.repository_for(Wand).add(wand)

        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            previous_status=previous,
            wand_released=wand is not None,
        )

    @handle(RefundOrder)
    def refund_order(self, command):
        order = find_by_id(Order, command.order_id)
        previous = order.status
        order.refund()
        current_domain.repository_for(Order).add(order)

        logger.info("Order refunded", order_id=str(order.id), previous_status=previous)
