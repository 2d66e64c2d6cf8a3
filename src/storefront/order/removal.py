"""Administrative order removal — command and handler.

Deleting an order releases its wand claim and skips its pending delivery.
A wand sold to an order that has not been completed goes back on sale; one
that belongs to a completed (or completed then refunded) order stays Sold.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.delivery.scheduled import ScheduledDelivery
from storefront.domain import storefront
from storefront.order.dispatch import REMOVED
from storefront.order.order import Order, OrderStatus
from storefront.utils.lookup import find_by_id
from storefront.wand.wand import Wand

logger = structlog.get_logger(__name__)

# Orders whose wand has changed hands for good
_SETTLED_STATES = (OrderStatus.COMPLETED.value, OrderStatus.REFUNDED.value)


@storefront.command(part_of="Order")
class RemoveOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class RemoveOrderHandler:
    @handle(RemoveOrder)
    def remove_order(self, command):
        order = find_by_id(Order, command.order_id)

        wand_repo = current_domain.repository_for(Wand)
        wand = wand_repo.find_claimed_by(order.id)
        if wand is not None and order.status not in _SETTLED_STATES:
            wand.release(order.id)
            wand_repo.add(wand)

        delivery_repo = current_domain.repository_for(ScheduledDelivery)
        for entry in delivery_repo.find_open_for_order(order.id):
            entry.mark_skipped(REMOVED)
            delivery_repo.add(entry)

        current_domain.repository_for(Order)._dao.delete(order)
        logger.info(
            "Order removed",
            order_id=str(order.id),
            status=order.status,
            wand_id=str(order.wand_id),
        )
