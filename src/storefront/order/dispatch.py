"""Order dispatch and auto-delivery — commands and handlers.

Dispatching assigns a tracking id and plans a ``ScheduledDelivery`` in the
same unit of work. When that entry fires, ``DeliverOrder`` moves the order
to Delivered if it is still Dispatched and quietly does nothing otherwise.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.delivery import delivery_delay
from storefront.delivery.scheduled import ScheduledDelivery
from storefront.domain import storefront
from storefront.exceptions import NotFound
from storefront.order.order import Order, OrderStatus
from storefront.utils.lookup import find_by_id

logger = structlog.get_logger(__name__)

# Status reported for entries whose order no longer exists
REMOVED = "Removed"


@storefront.command(part_of="Order")
class DispatchOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class DeliverOrder:
    """Fired by the delivery scheduler, never by clients."""

    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class OrderDispatchHandler:
    @handle(DispatchOrder)
    def dispatch_order(self, command):
        order = find_by_id(Order, command.order_id)
        order.dispatch()

        due_at = datetime.now(UTC) + timedelta(seconds=delivery_delay())
        entry = ScheduledDelivery.plan(order_id=order.id, due_at=due_at)

        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(ScheduledDelivery).add(entry)

        logger.info(
            "Order dispatched",
            order_id=str(order.id),
            tracking_id=order.tracking_id,
            delivery_due_at=due_at.isoformat(),
        )
        return order.tracking_id

    @handle(DeliverOrder)
    def deliver_order(self, command):
        delivery_repo = current_domain.repository_for(ScheduledDelivery)
        entries = delivery_repo.find_open_for_order(command.order_id)

        try:
            order = find_by_id(Order, command.order_id)
        except NotFound:
            order = None

        status = order.status if order is not None else REMOVED
        if status != OrderStatus.DISPATCHED.value:
            for entry in entries:
                entry.mark_skipped(status)
                delivery_repo.add(entry)
            logger.info(
                "Auto-delivery skipped",
                order_id=str(command.order_id),
                status=status,
            )
            return "skipped"

        order.deliver()
        current_domain.repository_for(Order).add(order)
        for entry in entries:
            entry.mark_fired()
            delivery_repo.add(entry)

        logger.info("Order delivered", order_id=str(order.id), tracking_id=order.tracking_id)
        return "delivered"
