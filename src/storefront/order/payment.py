"""Order payment — command and handler.

Payment confirmation comes from the provider; this only records it and
marks the order's wand Sold.
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
class PayOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class PayOrderHandler:
    @handle(PayOrder)
    def pay_order(self, command):
        order = find_by_id(Order, command.order_id)
        wand = find_by_id(Wand, order.wand_id)

        order.pay()
        wand.mark_sold(order.id)

        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(Wand).add(wand)

        logger.info("Order paid", order_id=str(order.id), wand_id=str(wand.id))
