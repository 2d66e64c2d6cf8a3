"""Order completion — command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.utils.lookup import find_by_id


@storefront.command(part_of="Order")
class CompleteOrder:
    """The wizard confirms the wand arrived."""

    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CompleteOrderHandler:
    @handle(CompleteOrder)
    def complete_order(self, command):
        order = find_by_id(Order, command.order_id)
        order.complete()
        current_domain.repository_for(Order).add(order)
