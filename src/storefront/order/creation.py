"""Order creation — command and handler.

Creating an order claims its wand in the same unit of work. The claim is a
conditional update: it only succeeds while the wand is Available and not
claimed by another order, so two concurrent orders for one wand cannot both
commit.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import DuplicateOrder
from storefront.order.order import Order, PaymentProvider
from storefront.utils.lookup import find_by_id
from storefront.wand.wand import Wand
from storefront.wizard.wizard import Wizard

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class CreateOrder:
    wizard_id = Identifier(required=True)
    wand_id = Identifier(required=True)
    payment_reference = String(required=True, max_length=255)
    payment_provider = String(required=True, choices=PaymentProvider)
    shipping_address = String(required=True, max_length=500)


@storefront.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        find_by_id(Wizard, command.wizard_id)
        wand = find_by_id(Wand, command.wand_id)

        order_repo = current_domain.repository_for(Order)
        existing = order_repo.find_by_payment_reference(command.payment_reference)
        if existing is not None:
            raise DuplicateOrder(
                "An order with this payment reference already exists",
                payment_reference=command.payment_reference,
                order_id=str(existing.id),
            )

        order = Order.create(
            wizard_id=command.wizard_id,
            wand_id=command.wand_id,
            payment_reference=command.payment_reference,
            payment_provider=command.payment_provider,
            shipping_address=command.shipping_address,
        )
        wand.claim(order.id)

        order_repo.add(order)
        current_domain.repository_for(Wand).add(wand)

        logger.info(
            "Order created",
            order_id=str(order.id),
            wizard_id=str(command.wizard_id),
            wand_id=str(command.wand_id),
        )
        return str(order.id)
