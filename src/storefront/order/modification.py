"""Order detail changes — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import DuplicateOrder
from storefront.order.order import Order, PaymentProvider
from storefront.utils.lookup import find_by_id


@storefront.command(part_of="Order")
class UpdateOrderDetails:
    """Change shipping or payment details. Fields left unset are kept."""

    order_id = Identifier(required=True)
    shipping_address = String(max_length=500)
    payment_reference = String(max_length=255)
    payment_provider = String(choices=PaymentProvider)


@storefront.command_handler(part_of=Order)
class UpdateOrderDetailsHandler:
    @handle(UpdateOrderDetails)
    def update_details(self, command):
        repo = current_domain.repository_for(Order)
        order = find_by_id(Order, command.order_id)

        if command.payment_reference:
            existing = repo.find_by_payment_reference(command.payment_reference)
            if existing is not None and str(existing.id) != str(order.id):
                raise DuplicateOrder(
                    "An order with this payment reference already exists",
                    payment_reference=command.payment_reference,
                    order_id=str(existing.id),
                )

        order.update_details(
            shipping_address=command.shipping_address,
            payment_reference=command.payment_reference,
            payment_provider=command.payment_provider,
        )
        repo.add(order)
