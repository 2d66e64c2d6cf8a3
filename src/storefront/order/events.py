"""Domain events for the Order aggregate.

All events are versioned, immutable facts representing state changes.
"""

from protean.fields import DateTime, Identifier, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderCreated:
    """A wizard placed an order for a wand. Nothing has been paid yet."""

    __version__ = 1

    order_id = Identifier(required=True)
    wizard_id = Identifier(required=True)
    wand_id = Identifier(required=True)
    payment_reference = String(required=True)
    payment_provider = String(required=True)
    shipping_address = String(required=True)
    created_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderPaid:
    __version__ = 1

    order_id = Identifier(required=True)
    wand_id = Identifier(required=True)
    payment_reference = String(required=True)
    payment_provider = String(required=True)
    paid_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderDispatched:
    __version__ = 1

    order_id = Identifier(required=True)
    tracking_id = String(required=True)
    shipping_address = String(required=True)
    dispatched_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    tracking_id = String()
    delivered_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCompleted:
    __version__ = 1

    order_id = Identifier(required=True)
    completed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled after payment and its wand went back on sale."""

    __version__ = 1

    order_id = Identifier(required=True)
    wand_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderRefunded:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    refunded_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderReviewed:
    """The wizard's review passed moderation and was stored on the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    wizard_id = Identifier(required=True)
    review = Text(required=True)
    reviewed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderDetailsUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    shipping_address = String()
    payment_reference = String()
    payment_provider = String()
    updated_at = DateTime(required=True)
