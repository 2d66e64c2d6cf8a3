"""Domain events for the Wand aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Wand")
class WandRegistered:
    """A new wand was added to the inventory."""

    __version__ = 1

    wand_id = Identifier(required=True)
    name = String(required=True)
    total_price = Float()
    registered_at = DateTime(required=True)


@storefront.event(part_of="Wand")
class WandClaimed:
    """An order claimed the wand. The wand stays Available until paid."""

    __version__ = 1

    wand_id = Identifier(required=True)
    order_id = Identifier(required=True)
    claimed_at = DateTime(required=True)


@storefront.event(part_of="Wand")
class WandSold:
    __version__ = 1

    wand_id = Identifier(required=True)
    order_id = Identifier(required=True)
    sold_at = DateTime(required=True)


@storefront.event(part_of="Wand")
class WandReleased:
    """The wand's claim was dropped and it is back in the available pool."""

    __version__ = 1

    wand_id = Identifier(required=True)
    order_id = Identifier(required=True)
    previous_status = String(required=True)
    released_at = DateTime(required=True)


@storefront.event(part_of="Wand")
class WandDeactivated:
    __version__ = 1

    wand_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
