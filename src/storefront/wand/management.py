"""Wand inventory management — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.utils.locks import entity_locks, wand_key
from storefront.utils.lookup import find_by_id
from storefront.wand.wand import Wand


@storefront.command(part_of="Wand")
class RegisterWand:
    """Add a new wand to the inventory."""

    wand_id = Identifier()  # Optional; generated when absent
    name = String(required=True, max_length=100)
    length = Float(required=True, min_value=0.0)
    description = Text(required=True)
    image = String(required=True, max_length=500)
    wood = String(max_length=100)
    core = String(max_length=100)
    profit_margin = Float(default=0.0, min_value=0.0)
    total_price = Float(required=True, min_value=0.0)


@storefront.command(part_of="Wand")
class DeactivateWand:
    """Logically remove a wand: it is never allocated or sold again."""

    wand_id = Identifier(required=True)


@storefront.command_handler(part_of=Wand)
class WandManagementHandler:
    @handle(RegisterWand)
    def register_wand(self, command):
        wand = Wand.register(
            name=command.name,
            length=command.length,
            description=command.description,
            image=command.image,
            wood=command.wood,
            core=command.core,
            profit_margin=command.profit_margin or 0.0,
            total_price=command.total_price,
            wand_id=command.wand_id,
        )
        current_domain.repository_for(Wand).add(wand)
        return str(wand.id)

    @handle(DeactivateWand)
    def deactivate_wand(self, command):
        wand = find_by_id(Wand, command.wand_id)
        wand.deactivate()
        current_domain.repository_for(Wand).add(wand)


def deactivate_wand(wand_id):
    """Deactivate a wand while holding its lock, so no order can claim it midway."""
    with entity_locks.hold(wand_key(wand_id)):
        current_domain.process(DeactivateWand(wand_id=wand_id), asynchronous=False)
