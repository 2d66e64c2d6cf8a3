"""Repository for the Order aggregate."""

from datetime import UTC, datetime

from storefront.domain import storefront
from storefront.order.order import Order

# Upper bound on rows read by listing queries
_SCAN_LIMIT = 10_000


def _creation_order(order):
    return (order.created_at or datetime.min.replace(tzinfo=UTC), str(order.id))


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_filtered(self, status=None, wizard_id=None, wand_id=None) -> list[Order]:
        """Orders matching every given filter, oldest first."""
        criteria = {}
        if status:
            criteria["status"] = status
        if wizard_id:
            criteria["wizard_id"] = str(wizard_id)
        if wand_id:
            criteria["wand_id"] = str(wand_id)

        query = self._dao.query
        if criteria:
            query = query.filter(**criteria)
        items = query.limit(_SCAN_LIMIT).all().items
        return sorted(items, key=_creation_order)

    def find_by_wizard(self, wizard_id) -> list[Order]:
        return self.find_filtered(wizard_id=wizard_id)

    def find_by_wand(self, wand_id) -> list[Order]:
        return self.find_filtered(wand_id=wand_id)

    def find_by_payment_reference(self, payment_reference: str) -> Order | None:
        if not payment_reference:
            return None
        return self._dao.query.filter(payment_reference=payment_reference.strip()).all().first
