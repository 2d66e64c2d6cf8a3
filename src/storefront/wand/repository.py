"""Repository for the Wand aggregate."""

from storefront.domain import storefront
from storefront.wand.wand import Wand, WandStatus

# Upper bound on rows read by inventory scans
_SCAN_LIMIT = 10_000


@storefront.repository(part_of=Wand)
class WandRepository:
    """Wand lookups used by allocation and the inventory API.

    Allocatable wands are enumerated in identifier order, which keeps the
    score-to-wand mapping stable for a given inventory snapshot.
    """

    def find_by_status(self, status: str) -> list[Wand]:
        items = self._dao.query.filter(status=status).limit(_SCAN_LIMIT).all().items
        return sorted(items, key=lambda wand: str(wand.id))

    def find_all(self) -> list[Wand]:
        items = self._dao.query.limit(_SCAN_LIMIT).all().items
        return sorted(items, key=lambda wand: str(wand.id))

    def find_allocatable(self) -> list[Wand]:
        """Available wands that no order has claimed, in identifier order."""
        return [wand for wand in self.find_by_status(WandStatus.AVAILABLE.value) if wand.is_allocatable]

    def count_allocatable(self) -> int:
        return len(self.find_allocatable())

    def allocatable_at(self, offset: int) -> Wand | None:
        """The allocatable wand at zero-based ``offset``, or None if there is none."""
        candidates = self.find_allocatable()
        if 0 <= offset < len(candidates):
            return candidates[offset]
        return None

    def find_claimed_by(self, order_id) -> Wand | None:
        if not order_id:
            return None
        return self._dao.query.filter(order_id=str(order_id)).all().first
