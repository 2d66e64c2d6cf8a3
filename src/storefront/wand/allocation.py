"""Score-driven wand allocation.

A quiz score is used as a deterministic seed: the allocator counts the
allocatable wands and picks the one at ``score mod count`` in identifier
order. The same score against the same inventory always yields the same
wand, and the index stays valid as the inventory grows or shrinks.

Allocation takes no reservation. Whoever uses the result must claim the
wand with a conditional update before relying on it.
"""

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.exceptions import NoInventory, SelectionFailed
from storefront.wand.wand import Wand

logger = structlog.get_logger(__name__)


class WandAllocator:
    """Maps a non-negative score to one currently allocatable wand."""

    def __init__(self, repository=None):
        self._repository = repository

    @property
    def repository(self):
        return self._repository or current_domain.repository_for(Wand)

    def allocate(self, score: int) -> Wand:
        if score is None or score < 0:
            raise ValidationError({"score": ["Score must be a non-negative integer"]})

        available = self.repository.count_allocatable()
        if available == 0:
            logger.warning("Wand allocation failed, inventory exhausted", score=score)
            raise NoInventory()

        offset = score % available
        wand = self.repository.allocatable_at(offset)
        if wand is None or not wand.is_allocatable:
            logger.warning(
                "Allocated wand vanished before selection",
                score=score,
                offset=offset,
                counted=available,
            )
            raise SelectionFailed(
                "Inventory changed while selecting a wand, try again",
                offset=offset,
                counted=available,
            )

        logger.info(
            "Wand allocated",
            wand_id=str(wand.id),
            score=score,
            offset=offset,
            available=available,
        )
        return wand


def allocate(score: int) -> Wand:
    return WandAllocator().allocate(score)
