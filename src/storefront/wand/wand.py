"""Wand aggregate (CQRS) — the inventory record of one physical wand.

A wand is claimed by at most one order at a time. The claim does not change
its status: only paying the claiming order marks it Sold, and cancelling that
order puts it back in the available pool.

State Machine (3 states):
    AVAILABLE → SOLD (order paid) → AVAILABLE (order cancelled)
    AVAILABLE → DEACTIVATED (terminal)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text

from storefront.domain import storefront
from storefront.exceptions import AllocationConflict, InvalidState
from storefront.wand.events import (
    WandClaimed,
    WandDeactivated,
    WandRegistered,
    WandReleased,
    WandSold,
)


class WandStatus(Enum):
    AVAILABLE = "Available"
    SOLD = "Sold"
    DEACTIVATED = "Deactivated"


@storefront.aggregate
class Wand:
    name = String(required=True, max_length=100)
    length = Float(min_value=0.0)
    description = Text()
    image = String(max_length=500)
    wood = String(max_length=100)
    core = String(max_length=100)
    profit_margin = Float(default=0.0, min_value=0.0)
    total_price = Float(min_value=0.0)
    status = String(choices=WandStatus, default=WandStatus.AVAILABLE.value)
    order_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def sold_wand_must_be_claimed(self):
        if self.status == WandStatus.SOLD.value and not self.order_id:
            raise ValidationError({"order_id": ["A sold wand must belong to an order"]})

    @invariant.post
    def deactivated_wand_cannot_be_claimed(self):
        if self.status == WandStatus.DEACTIVATED.value and self.order_id:
            raise ValidationError({"order_id": ["A deactivated wand cannot belong to an order"]})

    @classmethod
    def register(
        cls,
        name,
        length=None,
        description=None,
        image=None,
        wood=None,
        core=None,
        profit_margin=0.0,
        total_price=None,
        wand_id=None,
    ):
        """Add a wand to the inventory. Names are stored lower-cased."""
        now = datetime.now(UTC)
        kwargs = {"id": wand_id} if wand_id else {}
        wand = cls(
            name=name.strip().lower(),
            length=length,
            description=description,
            image=image,
            wood=wood,
            core=core,
            profit_margin=profit_margin,
            total_price=total_price,
            status=WandStatus.AVAILABLE.value,
            created_at=now,
            updated_at=now,
            **kwargs,
        )
        wand.raise_(
            WandRegistered(
                wand_id=str(wand.id),
                name=wand.name,
                total_price=total_price,
                registered_at=now,
            )
        )
        return wand

    @property
    def is_allocatable(self):
        return self.status == WandStatus.AVAILABLE.value and not self.order_id

    # -------------------------------------------------------------------
    # Order coupling
    # -------------------------------------------------------------------
    def claim(self, order_id):
        """Bind the wand to ``order_id`` if it is still Available and unclaimed."""
        if self.status != WandStatus.AVAILABLE.value:
            raise InvalidState(
                f"Wand is {self.status} and cannot be ordered",
                current_state=self.status,
                wand_id=str(self.id),
            )
        if self.order_id and str(self.order_id) != str(order_id):
            raise AllocationConflict(
                "Wand has already been claimed by another order",
                wand_id=str(self.id),
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            self.order_id = order_id
            self.updated_at = now

        self.raise_(WandClaimed(wand_id=str(self.id), order_id=str(order_id), claimed_at=now))

    def mark_sold(self, order_id):
        if self.status != WandStatus.AVAILABLE.value or str(self.order_id) != str(order_id):
            raise InvalidState(
                "Only an available wand claimed by this order can be sold",
                current_state=self.status,
                wand_id=str(self.id),
            )

        now = datetime.now(UTC)
        self.status = WandStatus.SOLD.value
        self.updated_at = now
        self.raise_(WandSold(wand_id=str(self.id), order_id=str(order_id), sold_at=now))

    def release(self, order_id):
        """Drop ``order_id``'s claim and return the wand to the available pool.

        A no-op when the wand is claimed by a different order (or by none).
        """
        if str(self.order_id) != str(order_id):
            return

        previous = self.status
        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = WandStatus.AVAILABLE.value
            self.order_id = None
            self.updated_at = now

        self.raise_(
            WandReleased(
                wand_id=str(self.id),
                order_id=str(order_id),
                previous_status=previous,
                released_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def deactivate(self):
        """Permanently withdraw the wand from allocation and sale."""
        if not self.is_allocatable:
            raise InvalidState(
                "Only available, unclaimed wands can be deactivated",
                current_state=self.status,
                wand_id=str(self.id),
            )

        now = datetime.now(UTC)
        self.status = WandStatus.DEACTIVATED.value
        self.updated_at = now
        self.raise_(WandDeactivated(wand_id=str(self.id), deactivated_at=now))
