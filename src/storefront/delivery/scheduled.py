"""ScheduledDelivery aggregate — a durable record of one pending auto-delivery.

Dispatching an order writes an entry due ``DELIVERY_DELAY_SECONDS`` later.
The in-process timer normally fires it; entries left Pending by a restart
are picked up by the startup sweep.

State Machine:
    PENDING → FIRED (order moved to Delivered)
    PENDING → SKIPPED (order was no longer Dispatched)
    PENDING → FAILED (firing raised; only a manual sweep retries it)
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String, Text

from storefront.domain import storefront


class DeliveryStatus(Enum):
    PENDING = "Pending"
    FIRED = "Fired"
    SKIPPED = "Skipped"
    FAILED = "Failed"


@storefront.aggregate
class ScheduledDelivery:
    order_id = Identifier(required=True)
    due_at = DateTime(required=True)
    status = String(choices=DeliveryStatus, default=DeliveryStatus.PENDING.value)
    outcome = Text()
    created_at = DateTime()
    fired_at = DateTime()

    @classmethod
    def plan(cls, order_id, due_at):
        return cls(
            order_id=order_id,
            due_at=due_at,
            status=DeliveryStatus.PENDING.value,
            created_at=datetime.now(UTC),
        )

    def is_due(self, as_of):
        due = self.due_at
        if due.tzinfo is None and as_of.tzinfo is not None:
            due = due.replace(tzinfo=as_of.tzinfo)
        elif due.tzinfo is not None and as_of.tzinfo is None:
            due = due.replace(tzinfo=None)
        return due <= as_of

    def _settle(self, status, outcome):
        self.status = status.value
        self.outcome = outcome
        self.fired_at = datetime.now(UTC)

    def mark_fired(self):
        self._settle(DeliveryStatus.FIRED, "Order delivered")

    def mark_skipped(self, order_status):
        self._settle(DeliveryStatus.SKIPPED, f"Order was {order_status}")

    def mark_failed(self, reason):
        self._settle(DeliveryStatus.FAILED, reason)


@storefront.repository(part_of=ScheduledDelivery)
class ScheduledDeliveryRepository:
    def find_by_status(self, *statuses) -> list[ScheduledDelivery]:
        items = []
        for status in statuses:
            items.extend(self._dao.query.filter(status=status).limit(10_000).all().items)
        return items

    def find_open_for_order(self, order_id) -> list[ScheduledDelivery]:
        """Entries for ``order_id`` that have not fired successfully or been skipped."""
        entries = self._dao.query.filter(order_id=str(order_id)).all().items
        return [
            entry
            for entry in entries
            if entry.status in (DeliveryStatus.PENDING.value, DeliveryStatus.FAILED.value)
        ]
