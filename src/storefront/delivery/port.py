"""Delivery scheduler port — how auto-delivery gets triggered after dispatch.

The durable ``ScheduledDelivery`` entry is written by the dispatch handler;
a scheduler only decides when ``fire_delivery`` runs for it.
"""

from abc import ABC, abstractmethod


class DeliveryScheduler(ABC):
    @abstractmethod
    def schedule_delivery(self, order_id: str, delay: float) -> None:
        """Arrange for ``order_id`` to be auto-delivered ``delay`` seconds from now.

        Must return immediately; the caller never waits for the delivery.
        """
        ...

    def shutdown(self) -> None:
        """Drop anything still waiting. Durable entries stay for the sweep."""
