"""Manual delivery scheduler — records requests and fires them on demand.

Used by tests and by deployments that rely only on the periodic sweep.
"""

from storefront.delivery.port import DeliveryScheduler


class ManualDeliveryScheduler(DeliveryScheduler):
    def __init__(self):
        self.scheduled: list[tuple[str, float]] = []

    def schedule_delivery(self, order_id: str, delay: float) -> None:
        self.scheduled.append((str(order_id), delay))

    def fire(self, order_id: str) -> str:
        """Fire the delivery for ``order_id`` now, whether or not it was scheduled."""
        from storefront.delivery.firing import fire_delivery

        self.scheduled = [item for item in self.scheduled if item[0] != str(order_id)]
        return fire_delivery(order_id)

    def fire_all(self) -> dict[str, str]:
        outcomes = {}
        for order_id, _delay in list(self.scheduled):
            outcomes[order_id] = self.fire(order_id)
        return outcomes

    def shutdown(self) -> None:
        self.scheduled.clear()
