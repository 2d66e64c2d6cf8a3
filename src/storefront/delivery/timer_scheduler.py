"""Timer-based delivery scheduler — one daemon ``threading.Timer`` per order."""

import threading

import structlog

from storefront.delivery.port import DeliveryScheduler
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


class TimerDeliveryScheduler(DeliveryScheduler):
    """Fires deliveries on background threads inside a fresh domain context.

    Timers are lost when the process exits; the durable entries they were
    meant to fire are then picked up by ``process_due_deliveries``.
    """

    def __init__(self, domain=None):
        self._domain = domain or storefront
        self._timers: dict[str, threading.Timer] = {}
        self._lock = threading.Lock()

    def schedule_delivery(self, order_id: str, delay: float) -> None:
        order_id = str(order_id)
        timer = threading.Timer(max(delay, 0.0), self._run, args=(order_id,))
        timer.daemon = True
        with self._lock:
            previous = self._timers.pop(order_id, None)
            if previous is not None:
                previous.cancel()
            self._timers[order_id] = timer
        timer.start()
        logger.info("Auto-delivery scheduled", order_id=order_id, delay=delay)

    def _run(self, order_id: str) -> None:
        from storefront.delivery.firing import fire_delivery

        with self._lock:
            self._timers.pop(order_id, None)

        try:
            with self._domain.domain_context():
                fire_delivery(order_id)
        except Exception as exc:
            # The durable entry is left for the sweep
            logger.error("Auto-delivery timer failed", order_id=order_id, error=str(exc))

    @property
    def pending(self) -> list[str]:
        with self._lock:
            return list(self._timers)

    def shutdown(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()
