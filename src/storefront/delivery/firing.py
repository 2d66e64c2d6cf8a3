"""Firing scheduled deliveries and sweeping the ones a restart left behind.

``fire_delivery`` is what every scheduler calls. It never raises: a failed
delivery is logged, its entry is marked Failed and the order stays
Dispatched. ``process_due_deliveries`` runs at startup and from
``manage.py process-deliveries``.
"""

from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from storefront.delivery.scheduled import DeliveryStatus, ScheduledDelivery
from storefront.order import lifecycle

logger = structlog.get_logger(__name__)

FAILED = "failed"


def fire_delivery(order_id) -> str:
    """Auto-deliver ``order_id``. Returns ``delivered``, ``skipped`` or ``failed``."""
    try:
        return lifecycle.deliver(order_id)
    except Exception as exc:
        logger.error("Auto-delivery failed", order_id=str(order_id), error=str(exc))
        _mark_failed(order_id, str(exc))
        return FAILED


def _mark_failed(order_id, reason: str) -> None:
    repo = current_domain.repository_for(ScheduledDelivery)
    for entry in repo.find_open_for_order(order_id):
        if entry.status == DeliveryStatus.PENDING.value:
            entry.mark_failed(reason)
            repo.add(entry)


def process_due_deliveries(as_of=None, include_failed: bool = False) -> dict[str, int]:
    """Fire every Pending entry whose due time has passed.

    Failed entries are only re-run when ``include_failed`` is set.
    Returns the count of orders per outcome.
    """
    as_of = as_of or datetime.now(UTC)
    statuses = [DeliveryStatus.PENDING.value]
    if include_failed:
        statuses.append(DeliveryStatus.FAILED.value)

    repo = current_domain.repository_for(ScheduledDelivery)
    due_orders = []
    for entry in repo.find_by_status(*statuses):
        order_id = str(entry.order_id)
        if entry.is_due(as_of) and order_id not in due_orders:
            due_orders.append(order_id)

    outcomes = {"delivered": 0, "skipped": 0, FAILED: 0}
    for order_id in due_orders:
        outcome = fire_delivery(order_id)
        outcomes[outcome] = outcomes.get(outcome, 0) + 1

    logger.info(
        "Scheduled deliveries processed",
        as_of=as_of.isoformat(),
        include_failed=include_failed,
        **outcomes,
    )
    return outcomes
