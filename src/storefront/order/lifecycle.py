"""Order lifecycle — the entry point for every order operation.

Each transition runs its command while holding the order's lock, plus the
wand's lock when the transition touches the wand, so concurrent transitions
on one order are applied one after the other and the loser fails its guard.
Locks are held until the command's unit of work has committed.

Usage:
    order_id = lifecycle.create_order(wizard_id, wand_id, "ref-1", "stripe", "4 Privet Drive")
    lifecycle.pay(order_id)
    tracking_id = lifecycle.dispatch(order_id)
"""

import structlog
from protean.utils.globals import current_domain

from storefront.delivery import delivery_delay, get_scheduler
from storefront.exceptions import AllocationConflict
from storefront.order.cancellation import CancelOrder, RefundOrder
from storefront.order.completion import CompleteOrder
from storefront.order.creation import CreateOrder
from storefront.order.dispatch import DeliverOrder, DispatchOrder
from storefront.order.modification import UpdateOrderDetails
from storefront.order.order import Order
from storefront.order.payment import PayOrder
from storefront.order.removal import RemoveOrder
from storefront.order.review import SubmitReview
from storefront.utils.locks import entity_locks, order_key, payment_key, wand_key
from storefront.utils.lookup import find_by_id

logger = structlog.get_logger(__name__)


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _wand_of(order_id):
    return find_by_id(Order, order_id).wand_id


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------
def create_order(wizard_id, wand_id, payment_reference, payment_provider, shipping_address) -> str:
    """Place a Pending order and claim its wand.

    A lost race for the wand is retried once before ``AllocationConflict``
    reaches the caller. The payment reference stays locked until the order
    has committed, so a reference can only ever be used once.
    """
    command = CreateOrder(
        wizard_id=wizard_id,
        wand_id=wand_id,
        payment_reference=payment_reference,
        payment_provider=payment_provider,
        shipping_address=shipping_address,
    )
    for attempt in (1, 2):
        try:
            with entity_locks.hold(wand_key(wand_id), payment_key(payment_reference)):
                return _process(command)
        except AllocationConflict:
            if attempt == 2:
                raise
            logger.info("Retrying wand claim", wand_id=str(wand_id))


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------
def pay(order_id) -> None:
    with entity_locks.hold(order_key(order_id), wand_key(_wand_of(order_id))):
        _process(PayOrder(order_id=order_id))


def dispatch(order_id) -> str:
    """Dispatch a paid order and schedule its auto-delivery. Returns the tracking id."""
    with entity_locks.hold(order_key(order_id)):
        tracking_id = _process(DispatchOrder(order_id=order_id))

    get_scheduler().schedule_delivery(str(order_id), delivery_delay())
    return tracking_id


def deliver(order_id) -> str:
    """Auto-delivery. Returns ``delivered``, or ``skipped`` if no longer Dispatched."""
    with entity_locks.hold(order_key(order_id)):
        return _process(DeliverOrder(order_id=order_id))


def complete(order_id) -> None:
    with entity_locks.hold(order_key(order_id)):
        _process(CompleteOrder(order_id=order_id))


def cancel(order_id) -> None:
    with entity_locks.hold(order_key(order_id), wand_key(_wand_of(order_id))):
        _process(CancelOrder(order_id=order_id))


def refund(order_id) -> None:
    with entity_locks.hold(order_key(order_id)):
        _process(RefundOrder(order_id=order_id))


def submit_review(order_id, review: str) -> None:
    with entity_locks.hold(order_key(order_id)):
        _process(SubmitReview(order_id=order_id, review=review))


# ---------------------------------------------------------------------------
# Administration
# ---------------------------------------------------------------------------
def update_details(order_id, shipping_address=None, payment_reference=None, payment_provider=None) -> None:
    with entity_locks.hold(order_key(order_id), payment_key(payment_reference)):
        _process(
            UpdateOrderDetails(
                order_id=order_id,
                shipping_address=shipping_address,
                payment_reference=payment_reference,
                payment_provider=payment_provider,
            )
        )


def remove(order_id) -> None:
    with entity_locks.hold(order_key(order_id), wand_key(_wand_of(order_id))):
        _process(RemoveOrder(order_id=order_id))


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def get(order_id) -> Order:
    return find_by_id(Order, order_id)


def list_orders(status=None, wizard_id=None, wand_id=None) -> list[Order]:
    return current_domain.repository_for(Order).find_filtered(
        status=status,
        wizard_id=wizard_id,
        wand_id=wand_id,
    )


def find_by_payment_reference(payment_reference: str) -> Order | None:
    return current_domain.repository_for(Order).find_by_payment_reference(payment_reference)
