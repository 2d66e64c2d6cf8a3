"""Order aggregate (CQRS) — the core of the storefront domain.

An order binds one wizard to one wand and walks it through payment,
dispatch, delivery and completion. The wand's inventory record moves in
lockstep: paying marks it Sold, cancelling frees it again. Those wand
updates happen in the command handlers, inside the same unit of work.

State Machine (7 states):
    PENDING → PAID → DISPATCHED → DELIVERED → COMPLETED → REFUNDED
    PAID | DISPATCHED | DELIVERED → CANCELLED → REFUNDED

A pending order cannot be cancelled: it is an unpaid reservation and is
simply left unpaid or deleted.
"""

import secrets
import string
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text

from storefront.domain import storefront
from storefront.exceptions import InvalidState
from storefront.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderDelivered,
    OrderDetailsUpdated,
    OrderDispatched,
    OrderPaid,
    OrderRefunded,
    OrderReviewed,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    DISPATCHED = "Dispatched"
    DELIVERED = "Delivered"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class PaymentProvider(Enum):
    STRIPE = "stripe"
    PAYPAL = "paypal"
    WIRE_TRANSFER = "wire_transfer"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID},
    OrderStatus.PAID: {OrderStatus.DISPATCHED, OrderStatus.CANCELLED},
    OrderStatus.DISPATCHED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: {OrderStatus.REFUNDED},
    OrderStatus.CANCELLED: {OrderStatus.REFUNDED},
    OrderStatus.REFUNDED: set(),  # Terminal
}

# States from which cancellation is allowed
_CANCELLABLE_STATES = (
    OrderStatus.PAID,
    OrderStatus.DISPATCHED,
    OrderStatus.DELIVERED,
)

# States in which the order holds its wand as Sold
SOLD_STATES = frozenset(
    {
        OrderStatus.PAID.value,
        OrderStatus.DISPATCHED.value,
        OrderStatus.DELIVERED.value,
        OrderStatus.COMPLETED.value,
    }
)

TRACKING_PREFIX = "TRK-"
_TRACKING_ALPHABET = string.ascii_uppercase + string.digits


def generate_tracking_id() -> str:
    """An opaque tracking token: ``TRK-`` followed by 8 uppercase alphanumerics."""
    return TRACKING_PREFIX + "".join(secrets.choice(_TRACKING_ALPHABET) for _ in range(8))


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    wizard_id = Identifier(required=True)
    wand_id = Identifier(required=True)
    payment_reference = String(required=True, max_length=255)
    payment_provider = String(required=True, choices=PaymentProvider)
    shipping_address = String(required=True, max_length=500)
    tracking_id = String(max_length=20)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    completed = Boolean(default=False)
    review = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def completed_flag_matches_status(self):
        if bool(self.completed) != (self.status == OrderStatus.COMPLETED.value):
            raise ValidationError({"completed": ["Only completed orders are flagged as completed"]})

    @invariant.post
    def shipping_address_must_not_be_blank(self):
        if self.shipping_address is not None and not self.shipping_address.strip():
            raise ValidationError({"shipping_address": ["Shipping address cannot be empty"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, wizard_id, wand_id, payment_reference, payment_provider, shipping_address):
        """Place a pending order. Claiming the wand is the caller's job."""
        now = datetime.now(UTC)
        order = cls(
            wizard_id=wizard_id,
            wand_id=wand_id,
            payment_reference=payment_reference.strip(),
            payment_provider=payment_provider,
            shipping_address=shipping_address.strip(),
            status=OrderStatus.PENDING.value,
            completed=False,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                wizard_id=str(wizard_id),
                wand_id=str(wand_id),
                payment_reference=order.payment_reference,
                payment_provider=payment_provider,
                shipping_address=order.shipping_address,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidState(
                f"Cannot transition from {current.value} to {target_status.value}",
                current_state=current.value,
                order_id=str(self.id),
            )

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def pay(self):
        """Record that payment was confirmed by the provider."""
        self._assert_can_transition(OrderStatus.PAID)

        now = datetime.now(UTC)
        self.status = OrderStatus.PAID.value
        self.updated_at = now
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                wand_id=str(self.wand_id),
                payment_reference=self.payment_reference,
                payment_provider=self.payment_provider,
                paid_at=now,
            )
        )

    def dispatch(self, tracking_id=None):
        """Hand the wand over for shipping and assign its tracking id."""
        self._assert_can_transition(OrderStatus.DISPATCHED)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = OrderStatus.DISPATCHED.value
            self.tracking_id = tracking_id or generate_tracking_id()
            self.updated_at = now

        self.raise_(
            OrderDispatched(
                order_id=str(self.id),
                tracking_id=self.tracking_id,
                shipping_address=self.shipping_address,
                dispatched_at=now,
            )
        )

    def deliver(self):
        self._assert_can_transition(OrderStatus.DELIVERED)

        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.updated_at = now
        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                tracking_id=self.tracking_id,
                delivered_at=now,
            )
        )

    def complete(self):
        """The wizard confirmed receipt; the order is now open for review."""
        self._assert_can_transition(OrderStatus.COMPLETED)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = OrderStatus.COMPLETED.value
            self.completed = True
            self.updated_at = now

        self.raise_(OrderCompleted(order_id=str(self.id), completed_at=now))

    # -------------------------------------------------------------------
    # Cancellation & Refund
    # -------------------------------------------------------------------
    def cancel(self):
        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATES:
            raise InvalidState(
                f"Cannot cancel order in {current.value} state. "
                f"Cancellation is only allowed from: "
                f"{', '.join(s.value for s in _CANCELLABLE_STATES)}",
                current_state=current.value,
                order_id=str(self.id),
            )

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                wand_id=str(self.wand_id),
                previous_status=current.value,
                cancelled_at=now,
            )
        )

    def refund(self):
        """Refund a cancelled or completed order."""
        current = OrderStatus(self.status)
        if current not in (OrderStatus.CANCELLED, OrderStatus.COMPLETED):
            raise InvalidState(
                "Only cancelled or completed orders can be refunded",
                current_state=current.value,
                order_id=str(self.id),
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = OrderStatus.REFUNDED.value
            self.completed = False
            self.updated_at = now

        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                previous_status=current.value,
                refunded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------
    def ensure_reviewable(self, text=None):
        """Raise unless the order is completed, has no review yet and ``text`` is not blank."""
        if not self.completed:
            raise InvalidState(
                "Only completed orders can be reviewed",
                current_state=self.status,
                order_id=str(self.id),
            )
        if self.review:
            raise InvalidState(
                "Order has already been reviewed",
                current_state=self.status,
                order_id=str(self.id),
            )
        if text is not None and not text.strip():
            raise ValidationError({"review": ["Review cannot be empty"]})

    def record_review(self, text):
        """Store moderated review text. A review can be written only once."""
        self.ensure_reviewable(text or "")
        text = text.strip()

        now = datetime.now(UTC)
        with atomic_change(self):
            self.review = text
            self.updated_at = now

        self.raise_(
            OrderReviewed(
                order_id=str(self.id),
                wizard_id=str(self.wizard_id),
                review=text,
                reviewed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Detail changes
    # -------------------------------------------------------------------
    def update_details(self, shipping_address=None, payment_reference=None, payment_provider=None):
        """Change non-lifecycle fields.

        The shipping address can change until the order is dispatched; payment
        details only while the order is still pending.
        """
        current = OrderStatus(self.status)
        if shipping_address is not None and current not in (OrderStatus.PENDING, OrderStatus.PAID):
            raise InvalidState(
                "Shipping address can only be changed before dispatch",
                current_state=current.value,
                order_id=str(self.id),
            )
        if (payment_reference is not None or payment_provider is not None) and current != OrderStatus.PENDING:
            raise InvalidState(
                "Payment details can only be changed while the order is pending",
                current_state=current.value,
                order_id=str(self.id),
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            if shipping_address is not None:
                self.shipping_address = shipping_address.strip()
            if payment_reference is not None:
                self.payment_reference = payment_reference.strip()
            if payment_provider is not None:
                self.payment_provider = payment_provider
            self.updated_at = now

        self.raise_(
            OrderDetailsUpdated(
                order_id=str(self.id),
                shipping_address=shipping_address,
                payment_reference=payment_reference,
                payment_provider=payment_provider,
                updated_at=now,
            )
        )
