"""Storefront bounded context — Wand inventory, quiz answers and Orders.

Handles the order lifecycle (CQRS), the wand inventory records it moves in
lockstep, score-driven wand allocation, the review moderation gate and the
deferred auto-delivery of dispatched orders.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
