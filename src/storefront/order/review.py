"""Order review — command and handler.

The order's own guard runs first, so a review for an order that cannot take
one never reaches the moderation service. Moderation fails closed: an
unusable classifier answer rejects the write with ``ExternalServiceError``.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import ContentRejected
from storefront.moderation.moderator import ReviewModerator
from storefront.order.order import Order
from storefront.utils.lookup import find_by_id

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class SubmitReview:
    order_id = Identifier(required=True)
    review = Text(required=True)


@storefront.command_handler(part_of=Order)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        order = find_by_id(Order, command.order_id)
        order.ensure_reviewable(command.review)

        if not ReviewModerator().is_safe(command.review):
            logger.info("Review rejected by moderation", order_id=str(order.id))
            raise ContentRejected(
                "Review contains inappropriate content",
                order_id=str(order.id),
            )

        order.record_review(command.review)
        current_domain.repository_for(Order).add(order)
        logger.info("Review recorded", order_id=str(order.id))
