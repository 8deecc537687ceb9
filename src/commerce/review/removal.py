"""DeleteReview: remove a review for good."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.review.review import Review

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Review")
class DeleteReview:
    review_id = Identifier(required=True)


@commerce.command_handler(part_of=Review)
class DeleteReviewHandler:
    @handle(DeleteReview)
    def delete_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        repo._dao.delete(review)

        logger.info("Review deleted", review_id=str(command.review_id), product_id=str(review.product_id))
