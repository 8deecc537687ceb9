"""SubmitReview: a registered user reviews an existing product.

A user holds at most one review per product.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.identity.registration import require_user
from commerce.review.review import Review
from commerce.shared.exceptions import DuplicateResourceError

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Review")
class SubmitReview:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text(required=True)


@commerce.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        require_user(command.user_id)
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(Review)
        existing = repo._dao.query.filter(
            user_id=str(command.user_id),
            product_id=str(command.product_id),
        ).all()
        if existing.total > 0:
            raise DuplicateResourceError("Review", "product_id", command.product_id)

        review = Review.submit(
            product_id=command.product_id,
            user_id=command.user_id,
            rating=command.rating,
            comment=command.comment,
        )
        repo.add(review)

        logger.info(
            "Review submitted",
            review_id=str(review.id),
            product_id=str(command.product_id),
            rating=command.rating,
        )
        return str(review.id)
