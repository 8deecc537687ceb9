"""EditReview: change the rating and/or comment of a review."""

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.review.review import Review
from commerce.shared.exceptions import BusinessRuleError


@commerce.command(part_of="Review")
class EditReview:
    review_id = Identifier(required=True)
    rating = Integer()
    comment = Text()


@commerce.command_handler(part_of=Review)
class EditReviewHandler:
    @handle(EditReview)
    def edit_review(self, command):
        if command.rating is None and command.comment is None:
            raise BusinessRuleError({"review": ["Nothing to update"]})

        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        review.revise(rating=command.rating, comment=command.comment)
        repo.add(review)
