"""Review aggregate: a user's star rating and comment on a product.

A user reviews a product at most once. Rating and comment can be revised
later; every revision marks the review as edited.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, Text

from commerce.domain import commerce

MIN_RATING = 1
MAX_RATING = 5


@commerce.event(part_of="Review")
class ReviewSubmitted:
    """A user reviewed a product."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    submitted_at = DateTime(required=True)


@commerce.event(part_of="Review")
class ReviewEdited:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True)
    edited_at = DateTime(required=True)


@commerce.aggregate(limit=-1)
class Review:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text(required=True)
    is_edited = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def rating_must_be_in_range(self):
        if self.rating is not None and not MIN_RATING <= self.rating <= MAX_RATING:
            raise ValidationError({"rating": [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})

    @invariant.post
    def comment_must_not_be_blank(self):
        if self.comment is not None and not self.comment.strip():
            raise ValidationError({"comment": ["Review comment is required"]})

    @classmethod
    def submit(cls, product_id, user_id, rating, comment):
        now = datetime.now(UTC)
        review = cls(
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            comment=comment,
            is_edited=False,
            created_at=now,
            updated_at=now,
        )
        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                product_id=str(product_id),
                user_id=str(user_id),
                rating=rating,
                submitted_at=now,
            )
        )
        return review

    def revise(self, rating=None, comment=None):
        """Change the rating, the comment or both. ``None`` keeps the current value."""
        now = datetime.now(UTC)

        with atomic_change(self):
            if rating is not None:
                self.rating = rating
            if comment is not None:
                self.comment = comment
            self.is_edited = True
            self.updated_at = now

        self.raise_(
            ReviewEdited(
                review_id=str(self.id),
                product_id=str(self.product_id),
                rating=self.rating,
                edited_at=now,
            )
        )
