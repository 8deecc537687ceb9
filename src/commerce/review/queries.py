"""Read-side helpers for reviews. Listings come back newest first."""

from protean.utils.globals import current_domain

from commerce.identity.registration import require_user
from commerce.review.review import Review
from commerce.shared.sorting import by_key, merge_sort

_newest_first = by_key(lambda review: review.created_at, descending=True)


def _reviews():
    return current_domain.repository_for(Review)._dao.query


def get_review(review_id) -> Review:
    """Raises ``ObjectNotFoundError`` when no such review exists."""
    return current_domain.repository_for(Review).get(review_id)


def list_reviews() -> list[Review]:
    return merge_sort(_reviews().all().items, _newest_first)


def list_reviews_for_product(product_id) -> list[Review]:
    return merge_sort(_reviews().filter(product_id=str(product_id)).all().items, _newest_first)


def list_reviews_for_user(user_id) -> list[Review]:
    require_user(user_id)
    return merge_sort(_reviews().filter(user_id=str(user_id)).all().items, _newest_first)
