"""Read-side helpers for orders."""

from protean.utils.globals import current_domain

from commerce.identity.registration import require_user
from commerce.order.order import Order, parse_status
from commerce.shared.sorting import by_key, merge_sort

_newest_first = by_key(lambda order: order.created_at, descending=True)


def _orders():
    return current_domain.repository_for(Order)._dao.query


def get_order(order_id) -> Order:
    """Raises ``ObjectNotFoundError`` when no such order exists."""
    return current_domain.repository_for(Order).get(order_id)


def list_orders() -> list[Order]:
    return merge_sort(_orders().all().items, _newest_first)


def list_orders_for_user(user_id) -> list[Order]:
    require_user(user_id)
    return merge_sort(_orders().filter(user_id=user_id).all().items, _newest_first)


def list_orders_by_status(status) -> list[Order]:
    target = parse_status(status)
    return merge_sort(_orders().filter(status=target.value).all().items, _newest_first)


def get_order_items(order_id) -> list:
    return list(get_order(order_id).items)
