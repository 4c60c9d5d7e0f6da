"""Order lookups and versioned partial writes."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional, Sequence

from ..exceptions import NotFoundException
from ..models.domain import Order
from ..persistence import ORDERS, DocumentStore, Filter, OrderBy
from .records import order_from_record, to_record, to_record_value

logger = logging.getLogger(__name__)


def get_order(store: DocumentStore, order_id: str) -> Order:
    """Fetch an order fresh from the store. Raises ``NotFoundException``."""
    record = store.get(ORDERS, order_id)
    if record is None:
        raise NotFoundException(ORDERS, order_id)
    return order_from_record(record)


def save_order(store: DocumentStore, order: Order) -> None:
    store.set(ORDERS, order.order_id, to_record(order, "order_id"))


def update_order(store: DocumentStore, order: Order, changes: dict[str, Any]) -> Order:
    """Write ``changes`` with compare-and-swap on ``order.version``.

    ``changes`` is keyed by ``Order`` attribute name and holds domain values.
    The stored version is bumped by one; a concurrent writer that got there
    first makes this raise ``StaleStateException``.
    """
    next_version = order.version + 1
    fields = {name: to_record_value(value) for name, value in changes.items()}
    fields["version"] = next_version
    store.update(ORDERS, order.order_id, fields, expected_version=order.version)
    return dataclasses.replace(order, **changes, version=next_version)


def query_orders(
    store: DocumentStore,
    filters: Sequence[Filter],
    order_by: Optional[OrderBy] = None,
    limit: Optional[int] = None,
) -> list[Order]:
    return [order_from_record(record) for record in store.query(ORDERS, filters, order_by, limit)]
