"""Sorting timeline service: delivery scheduling against the branch sorting window."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from ...clock import ensure_utc, utcnow
from ...config import settings
from ...data.branch_repository import get_branch
from ...data.orders_repository import get_order, query_orders, update_order
from ...data.records import to_record_value
from ...models.domain import Order, RoutingStatus
from ...persistence import DocumentStore, Eq, In, Lte, OrderBy, get_document_store
from .window import compute_earliest_delivery_time, resolve_sorting_window_hours, select_baseline

logger = logging.getLogger(__name__)

_UNSORTED_STATUSES = (RoutingStatus.RECEIVED, RoutingStatus.ASSIGNED, RoutingStatus.PROCESSING)


@dataclass(slots=True)
class ScheduleValidation:
    """Outcome of checking a proposed delivery time. Rejections carry the earliest allowed time."""

    valid: bool
    earliest_time: datetime
    sorting_window_hours: float
    error: Optional[str] = None


@dataclass(slots=True)
class SortingWindowStatus:
    remaining_minutes: int
    earliest_delivery_time: datetime
    is_complete: bool


def _window_for(store: DocumentStore, order: Order) -> float:
    return resolve_sorting_window_hours(get_branch(store, order.effective_processing_branch_id))


def earliest_delivery_time_for(order: Order, window_hours: float, now: datetime) -> datetime:
    """Stored earliest time when present, otherwise baseline plus window."""
    if order.earliest_delivery_time is not None:
        return order.earliest_delivery_time
    return compute_earliest_delivery_time(window_hours, select_baseline(order, now))


def validate_delivery_schedule(
    order_id: str,
    scheduled_time: datetime,
    *,
    store: Optional[DocumentStore] = None,
) -> ScheduleValidation:
    """Check a proposed delivery time without mutating the order."""
    store = store or get_document_store()
    order = get_order(store, order_id)
    window_hours = _window_for(store, order)
    earliest = earliest_delivery_time_for(order, window_hours, utcnow())
    proposed = ensure_utc(scheduled_time)

    if proposed < earliest:
        logger.warning(
            f"Rejected delivery schedule for order {order_id}: {proposed.isoformat()} precedes {earliest.isoformat()}"
        )
        return ScheduleValidation(
            valid=False,
            earliest_time=earliest,
            sorting_window_hours=window_hours,
            error=(
                f"Cannot schedule delivery before {earliest.isoformat()}. "
                f"Sorting window ({window_hours:g} hours) must complete first."
            ),
        )
    return ScheduleValidation(valid=True, earliest_time=earliest, sorting_window_hours=window_hours)


def complete_sorting(order_id: str, *, store: Optional[DocumentStore] = None) -> Order:
    """Mark sorting done and restart the window from the completion instant.

    Always recomputes, superseding any earliest delivery time stored before.
    """
    store = store or get_document_store()
    order = get_order(store, order_id)
    window_hours = _window_for(store, order)
    completed_at = utcnow()
    earliest = compute_earliest_delivery_time(window_hours, completed_at)
    updated = update_order(
        store,
        order,
        {"sorting_completed_at": completed_at, "earliest_delivery_time": earliest},
    )
    logger.info(f"Sorting completed for order {order_id}; earliest delivery {earliest.isoformat()}")
    return updated


def get_sorting_window_remaining(order_id: str, *, store: Optional[DocumentStore] = None) -> SortingWindowStatus:
    store = store or get_document_store()
    order = get_order(store, order_id)
    now = utcnow()

    if order.sorting_completed_at is not None:
        return SortingWindowStatus(
            remaining_minutes=0,
            earliest_delivery_time=order.earliest_delivery_time or now,
            is_complete=True,
        )

    earliest = earliest_delivery_time_for(order, _window_for(store, order), now)
    remaining_seconds = (earliest - now).total_seconds()
    remaining_minutes = max(0, math.ceil(remaining_seconds / 60))
    return SortingWindowStatus(
        remaining_minutes=remaining_minutes,
        earliest_delivery_time=earliest,
        is_complete=remaining_minutes == 0,
    )


def get_orders_pending_sorting(
    branch_id: str,
    limit: Optional[int] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> List[Order]:
    """Orders that arrived at the branch and have not finished production."""
    store = store or get_document_store()
    return query_orders(
        store,
        [
            Eq("processing_branch_id", branch_id),
            In("routing_status", tuple(status.value for status in _UNSORTED_STATUSES)),
        ],
        OrderBy("arrived_at_branch_at"),
        limit if limit is not None else settings.default_query_limit,
    )


def get_orders_with_expiring_sorting_window(
    branch_id: str,
    hours_threshold: Optional[float] = None,
    limit: Optional[int] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> List[Order]:
    store = store or get_document_store()
    horizon = hours_threshold if hours_threshold is not None else settings.expiring_window_hours
    threshold_time = utcnow() + timedelta(hours=horizon)
    orders = query_orders(
        store,
        [
            Eq("processing_branch_id", branch_id),
            In("routing_status", tuple(status.value for status in _UNSORTED_STATUSES)),
            Lte("earliest_delivery_time", to_record_value(threshold_time)),
        ],
        OrderBy("earliest_delivery_time"),
        limit if limit is not None else settings.default_query_limit,
    )
    return [order for order in orders if order.sorting_completed_at is None]
