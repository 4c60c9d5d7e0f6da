"""Sorting window arithmetic."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ...clock import ensure_utc
from ...config import settings
from ...models.domain import Branch, Order


def resolve_sorting_window_hours(branch: Optional[Branch], default: Optional[float] = None) -> float:
    """Branch window in hours, falling back to the configured default when unset or zero."""
    fallback = default if default is not None else settings.default_sorting_window_hours
    if branch is None or not branch.sorting_window_hours:
        return fallback
    return branch.sorting_window_hours


def select_baseline(order: Order, now: datetime) -> datetime:
    """Arrival at the processing branch when known, otherwise ``now``."""
    return order.arrived_at_branch_at or ensure_utc(now)


def compute_earliest_delivery_time(window_hours: float, baseline: datetime) -> datetime:
    return ensure_utc(baseline) + timedelta(hours=window_hours)
