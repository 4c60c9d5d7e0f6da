"""Staff performance metrics derived from garment stage handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from ...data.orders_repository import query_orders
from ...data.records import to_record_value
from ...models.domain import Order, OrderStatus
from ...persistence import DocumentStore, Gte, In, Lte, get_document_store

COMPLETED_ORDER_STATUSES = (
    OrderStatus.QUEUED_FOR_DELIVERY,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
    OrderStatus.COLLECTED,
)


@dataclass(slots=True)
class StaffPerformance:
    staff_id: str
    total_orders_processed: int = 0
    stages_completed: Dict[str, int] = field(default_factory=dict)
    stage_total_seconds: Dict[str, int] = field(default_factory=dict)
    avg_time_per_stage: Dict[str, int] = field(default_factory=dict)
    efficiency_score: float = 0.0


def summarize_staff_performance(staff_id: str, orders: Iterable[Order]) -> StaffPerformance:
    """Aggregate metrics for one staff member over ``orders``.

    An order counts once when any of its garments lists the staff member as a
    handler. Efficiency is orders processed per hour spent across all stages.
    """
    metrics = StaffPerformance(staff_id=staff_id)

    for order in orders:
        worked_on_order = False
        for garment in order.garments:
            for stage, handlers in garment.stage_handlers.items():
                if not any(handler.uid == staff_id for handler in handlers):
                    continue
                worked_on_order = True
                metrics.stages_completed[stage] = metrics.stages_completed.get(stage, 0) + 1
                duration = garment.stage_durations.get(stage)
                if duration:
                    metrics.stage_total_seconds[stage] = metrics.stage_total_seconds.get(stage, 0) + duration
        if worked_on_order:
            metrics.total_orders_processed += 1

    for stage, total in metrics.stage_total_seconds.items():
        count = metrics.stages_completed.get(stage) or 1
        metrics.avg_time_per_stage[stage] = total // count

    total_seconds = sum(metrics.stage_total_seconds.values())
    if total_seconds > 0:
        metrics.efficiency_score = round(metrics.total_orders_processed / (total_seconds / 3600), 2)
    return metrics


def get_staff_performance_metrics(
    staff_id: str,
    date_range: Optional[Tuple[datetime, datetime]] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> StaffPerformance:
    store = store or get_document_store()
    filters = [In("status", tuple(status.value for status in COMPLETED_ORDER_STATUSES))]
    if date_range is not None:
        start, end = date_range
        filters.append(Gte("created_at", to_record_value(start)))
        filters.append(Lte("created_at", to_record_value(end)))
    return summarize_staff_performance(staff_id, query_orders(store, filters))
