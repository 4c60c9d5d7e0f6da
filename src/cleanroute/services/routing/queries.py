"""Read-only routing queries for dashboards and work queues."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...config import settings
from ...data.orders_repository import query_orders
from ...models.domain import STAGE_SEQUENCE, Order, RoutingStatus, WorkstationStage
from ...persistence import DocumentStore, Eq, In, OrderBy, get_document_store
from .workflow import OPEN_ROUTING_STATUSES

_OPEN = In("routing_status", tuple(status.value for status in OPEN_ROUTING_STATUSES))


@dataclass(slots=True)
class RoutingMetrics:
    pending_routing: int
    in_transit: int
    ready_for_return: int
    queue_by_stage: Dict[str, int] = field(default_factory=dict)


def _limit(limit: Optional[int]) -> int:
    return limit if limit is not None else settings.default_query_limit


def get_orders_pending_routing(
    branch_id: str,
    limit: Optional[int] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> List[Order]:
    """Orders created at ``branch_id`` that are waiting for a transfer."""
    store = store or get_document_store()
    return query_orders(
        store,
        [Eq("branch_id", branch_id), Eq("routing_status", RoutingStatus.PENDING.value)],
        OrderBy("created_at"),
        _limit(limit),
    )


def get_orders_in_transit(
    destination_branch_id: str,
    limit: Optional[int] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> List[Order]:
    store = store or get_document_store()
    return query_orders(
        store,
        [
            Eq("destination_branch_id", destination_branch_id),
            Eq("routing_status", RoutingStatus.IN_TRANSIT.value),
        ],
        OrderBy("transferred_at"),
        _limit(limit),
    )


def get_orders_by_workstation_stage(
    branch_id: str,
    stage: WorkstationStage,
    limit: Optional[int] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> List[Order]:
    store = store or get_document_store()
    return query_orders(
        store,
        [
            Eq("processing_branch_id", branch_id),
            Eq("assigned_workstation_stage", stage.value),
            _OPEN,
        ],
        OrderBy("routed_at"),
        _limit(limit),
    )


def get_orders_assigned_to_staff(
    staff_id: str,
    limit: Optional[int] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> List[Order]:
    store = store or get_document_store()
    return query_orders(
        store,
        [Eq("assigned_workstation_staff_id", staff_id), _OPEN],
        OrderBy("routed_at"),
        _limit(limit),
    )


def get_orders_ready_for_return(
    branch_id: str,
    limit: Optional[int] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> List[Order]:
    store = store or get_document_store()
    return query_orders(
        store,
        [
            Eq("processing_branch_id", branch_id),
            Eq("routing_status", RoutingStatus.READY_FOR_RETURN.value),
        ],
        OrderBy("sorting_completed_at"),
        _limit(limit),
    )


def get_workstation_queue_depth(branch_id: str, *, store: Optional[DocumentStore] = None) -> Dict[str, int]:
    """Open orders per stage at a processing branch. Every stage is present, zero included."""
    store = store or get_document_store()
    open_orders = query_orders(store, [Eq("processing_branch_id", branch_id), _OPEN])
    depth = {stage.value: 0 for stage in STAGE_SEQUENCE}
    for order in open_orders:
        if order.assigned_workstation_stage is not None:
            depth[order.assigned_workstation_stage.value] += 1
    return depth


def get_routing_metrics(branch_id: str, *, store: Optional[DocumentStore] = None) -> RoutingMetrics:
    store = store or get_document_store()
    pending = query_orders(store, [Eq("branch_id", branch_id), Eq("routing_status", RoutingStatus.PENDING.value)])
    in_transit = query_orders(
        store,
        [Eq("destination_branch_id", branch_id), Eq("routing_status", RoutingStatus.IN_TRANSIT.value)],
    )
    ready = query_orders(
        store,
        [Eq("processing_branch_id", branch_id), Eq("routing_status", RoutingStatus.READY_FOR_RETURN.value)],
    )
    return RoutingMetrics(
        pending_routing=len(pending),
        in_transit=len(in_transit),
        ready_for_return=len(ready),
        queue_by_stage=get_workstation_queue_depth(branch_id, store=store),
    )
