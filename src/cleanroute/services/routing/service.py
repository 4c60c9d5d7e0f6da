"""Routing orchestration service.

Every operation reads the order fresh, plans one state-machine transition and
writes it with a single versioned partial update. Re-sending a request whose
effect is already applied returns the current order without writing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ...clock import utcnow
from ...data.branch_repository import get_branch
from ...data.orders_repository import get_order, update_order
from ...exceptions import ValidationException
from ...models.domain import STAGE_SEQUENCE, Branch, BranchType, Order, RoutingStatus, WorkstationStage
from ...persistence import DocumentStore, get_document_store
from ..sorting.window import compute_earliest_delivery_time, resolve_sorting_window_hours
from ..workstation.balancer import find_available_staff_for_stage
from .workflow import RoutingTransition, plan_transition

logger = logging.getLogger(__name__)

INITIAL_STAGE = WorkstationStage.INSPECTION


@dataclass(slots=True)
class AutoAssignment:
    stage: WorkstationStage
    staff_id: Optional[str] = None


def resolve_processing_branch_id(origin: Branch) -> str:
    """Satellites send work to their main store; every other branch processes its own."""
    if origin.branch_type == BranchType.SATELLITE:
        if not origin.main_store_id:
            raise ValidationException(
                f"Satellite branch '{origin.branch_id}' has no main store configured",
                {"branch_id": origin.branch_id, "main_store_id": None},
            )
        return origin.main_store_id
    return origin.branch_id


def _apply(
    store: DocumentStore,
    order: Order,
    transition: RoutingTransition,
    extra: Optional[dict[str, Any]] = None,
) -> Order:
    if not transition.changed and not extra:
        logger.info(f"Order {order.order_id} already {transition.routing_status.value}; nothing to write")
        return order
    changes = transition.changes()
    changes.update(extra or {})
    updated = update_order(store, order, changes)
    logger.info(
        f"Order {order.order_id} routing "
        f"{order.routing_status.value if order.routing_status else 'unrouted'} -> {transition.routing_status.value} "
        f"(status {updated.status.value}, stage "
        f"{transition.stage.value if transition.stage else '-'}, staff {transition.staff_id or '-'})"
    )
    return updated


def route_order(order_id: str, user_id: str, *, store: Optional[DocumentStore] = None) -> Order:
    """Decide the processing branch for a newly created order.

    Orders that stay at their origin branch go straight to ``assigned`` at the
    inspection stage, with staff picked by the load balancer. Orders that
    must travel to a main store wait in ``pending`` with no stage.

    Args:
        order_id: Order to route
        user_id: UID of the user initiating the routing

    Returns:
        The order with its routing fields applied

    Raises:
        NotFoundException: If the order or either branch does not exist
        ValidationException: If a satellite origin has no main store
    """
    store = store or get_document_store()
    order = get_order(store, order_id)
    if order.routing_status is not None:
        logger.info(f"Order {order_id} already routed ({order.routing_status.value}); request from {user_id} ignored")
        return order

    origin = get_branch(store, order.branch_id)
    processing_branch_id = resolve_processing_branch_id(origin)
    get_branch(store, processing_branch_id)

    routing_fields: dict[str, Any] = {
        "processing_branch_id": processing_branch_id,
        "origin_branch_id": order.branch_id,
        "routed_at": utcnow(),
    }

    if processing_branch_id != order.branch_id:
        routing_fields["destination_branch_id"] = processing_branch_id
        transition = plan_transition(order, RoutingStatus.PENDING)
        return _apply(store, order, transition, routing_fields)

    staff_id = find_available_staff_for_stage(processing_branch_id, INITIAL_STAGE, store=store)
    transition = plan_transition(order, RoutingStatus.ASSIGNED, stage=INITIAL_STAGE, staff_id=staff_id)
    return _apply(store, order, transition, routing_fields)


def dispatch_transfer(order_id: str, dispatched_by: str, *, store: Optional[DocumentStore] = None) -> Order:
    """Mark a pending order as physically on its way to the processing branch."""
    store = store or get_document_store()
    order = get_order(store, order_id)
    transition = plan_transition(order, RoutingStatus.IN_TRANSIT)
    if not transition.changed:
        return order
    logger.info(f"Order {order_id} dispatched for transfer by {dispatched_by}")
    return _apply(
        store,
        order,
        transition,
        {
            "destination_branch_id": order.effective_processing_branch_id,
            "transferred_at": utcnow(),
        },
    )


def mark_order_received(order_id: str, received_by: str, *, store: Optional[DocumentStore] = None) -> Order:
    """Record arrival at the processing branch and start the sorting window from now."""
    store = store or get_document_store()
    order = get_order(store, order_id)
    transition = plan_transition(order, RoutingStatus.RECEIVED)
    if not transition.changed:
        return order

    branch = get_branch(store, order.effective_processing_branch_id)
    arrived_at = utcnow()
    earliest = compute_earliest_delivery_time(resolve_sorting_window_hours(branch), arrived_at)
    logger.info(f"Order {order_id} received at {branch.branch_id} by {received_by}")
    return _apply(
        store,
        order,
        transition,
        {"arrived_at_branch_at": arrived_at, "earliest_delivery_time": earliest},
    )


def assign_order_to_stage(
    order_id: str,
    stage: WorkstationStage,
    staff_id: Optional[str] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> Order:
    """Assign or reassign an order to a workstation stage, optionally to a specific staff member."""
    store = store or get_document_store()
    order = get_order(store, order_id)
    transition = plan_transition(order, RoutingStatus.ASSIGNED, stage=stage, staff_id=staff_id)
    return _apply(store, order, transition)


def auto_assign_order(order_id: str, *, store: Optional[DocumentStore] = None) -> AutoAssignment:
    """Assign using the load balancer.

    An order already waiting at a stage is re-balanced within that stage;
    anything else starts at inspection.
    """
    store = store or get_document_store()
    order = get_order(store, order_id)
    stage = INITIAL_STAGE
    if order.routing_status == RoutingStatus.ASSIGNED and order.assigned_workstation_stage is not None:
        stage = order.assigned_workstation_stage

    # Repeat calls keep the current holder unless someone else is strictly less loaded.
    staff_id = find_available_staff_for_stage(
        order.effective_processing_branch_id,
        stage,
        exclude_order_id=order.order_id,
        prefer_staff_id=order.assigned_workstation_staff_id,
        store=store,
    )
    transition = plan_transition(order, RoutingStatus.ASSIGNED, stage=stage, staff_id=staff_id)
    updated = _apply(store, order, transition)
    return AutoAssignment(stage=stage, staff_id=updated.assigned_workstation_staff_id)


def mark_order_in_processing(order_id: str, staff_id: str, *, store: Optional[DocumentStore] = None) -> Order:
    store = store or get_document_store()
    order = get_order(store, order_id)
    transition = plan_transition(order, RoutingStatus.PROCESSING, staff_id=staff_id)
    return _apply(store, order, transition)


def mark_order_processing_complete(
    order_id: str,
    completed_by: str,
    *,
    store: Optional[DocumentStore] = None,
) -> Order:
    """Finish production: ``ready_for_return`` plus a sorting window starting now."""
    store = store or get_document_store()
    order = get_order(store, order_id)
    transition = plan_transition(order, RoutingStatus.READY_FOR_RETURN)
    if not transition.changed:
        return order

    branch = get_branch(store, order.effective_processing_branch_id)
    completed_at = utcnow()
    earliest = compute_earliest_delivery_time(resolve_sorting_window_hours(branch), completed_at)
    logger.info(f"Order {order_id} processing completed by {completed_by}")
    return _apply(
        store,
        order,
        transition,
        {"sorting_completed_at": completed_at, "earliest_delivery_time": earliest},
    )


def next_stage(stage: WorkstationStage) -> Optional[WorkstationStage]:
    index = STAGE_SEQUENCE.index(stage)
    if index + 1 >= len(STAGE_SEQUENCE):
        return None
    return STAGE_SEQUENCE[index + 1]


def advance_to_next_stage(
    order_id: str,
    completed_by: str,
    *,
    store: Optional[DocumentStore] = None,
) -> Order:
    """Move a processing order to the next pipeline stage, or complete it after packaging.

    An order already waiting at a stage or ready for return has been advanced
    by an earlier request and is returned unchanged.

    Raises:
        InvalidTransitionException: If the order has not reached a workstation yet
    """
    store = store or get_document_store()
    order = get_order(store, order_id)
    if order.routing_status in (RoutingStatus.ASSIGNED, RoutingStatus.READY_FOR_RETURN):
        logger.info(
            f"Order {order_id} already advanced ({order.routing_status.value}); request from {completed_by} ignored"
        )
        return order
    # Validates the order is processing before touching the balancer.
    plan_transition(order, RoutingStatus.READY_FOR_RETURN)

    following = next_stage(order.assigned_workstation_stage)
    if following is None:
        return mark_order_processing_complete(order_id, completed_by, store=store)

    staff_id = find_available_staff_for_stage(order.effective_processing_branch_id, following, store=store)
    transition = plan_transition(order, RoutingStatus.ASSIGNED, stage=following, staff_id=staff_id)
    return _apply(store, order, transition)
