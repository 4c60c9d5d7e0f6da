"""
Routing state machine.

Routing status and the customer-facing order status are always computed
together by ``plan_transition`` so that call sites never advance one
without the other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...exceptions import InvalidTransitionException, ValidationException
from ...models.domain import Order, OrderStatus, RoutingStatus, WorkstationStage

ALLOWED_TRANSITIONS: dict[Optional[RoutingStatus], list[RoutingStatus]] = {
    None: [RoutingStatus.PENDING, RoutingStatus.ASSIGNED],  # initial routing
    RoutingStatus.PENDING: [RoutingStatus.IN_TRANSIT, RoutingStatus.RECEIVED],
    RoutingStatus.IN_TRANSIT: [RoutingStatus.RECEIVED],
    RoutingStatus.RECEIVED: [RoutingStatus.ASSIGNED],
    RoutingStatus.ASSIGNED: [RoutingStatus.ASSIGNED, RoutingStatus.PROCESSING],
    RoutingStatus.PROCESSING: [RoutingStatus.PROCESSING, RoutingStatus.ASSIGNED, RoutingStatus.READY_FOR_RETURN],
    RoutingStatus.READY_FOR_RETURN: [],  # handed off to delivery
}

OPEN_ROUTING_STATUSES: tuple[RoutingStatus, ...] = (RoutingStatus.ASSIGNED, RoutingStatus.PROCESSING)

# Order statuses that still count as intake.
INTAKE_ORDER_STATUSES = frozenset({OrderStatus.RECEIVED, OrderStatus.QUEUED})


@dataclass(frozen=True, slots=True)
class RoutingTransition:
    """Target routing state plus the order status that must accompany it."""

    routing_status: RoutingStatus
    order_status: OrderStatus
    stage: Optional[WorkstationStage]
    staff_id: Optional[str]
    changed: bool

    def changes(self) -> dict:
        return {
            "routing_status": self.routing_status,
            "status": self.order_status,
            "assigned_workstation_stage": self.stage,
            "assigned_workstation_staff_id": self.staff_id,
        }


def validate_transition(order: Order, new_status: RoutingStatus) -> None:
    """
    Validate if a routing status transition is allowed.

    Raises:
        InvalidTransitionException: If transition is not allowed
    """
    current_status = order.routing_status

    if current_status == new_status:
        return  # Allow no-op transitions

    allowed_transitions = ALLOWED_TRANSITIONS.get(current_status, [])

    if new_status not in allowed_transitions:
        raise InvalidTransitionException(
            current_status=current_status.value if current_status else "unrouted",
            attempted_status=new_status.value,
        )


def can_transition_to(order: Order, new_status: RoutingStatus) -> bool:
    try:
        validate_transition(order, new_status)
        return True
    except InvalidTransitionException:
        return False


def _order_status_for(order: Order, target: RoutingStatus, stage: Optional[WorkstationStage]) -> OrderStatus:
    if target in (RoutingStatus.ASSIGNED, RoutingStatus.PROCESSING):
        # Stage names double as order statuses. The stage is mirrored whatever the
        # current status, not only from received, so reassignment keeps both in step.
        return OrderStatus(stage.value)
    if target == RoutingStatus.RECEIVED:
        return OrderStatus.INSPECTION if order.status in INTAKE_ORDER_STATUSES else order.status
    if target == RoutingStatus.READY_FOR_RETURN:
        return OrderStatus.QUEUED_FOR_DELIVERY
    return order.status


def plan_transition(
    order: Order,
    target: RoutingStatus,
    *,
    stage: Optional[WorkstationStage] = None,
    staff_id: Optional[str] = None,
) -> RoutingTransition:
    """Compute the next routing state for ``order`` without writing anything.

    Args:
        order: Order as freshly read from the store
        target: Routing status to move to
        stage: Workstation stage, required when targeting ``assigned``
        staff_id: Staff member, required when targeting ``processing``

    Raises:
        InvalidTransitionException: If the move is not in the transition table
        ValidationException: If a required stage or staff id is missing
    """
    validate_transition(order, target)

    current_stage = order.assigned_workstation_stage
    current_staff = order.assigned_workstation_staff_id

    if target == RoutingStatus.ASSIGNED:
        if stage is None:
            raise ValidationException("A workstation stage is required for assignment", {"stage": None})
        if staff_id is None and stage == current_stage and order.routing_status == RoutingStatus.ASSIGNED:
            # Repeated request for the active stage keeps whoever already holds it.
            staff_id = current_staff
        next_stage, next_staff = stage, staff_id
    elif target == RoutingStatus.PROCESSING:
        if not staff_id:
            raise ValidationException("A staff id is required to start processing", {"staff_id": None})
        if current_stage is None:
            raise ValidationException("Order has no workstation stage to process", {"stage": None})
        next_stage, next_staff = current_stage, staff_id
    else:
        next_stage, next_staff = current_stage, current_staff

    order_status = _order_status_for(order, target, next_stage)
    changed = (
        order.routing_status != target
        or next_stage != current_stage
        or next_staff != current_staff
        or order_status != order.status
    )
    return RoutingTransition(
        routing_status=target,
        order_status=order_status,
        stage=next_stage,
        staff_id=next_staff,
        changed=changed,
    )
