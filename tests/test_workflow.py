import pytest

from cleanroute.exceptions import InvalidTransitionException, ValidationException
from cleanroute.models.domain import Order, OrderStatus, RoutingStatus, WorkstationStage
from cleanroute.services.routing.workflow import (
    ALLOWED_TRANSITIONS,
    can_transition_to,
    plan_transition,
    validate_transition,
)


def _order(routing_status=None, status=OrderStatus.RECEIVED, stage=None, staff=None) -> Order:
    return Order(
        order_id="ORD-1",
        branch_id="B1",
        status=status,
        routing_status=routing_status,
        assigned_workstation_stage=stage,
        assigned_workstation_staff_id=staff,
    )


@pytest.mark.parametrize(
    "current, target",
    [
        (None, RoutingStatus.PENDING),
        (None, RoutingStatus.ASSIGNED),
        (RoutingStatus.PENDING, RoutingStatus.IN_TRANSIT),
        (RoutingStatus.PENDING, RoutingStatus.RECEIVED),
        (RoutingStatus.IN_TRANSIT, RoutingStatus.RECEIVED),
        (RoutingStatus.RECEIVED, RoutingStatus.ASSIGNED),
        (RoutingStatus.ASSIGNED, RoutingStatus.PROCESSING),
        (RoutingStatus.PROCESSING, RoutingStatus.ASSIGNED),
        (RoutingStatus.PROCESSING, RoutingStatus.READY_FOR_RETURN),
    ],
)
def test_allowed_transitions(current, target):
    assert can_transition_to(_order(current), target)


@pytest.mark.parametrize(
    "current, target",
    [
        (None, RoutingStatus.PROCESSING),
        (RoutingStatus.PENDING, RoutingStatus.ASSIGNED),
        (RoutingStatus.IN_TRANSIT, RoutingStatus.ASSIGNED),
        (RoutingStatus.RECEIVED, RoutingStatus.PROCESSING),
        (RoutingStatus.ASSIGNED, RoutingStatus.READY_FOR_RETURN),
        (RoutingStatus.READY_FOR_RETURN, RoutingStatus.ASSIGNED),
        (RoutingStatus.READY_FOR_RETURN, RoutingStatus.PENDING),
    ],
)
def test_rejected_transitions(current, target):
    with pytest.raises(InvalidTransitionException) as exc_info:
        validate_transition(_order(current), target)
    assert exc_info.value.details["attempted_status"] == target.value


def test_same_status_is_a_no_op_even_when_absent_from_table():
    assert RoutingStatus.IN_TRANSIT not in ALLOWED_TRANSITIONS[RoutingStatus.IN_TRANSIT]
    validate_transition(_order(RoutingStatus.IN_TRANSIT), RoutingStatus.IN_TRANSIT)


def test_ready_for_return_is_terminal():
    assert ALLOWED_TRANSITIONS[RoutingStatus.READY_FOR_RETURN] == []


def test_unrouted_order_reports_unrouted_label():
    with pytest.raises(InvalidTransitionException) as exc_info:
        validate_transition(_order(None), RoutingStatus.RECEIVED)
    assert exc_info.value.details["current_status"] == "unrouted"


def test_assignment_mirrors_stage_into_order_status():
    transition = plan_transition(_order(None), RoutingStatus.ASSIGNED, stage=WorkstationStage.INSPECTION, staff_id="S1")

    assert transition.changed
    assert transition.order_status == OrderStatus.INSPECTION
    assert transition.changes() == {
        "routing_status": RoutingStatus.ASSIGNED,
        "status": OrderStatus.INSPECTION,
        "assigned_workstation_stage": WorkstationStage.INSPECTION,
        "assigned_workstation_staff_id": "S1",
    }


def test_assignment_requires_stage():
    with pytest.raises(ValidationException):
        plan_transition(_order(RoutingStatus.RECEIVED), RoutingStatus.ASSIGNED)


def test_processing_requires_staff():
    order = _order(RoutingStatus.ASSIGNED, OrderStatus.WASHING, WorkstationStage.WASHING)
    with pytest.raises(ValidationException):
        plan_transition(order, RoutingStatus.PROCESSING)


def test_repeat_assignment_without_staff_keeps_current_holder():
    order = _order(RoutingStatus.ASSIGNED, OrderStatus.WASHING, WorkstationStage.WASHING, "S1")

    transition = plan_transition(order, RoutingStatus.ASSIGNED, stage=WorkstationStage.WASHING)

    assert transition.staff_id == "S1"
    assert not transition.changed


def test_processing_keeps_stage_and_takes_staff():
    order = _order(RoutingStatus.ASSIGNED, OrderStatus.DRYING, WorkstationStage.DRYING, None)

    transition = plan_transition(order, RoutingStatus.PROCESSING, staff_id="S2")

    assert transition.stage == WorkstationStage.DRYING
    assert transition.staff_id == "S2"
    assert transition.order_status == OrderStatus.DRYING


def test_ready_for_return_queues_for_delivery():
    order = _order(RoutingStatus.PROCESSING, OrderStatus.PACKAGING, WorkstationStage.PACKAGING, "S1")

    transition = plan_transition(order, RoutingStatus.READY_FOR_RETURN)

    assert transition.order_status == OrderStatus.QUEUED_FOR_DELIVERY


def test_received_moves_intake_orders_to_inspection():
    transition = plan_transition(_order(RoutingStatus.IN_TRANSIT, OrderStatus.QUEUED), RoutingStatus.RECEIVED)

    assert transition.order_status == OrderStatus.INSPECTION


def test_pending_keeps_order_status():
    transition = plan_transition(_order(None), RoutingStatus.PENDING)

    assert transition.order_status == OrderStatus.RECEIVED
    assert transition.stage is None
    assert transition.staff_id is None
