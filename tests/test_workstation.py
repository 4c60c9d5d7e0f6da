from datetime import timedelta

import pytest

from conftest import START, add_order
from cleanroute.data.assignments_repository import get_assignment
from cleanroute.data.orders_repository import get_order, save_order
from cleanroute.exceptions import NotFoundException, ValidationException
from cleanroute.models.domain import (
    ConditionAssessment,
    Garment,
    Order,
    OrderStatus,
    StageHandler,
    WorkstationStage,
)
from cleanroute.services.workstation import assignments, garments, performance


def test_assignment_is_idempotent(store, clock):
    first = assignments.assign_staff_to_permanent_stage("S1", "Amina", WorkstationStage.IRONING, "B1", "admin", store=store)
    second = assignments.assign_staff_to_permanent_stage("S1", "Amina", WorkstationStage.IRONING, "B1", "admin", store=store)

    assert second.assignment_id == first.assignment_id
    assert first.assignment_id.startswith("ASSIGN-")
    assert len(assignments.get_active_staff_assignments("B1", store=store)) == 1


def test_deactivated_assignment_drops_out_of_stage_listing(store, clock):
    assignment = assignments.assign_staff_to_permanent_stage(
        "S1", "Amina", WorkstationStage.IRONING, "B1", "admin", store=store
    )
    assignments.assign_staff_to_permanent_stage("S2", "Brian", WorkstationStage.IRONING, "B1", "admin", store=store)
    clock.advance(hours=1)

    deactivated = assignments.deactivate_staff_assignment(assignment.assignment_id, store=store)

    assert not deactivated.is_active
    assert deactivated.updated_at == START + timedelta(hours=1)
    stored = get_assignment(store, assignment.assignment_id)
    assert not stored.is_active
    assert stored.updated_at == START + timedelta(hours=1)
    assert [a.staff_id for a in assignments.get_staff_by_stage(WorkstationStage.IRONING, "B1", store=store)] == ["S2"]


def test_deactivating_unknown_assignment(store):
    with pytest.raises(NotFoundException):
        assignments.deactivate_staff_assignment("ASSIGN-NOPE", store=store)


def test_stage_completion_appends_handlers_and_accumulates_duration(store, clock):
    add_order(store, "ORD-1", "B1", garment_types=("Shirt", "Suit"))

    garments.complete_stage_for_garment(
        "ORD-1", "ORD-1-G1", WorkstationStage.WASHING, "S1", "Amina", START - timedelta(minutes=10), store=store
    )
    clock.advance(minutes=5)
    garments.complete_stage_for_garment(
        "ORD-1", "ORD-1-G1", WorkstationStage.WASHING, "S2", "Brian", START, store=store
    )

    garment = get_order(store, "ORD-1").garments[0]
    assert [h.uid for h in garment.stage_handlers["washing"]] == ["S1", "S2"]
    assert garment.stage_durations == {"washing": 900}
    assert get_order(store, "ORD-1").garments[1].stage_handlers == {}


def test_stage_completion_without_start_records_no_duration(store, clock):
    add_order(store, "ORD-1", "B1")

    garment = garments.complete_stage_for_garment("ORD-1", "ORD-1-G1", WorkstationStage.DRYING, "S1", "Amina", store=store)

    assert garment.stage_durations == {}
    assert garment.stage_handlers["drying"][0].completed_at == START


def test_unknown_garment_raises_not_found(store, clock):
    add_order(store, "ORD-1", "B1")

    with pytest.raises(NotFoundException):
        garments.complete_stage_for_garment("ORD-1", "G-404", WorkstationStage.DRYING, "S1", "Amina", store=store)


def test_inspection_completion_and_major_issue_flag(store, clock):
    add_order(store, "ORD-1", "B1", garment_types=("Shirt", "Dress"))

    garments.complete_garment_inspection("ORD-1", "ORD-1-G1", ConditionAssessment.GOOD, "S1", store=store)
    assert not garments.is_order_inspection_complete("ORD-1", store=store)

    order = garments.complete_garment_inspection("ORD-1", "ORD-1-G2", ConditionAssessment.MAJOR_ISSUES, "S1", store=store)
    assert order.major_issues_detected
    assert garments.is_order_inspection_complete("ORD-1", store=store)
    stored = get_order(store, "ORD-1").garments[1]
    assert stored.condition_assessment == ConditionAssessment.MAJOR_ISSUES
    assert stored.inspection_completed_by == "S1"


def test_manager_approves_major_issue_and_pushes_estimate(store, clock):
    add_order(store, "ORD-1", "B1", garment_types=("Suit",), estimated_completion=START + timedelta(days=2))
    garments.complete_garment_inspection("ORD-1", "ORD-1-G1", ConditionAssessment.MAJOR_ISSUES, "S1", store=store)
    clock.advance(hours=1)

    approved = garments.approve_garment_with_major_issue("ORD-1", "ORD-1-G1", "M1", adjust_estimated_hours=4, store=store)

    assert approved.major_issues_reviewed_by == "M1"
    assert approved.major_issues_approved_at == START + timedelta(hours=1)
    stored = get_order(store, "ORD-1")
    assert stored.estimated_completion == START + timedelta(days=2, hours=4)
    assert stored.major_issues_approved_at == START + timedelta(hours=1)


def test_approval_without_adjustment_keeps_estimate(store, clock):
    add_order(
        store,
        "ORD-1",
        "B1",
        estimated_completion=START + timedelta(days=1),
        major_issues_detected=True,
    )

    approved = garments.approve_garment_with_major_issue("ORD-1", "ORD-1-G1", "M1", adjust_estimated_hours=0, store=store)

    assert approved.estimated_completion == START + timedelta(days=1)
    assert approved.major_issues_reviewed_by == "M1"


def test_approval_requires_a_flagged_major_issue(store, clock):
    add_order(store, "ORD-1", "B1")

    with pytest.raises(ValidationException):
        garments.approve_garment_with_major_issue("ORD-1", "ORD-1-G1", "M1", store=store)
    with pytest.raises(NotFoundException):
        garments.approve_garment_with_major_issue("ORD-1", "ORD-1-G9", "M1", store=store)


def test_orders_pending_inspection_oldest_first(store):
    add_order(store, "ORD-2", "B1", status=OrderStatus.INSPECTION, created_at=START + timedelta(hours=1))
    add_order(store, "ORD-1", "B1", status=OrderStatus.INSPECTION)
    add_order(store, "ORD-3", "B1", status=OrderStatus.WASHING)
    add_order(store, "ORD-4", "B2", status=OrderStatus.INSPECTION)

    pending = garments.get_orders_pending_inspection("B1", store=store)

    assert [order.order_id for order in pending] == ["ORD-1", "ORD-2"]
    assert [o.order_id for o in garments.get_orders_pending_inspection("B1", limit=1, store=store)] == ["ORD-1"]


def _worked_order(order_id, status, created_at, handlers_by_stage, durations):
    garment = Garment(
        garment_id=f"{order_id}-G1",
        type="Shirt",
        stage_handlers={
            stage: [StageHandler(uid=uid, name=uid, completed_at=created_at) for uid in uids]
            for stage, uids in handlers_by_stage.items()
        },
        stage_durations=durations,
    )
    return Order(order_id=order_id, branch_id="B1", status=status, garments=[garment], created_at=created_at)


def test_summarize_staff_performance():
    orders = [
        _worked_order("O1", OrderStatus.DELIVERED, START, {"washing": ["S1"], "ironing": ["S2"]}, {"washing": 1800, "ironing": 600}),
        _worked_order("O2", OrderStatus.DELIVERED, START, {"washing": ["S1"]}, {"washing": 1800}),
        _worked_order("O3", OrderStatus.DELIVERED, START, {"ironing": ["S2"]}, {"ironing": 600}),
    ]

    metrics = performance.summarize_staff_performance("S1", orders)

    assert metrics.total_orders_processed == 2
    assert metrics.stages_completed == {"washing": 2}
    assert metrics.avg_time_per_stage == {"washing": 1800}
    assert metrics.efficiency_score == 2.0


def test_staff_without_work_scores_zero():
    metrics = performance.summarize_staff_performance("S9", [])

    assert metrics.total_orders_processed == 0
    assert metrics.efficiency_score == 0.0


def test_performance_counts_completed_orders_in_range(store):
    save_order(store, _worked_order("O1", OrderStatus.DELIVERED, START, {"washing": ["S1"]}, {"washing": 3600}))
    save_order(store, _worked_order("O2", OrderStatus.COLLECTED, START + timedelta(days=2), {"washing": ["S1"]}, {"washing": 3600}))
    save_order(store, _worked_order("O3", OrderStatus.WASHING, START, {"washing": ["S1"]}, {"washing": 3600}))

    everything = performance.get_staff_performance_metrics("S1", store=store)
    in_range = performance.get_staff_performance_metrics(
        "S1", (START - timedelta(hours=1), START + timedelta(hours=1)), store=store
    )

    assert everything.total_orders_processed == 2
    assert in_range.total_orders_processed == 1
    assert in_range.efficiency_score == 1.0
