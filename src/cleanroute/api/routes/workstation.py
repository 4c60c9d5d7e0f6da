"""Workstation staffing and garment progress endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Query, status

from ...exceptions import BusinessException
from ...models.domain import WorkstationStage
from ...persistence import get_document_store
from ...schemas.routing import OrderListResponse, OrderRoutingModel
from ...schemas.workstation import (
    AssignmentListResponse,
    InspectionRequest,
    MajorIssueApprovalModel,
    MajorIssueApprovalRequest,
    StaffAssignmentRequest,
    StaffPerformanceModel,
    StaffWorkloadModel,
    StageCompletionRequest,
    WorkstationAssignmentModel,
)
from ...services.workstation import assignments, balancer, garments, performance
from ..errors import http_error, internal_error

router = APIRouter(prefix="/workstation", tags=["workstation"])


@router.post("/assignments", response_model=WorkstationAssignmentModel, status_code=status.HTTP_201_CREATED)
def create_assignment(payload: StaffAssignmentRequest) -> WorkstationAssignmentModel:
    """Bind a staff member to a permanent stage. Repeating the request returns the existing binding."""
    try:
        assignment = assignments.assign_staff_to_permanent_stage(
            payload.staff_id,
            payload.staff_name,
            payload.stage,
            payload.branch_id,
            payload.created_by,
            store=get_document_store(),
        )
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"assign staff {payload.staff_id}", exc) from exc
    return WorkstationAssignmentModel.model_validate(assignment)


@router.post("/assignments/{assignment_id}/deactivate", response_model=WorkstationAssignmentModel)
def deactivate_assignment(assignment_id: str) -> WorkstationAssignmentModel:
    try:
        assignment = assignments.deactivate_staff_assignment(assignment_id, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"deactivate assignment {assignment_id}", exc) from exc
    return WorkstationAssignmentModel.model_validate(assignment)


@router.get("/branches/{branch_id}/assignments", response_model=AssignmentListResponse)
def active_assignments(branch_id: str) -> AssignmentListResponse:
    try:
        found = assignments.get_active_staff_assignments(branch_id, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    items = [WorkstationAssignmentModel.model_validate(assignment) for assignment in found]
    return AssignmentListResponse(items=items, count=len(items))


@router.get("/branches/{branch_id}/stages/{stage}/workloads", response_model=List[StaffWorkloadModel])
def stage_workloads(branch_id: str, stage: WorkstationStage) -> List[StaffWorkloadModel]:
    try:
        workloads = balancer.get_stage_workloads(branch_id, stage, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    return [StaffWorkloadModel.model_validate(workload) for workload in workloads]


@router.post("/orders/{order_id}/garments/{garment_id}/complete-stage")
def complete_stage(order_id: str, garment_id: str, payload: StageCompletionRequest) -> dict:
    try:
        garments.complete_stage_for_garment(
            order_id,
            garment_id,
            payload.stage,
            payload.staff_id,
            payload.staff_name,
            payload.started_at,
            store=get_document_store(),
        )
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"complete stage for garment {garment_id}", exc) from exc
    return {"success": True, "order_id": order_id, "garment_id": garment_id, "stage": payload.stage.value}


@router.post("/orders/{order_id}/garments/{garment_id}/inspection")
def complete_inspection(order_id: str, garment_id: str, payload: InspectionRequest) -> dict:
    try:
        store = get_document_store()
        garments.complete_garment_inspection(order_id, garment_id, payload.condition, payload.inspected_by, store=store)
        inspection_complete = garments.is_order_inspection_complete(order_id, store=store)
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"inspect garment {garment_id}", exc) from exc
    return {"success": True, "inspection_complete": inspection_complete}


@router.post("/orders/{order_id}/garments/{garment_id}/approve-major-issue", response_model=MajorIssueApprovalModel)
def approve_major_issue(order_id: str, garment_id: str, payload: MajorIssueApprovalRequest) -> MajorIssueApprovalModel:
    try:
        order = garments.approve_garment_with_major_issue(
            order_id,
            garment_id,
            payload.manager_id,
            payload.adjust_estimated_hours,
            store=get_document_store(),
        )
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"approve major issue on garment {garment_id}", exc) from exc
    return MajorIssueApprovalModel.model_validate(order)


@router.get("/branches/{branch_id}/pending-inspection", response_model=OrderListResponse)
def pending_inspection(branch_id: str, limit: Optional[int] = Query(default=None, ge=1)) -> OrderListResponse:
    """Orders still in inspection at a branch, oldest first."""
    try:
        orders = garments.get_orders_pending_inspection(branch_id, limit, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    items = [OrderRoutingModel.model_validate(order) for order in orders]
    return OrderListResponse(items=items, count=len(items))


@router.get("/staff/{staff_id}/performance", response_model=StaffPerformanceModel)
def staff_performance(
    staff_id: str,
    start: Optional[datetime] = Query(default=None),
    end: Optional[datetime] = Query(default=None),
) -> StaffPerformanceModel:
    date_range = (start, end) if start is not None and end is not None else None
    try:
        metrics = performance.get_staff_performance_metrics(staff_id, date_range, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    return StaffPerformanceModel.model_validate(metrics)
