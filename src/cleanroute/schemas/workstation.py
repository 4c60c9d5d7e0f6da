"""Workstation request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import ConditionAssessment, WorkstationStage


class StaffAssignmentRequest(BaseModel):
    staff_id: str = Field(..., min_length=1)
    staff_name: str
    stage: WorkstationStage
    branch_id: str = Field(..., min_length=1)
    created_by: str = Field(..., min_length=1)


class WorkstationAssignmentModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assignment_id: str
    staff_id: str
    staff_name: str
    permanent_stage: WorkstationStage
    branch_id: str
    is_active: bool
    created_at: Optional[datetime] = None
    created_by: str
    updated_at: Optional[datetime] = None


class StaffWorkloadModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    staff_id: str
    staff_name: str
    open_orders: int


class StageCompletionRequest(BaseModel):
    stage: WorkstationStage
    staff_id: str = Field(..., min_length=1)
    staff_name: str
    started_at: Optional[datetime] = None


class InspectionRequest(BaseModel):
    condition: ConditionAssessment
    inspected_by: str = Field(..., min_length=1)


class StaffPerformanceModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    staff_id: str
    total_orders_processed: int
    stages_completed: Dict[str, int]
    stage_total_seconds: Dict[str, int]
    avg_time_per_stage: Dict[str, int]
    efficiency_score: float


class AssignmentListResponse(BaseModel):
    items: List[WorkstationAssignmentModel]
    count: int


class MajorIssueApprovalRequest(BaseModel):
    manager_id: str = Field(..., min_length=1)
    adjust_estimated_hours: Optional[float] = Field(default=None, description="Hours added to the estimated completion")


class MajorIssueApprovalModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_id: str
    major_issues_reviewed_by: str
    major_issues_approved_at: datetime
    estimated_completion: Optional[datetime] = None
