"""Routing request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import OrderStatus, RoutingStatus, WorkstationStage


class RouteOrderRequest(BaseModel):
    user_id: str = Field(..., min_length=1, description="UID of the user initiating the routing")


class ReceiveOrderRequest(BaseModel):
    received_by: str = Field(..., min_length=1)


class DispatchTransferRequest(BaseModel):
    dispatched_by: str = Field(..., min_length=1)


class StageAssignmentRequest(BaseModel):
    stage: WorkstationStage
    staff_id: Optional[str] = Field(default=None, description="Specific staff member; omitted leaves the stage unstaffed")


class StartProcessingRequest(BaseModel):
    staff_id: str = Field(..., min_length=1)


class CompleteProcessingRequest(BaseModel):
    completed_by: str = Field(..., min_length=1)


class OrderRoutingModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_id: str
    branch_id: str
    status: OrderStatus
    processing_branch_id: Optional[str] = None
    origin_branch_id: Optional[str] = None
    destination_branch_id: Optional[str] = None
    routing_status: Optional[RoutingStatus] = None
    assigned_workstation_stage: Optional[WorkstationStage] = None
    assigned_workstation_staff_id: Optional[str] = None
    routed_at: Optional[datetime] = None
    transferred_at: Optional[datetime] = None
    arrived_at_branch_at: Optional[datetime] = None
    sorting_completed_at: Optional[datetime] = None
    earliest_delivery_time: Optional[datetime] = None
    version: int


class AutoAssignmentModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage: WorkstationStage
    staff_id: Optional[str] = None


class RoutingMetricsModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pending_routing: int
    in_transit: int
    ready_for_return: int
    queue_by_stage: Dict[str, int]


class OrderListResponse(BaseModel):
    items: List[OrderRoutingModel]
    count: int
