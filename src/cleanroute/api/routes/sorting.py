"""Sorting window endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from ...exceptions import BusinessException
from ...persistence import get_document_store
from ...schemas.routing import OrderListResponse, OrderRoutingModel
from ...schemas.sorting import ScheduleValidationModel, ScheduleValidationRequest, SortingWindowModel
from ...services.sorting import service
from ..errors import http_error, internal_error

router = APIRouter(prefix="/sorting", tags=["sorting"])


@router.post("/orders/{order_id}/validate-schedule", response_model=ScheduleValidationModel)
def validate_schedule(order_id: str, payload: ScheduleValidationRequest) -> ScheduleValidationModel:
    """A rejected schedule is a 200 with ``valid`` false and the earliest permissible time."""
    try:
        result = service.validate_delivery_schedule(order_id, payload.scheduled_time, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    return ScheduleValidationModel.model_validate(result)


@router.post("/orders/{order_id}/complete", response_model=OrderRoutingModel)
def complete_sorting(order_id: str) -> OrderRoutingModel:
    try:
        order = service.complete_sorting(order_id, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"complete sorting for order {order_id}", exc) from exc
    return OrderRoutingModel.model_validate(order)


@router.get("/orders/{order_id}/window", response_model=SortingWindowModel)
def sorting_window(order_id: str) -> SortingWindowModel:
    try:
        window = service.get_sorting_window_remaining(order_id, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    return SortingWindowModel.model_validate(window)


@router.get("/branches/{branch_id}/pending", response_model=OrderListResponse)
def pending_sorting(branch_id: str, limit: Optional[int] = Query(default=None, ge=1)) -> OrderListResponse:
    try:
        orders = service.get_orders_pending_sorting(branch_id, limit, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    items = [OrderRoutingModel.model_validate(order) for order in orders]
    return OrderListResponse(items=items, count=len(items))


@router.get("/branches/{branch_id}/expiring", response_model=OrderListResponse)
def expiring_windows(
    branch_id: str,
    hours: Optional[float] = Query(default=None, gt=0),
    limit: Optional[int] = Query(default=None, ge=1),
) -> OrderListResponse:
    try:
        orders = service.get_orders_with_expiring_sorting_window(branch_id, hours, limit, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    items = [OrderRoutingModel.model_validate(order) for order in orders]
    return OrderListResponse(items=items, count=len(items))
