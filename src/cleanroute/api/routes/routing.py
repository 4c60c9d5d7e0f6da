"""Order routing endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from ...exceptions import BusinessException
from ...models.domain import Order, WorkstationStage
from ...persistence import get_document_store
from ...schemas.routing import (
    AutoAssignmentModel,
    CompleteProcessingRequest,
    DispatchTransferRequest,
    OrderListResponse,
    OrderRoutingModel,
    ReceiveOrderRequest,
    RouteOrderRequest,
    RoutingMetricsModel,
    StageAssignmentRequest,
    StartProcessingRequest,
)
from ...services.routing import queries, service
from ..errors import http_error, internal_error

router = APIRouter(prefix="/routing", tags=["routing"])


def _order_list(orders: List[Order]) -> OrderListResponse:
    items = [OrderRoutingModel.model_validate(order) for order in orders]
    return OrderListResponse(items=items, count=len(items))


@router.post("/orders/{order_id}/route", response_model=OrderRoutingModel, status_code=status.HTTP_200_OK)
def route_order(order_id: str, payload: RouteOrderRequest) -> OrderRoutingModel:
    try:
        order = service.route_order(order_id, payload.user_id, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"route order {order_id}", exc) from exc
    return OrderRoutingModel.model_validate(order)


@router.post("/orders/{order_id}/dispatch", response_model=OrderRoutingModel)
def dispatch_transfer(order_id: str, payload: DispatchTransferRequest) -> OrderRoutingModel:
    try:
        order = service.dispatch_transfer(order_id, payload.dispatched_by, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"dispatch order {order_id}", exc) from exc
    return OrderRoutingModel.model_validate(order)


@router.post("/orders/{order_id}/receive", response_model=OrderRoutingModel)
def receive_order(order_id: str, payload: ReceiveOrderRequest) -> OrderRoutingModel:
    try:
        order = service.mark_order_received(order_id, payload.received_by, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"receive order {order_id}", exc) from exc
    return OrderRoutingModel.model_validate(order)


@router.post("/orders/{order_id}/assign", response_model=OrderRoutingModel)
def assign_stage(order_id: str, payload: StageAssignmentRequest) -> OrderRoutingModel:
    try:
        order = service.assign_order_to_stage(order_id, payload.stage, payload.staff_id, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"assign order {order_id}", exc) from exc
    return OrderRoutingModel.model_validate(order)


@router.post("/orders/{order_id}/auto-assign", response_model=AutoAssignmentModel)
def auto_assign(order_id: str) -> AutoAssignmentModel:
    """Assign using the load balancer; ``staff_id`` is null when nobody covers the stage."""
    try:
        assignment = service.auto_assign_order(order_id, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"auto-assign order {order_id}", exc) from exc
    return AutoAssignmentModel.model_validate(assignment)


@router.post("/orders/{order_id}/start", response_model=OrderRoutingModel)
def start_processing(order_id: str, payload: StartProcessingRequest) -> OrderRoutingModel:
    try:
        order = service.mark_order_in_processing(order_id, payload.staff_id, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"start processing order {order_id}", exc) from exc
    return OrderRoutingModel.model_validate(order)


@router.post("/orders/{order_id}/advance", response_model=OrderRoutingModel)
def advance_stage(order_id: str, payload: CompleteProcessingRequest) -> OrderRoutingModel:
    try:
        order = service.advance_to_next_stage(order_id, payload.completed_by, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"advance order {order_id}", exc) from exc
    return OrderRoutingModel.model_validate(order)


@router.post("/orders/{order_id}/complete", response_model=OrderRoutingModel)
def complete_processing(order_id: str, payload: CompleteProcessingRequest) -> OrderRoutingModel:
    try:
        order = service.mark_order_processing_complete(order_id, payload.completed_by, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"complete processing for order {order_id}", exc) from exc
    return OrderRoutingModel.model_validate(order)


@router.get("/branches/{branch_id}/pending", response_model=OrderListResponse)
def pending_routing(branch_id: str, limit: Optional[int] = Query(default=None, ge=1)) -> OrderListResponse:
    try:
        return _order_list(queries.get_orders_pending_routing(branch_id, limit, store=get_document_store()))
    except BusinessException as exc:
        raise http_error(exc) from exc


@router.get("/branches/{branch_id}/in-transit", response_model=OrderListResponse)
def in_transit(branch_id: str, limit: Optional[int] = Query(default=None, ge=1)) -> OrderListResponse:
    try:
        return _order_list(queries.get_orders_in_transit(branch_id, limit, store=get_document_store()))
    except BusinessException as exc:
        raise http_error(exc) from exc


@router.get("/branches/{branch_id}/stages/{stage}", response_model=OrderListResponse)
def orders_by_stage(
    branch_id: str,
    stage: WorkstationStage,
    limit: Optional[int] = Query(default=None, ge=1),
) -> OrderListResponse:
    try:
        orders = queries.get_orders_by_workstation_stage(branch_id, stage, limit, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    return _order_list(orders)


@router.get("/branches/{branch_id}/ready-for-return", response_model=OrderListResponse)
def ready_for_return(branch_id: str, limit: Optional[int] = Query(default=None, ge=1)) -> OrderListResponse:
    try:
        return _order_list(queries.get_orders_ready_for_return(branch_id, limit, store=get_document_store()))
    except BusinessException as exc:
        raise http_error(exc) from exc


@router.get("/branches/{branch_id}/queue-depth")
def queue_depth(branch_id: str) -> dict:
    try:
        return queries.get_workstation_queue_depth(branch_id, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc


@router.get("/branches/{branch_id}/metrics", response_model=RoutingMetricsModel)
def routing_metrics(branch_id: str) -> RoutingMetricsModel:
    try:
        metrics = queries.get_routing_metrics(branch_id, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    return RoutingMetricsModel.model_validate(metrics)


@router.get("/staff/{staff_id}/orders", response_model=OrderListResponse)
def staff_orders(staff_id: str, limit: Optional[int] = Query(default=None, ge=1)) -> OrderListResponse:
    try:
        return _order_list(queries.get_orders_assigned_to_staff(staff_id, limit, store=get_document_store()))
    except BusinessException as exc:
        raise http_error(exc) from exc
