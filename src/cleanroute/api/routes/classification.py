"""Delivery classification endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...data.orders_repository import get_order
from ...exceptions import BusinessException
from ...persistence import get_document_store
from ...schemas.classification import (
    ClassificationModel,
    ClassificationResponse,
    OverrideRecordModel,
    OverrideRequest,
    VehicleRecommendationModel,
)
from ...services.classification import (
    ClassificationResult,
    apply_classification_override,
    classify_delivery,
    get_vehicle_recommendation,
    record_classification,
    role_may_override,
)
from ..errors import http_error, internal_error

router = APIRouter(prefix="/classification", tags=["classification"])


def _response(order_id: str, result: ClassificationResult) -> ClassificationResponse:
    return ClassificationResponse(
        order_id=order_id,
        result=ClassificationModel.model_validate(result),
        vehicle=VehicleRecommendationModel.model_validate(get_vehicle_recommendation(result.classification)),
    )


@router.get("/orders/{order_id}", response_model=ClassificationResponse)
def preview_classification(order_id: str) -> ClassificationResponse:
    """Classify without persisting anything."""
    try:
        result = classify_delivery(get_order(get_document_store(), order_id))
    except BusinessException as exc:
        raise http_error(exc) from exc
    return _response(order_id, result)


@router.post("/orders/{order_id}", response_model=ClassificationResponse)
def classify_order(order_id: str) -> ClassificationResponse:
    try:
        result = record_classification(order_id, store=get_document_store())
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"classify order {order_id}", exc) from exc
    return _response(order_id, result)


@router.post("/orders/{order_id}/override", response_model=OverrideRecordModel, status_code=status.HTTP_201_CREATED)
def override_classification(order_id: str, payload: OverrideRequest) -> OverrideRecordModel:
    try:
        record = apply_classification_override(
            order_id,
            payload.new_classification,
            may_override=role_may_override(payload.role),
            override_by=payload.user_id,
            override_by_name=payload.user_name,
            reason=payload.reason,
            store=get_document_store(),
        )
    except BusinessException as exc:
        raise http_error(exc) from exc
    except Exception as exc:
        raise internal_error(f"override classification for order {order_id}", exc) from exc
    return OverrideRecordModel.model_validate(record)
