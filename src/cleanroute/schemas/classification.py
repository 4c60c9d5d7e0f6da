"""Delivery classification schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import ClassificationBasis, DeliveryClassification


class ClassificationModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    classification: DeliveryClassification
    basis: ClassificationBasis
    garment_count: int
    estimated_weight_kg: float
    order_value: float
    reason: str


class VehicleRecommendationModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    vehicle_type: str
    description: str
    max_capacity: str


class ClassificationResponse(BaseModel):
    order_id: str
    result: ClassificationModel
    vehicle: VehicleRecommendationModel


class OverrideRequest(BaseModel):
    new_classification: DeliveryClassification
    user_id: str = Field(..., min_length=1)
    user_name: str = ""
    role: str = Field(..., description="Caller role; mapped to the override capability flag")
    reason: str


class OverrideRecordModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    original_classification: DeliveryClassification
    new_classification: DeliveryClassification
    override_by: str
    override_by_name: str
    reason: str
    override_at: datetime
