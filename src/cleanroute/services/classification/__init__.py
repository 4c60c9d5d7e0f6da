"""Delivery classification and manager overrides."""

from .classifier import (
    ClassificationResult,
    ClassificationThresholds,
    classify_delivery,
    classify_measurements,
    classify_multiple_deliveries,
    estimate_garment_weight,
    get_vehicle_recommendation,
)
from .overrides import (
    apply_classification_override,
    record_classification,
    role_may_override,
    validate_override_request,
)

__all__ = [
    "ClassificationResult",
    "ClassificationThresholds",
    "apply_classification_override",
    "classify_delivery",
    "classify_measurements",
    "classify_multiple_deliveries",
    "estimate_garment_weight",
    "get_vehicle_recommendation",
    "record_classification",
    "role_may_override",
    "validate_override_request",
]
