"""Delivery classification: Small (motorcycle) or Bulk (van).

Rules are evaluated in priority order and the first match wins:

1. order value above the value ceiling  -> Bulk, basis ``value``
2. estimated weight above the weight ceiling -> Bulk, basis ``weight``
3. garment count above the count ceiling -> Bulk, basis ``garment_count``
4. otherwise -> Small, basis ``garment_count``
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence

from ...config import settings
from ...models.domain import ClassificationBasis, DeliveryClassification, Garment, Order

# Average weight per garment type in kg.
GARMENT_WEIGHT_ESTIMATES: Dict[str, float] = {
    # Light items
    "Shirt": 0.2,
    "Blouse": 0.15,
    "T-Shirt": 0.15,
    "Tie": 0.05,
    "Scarf": 0.1,
    "Handkerchief": 0.02,
    # Medium items
    "Pants": 0.4,
    "Trousers": 0.4,
    "Skirt": 0.3,
    "Dress": 0.4,
    "Shorts": 0.25,
    # Heavy items
    "Jacket": 0.8,
    "Coat": 1.2,
    "Suit": 1.0,
    "Blazer": 0.7,
    "Sweater": 0.5,
    # Household items
    "Bedding": 2.0,
    "Curtains": 1.5,
    "Blanket": 2.5,
    "Duvet": 3.0,
    "Pillow": 0.5,
}
DEFAULT_GARMENT_WEIGHT_KG = 0.3


@dataclass(frozen=True, slots=True)
class ClassificationThresholds:
    """Upper bounds (inclusive) for a Small delivery."""

    max_value: float
    max_weight_kg: float
    max_garments: int

    @classmethod
    def from_settings(cls) -> "ClassificationThresholds":
        return cls(
            max_value=settings.classification_max_value,
            max_weight_kg=settings.classification_max_weight_kg,
            max_garments=settings.classification_max_garments,
        )


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    classification: DeliveryClassification
    basis: ClassificationBasis
    garment_count: int
    estimated_weight_kg: float
    order_value: float
    reason: str

    def as_record(self) -> dict:
        return {
            "classification": self.classification.value,
            "basis": self.basis.value,
            "garment_count": self.garment_count,
            "estimated_weight_kg": self.estimated_weight_kg,
            "order_value": self.order_value,
            "reason": self.reason,
        }


@dataclass(frozen=True, slots=True)
class VehicleRecommendation:
    vehicle_type: str
    description: str
    max_capacity: str


def estimate_garment_weight(garments: Iterable[Garment]) -> float:
    """Sum of per-type average weights, rounded to two decimals."""
    total = sum(
        GARMENT_WEIGHT_ESTIMATES.get(garment.type or "Other", DEFAULT_GARMENT_WEIGHT_KG)
        for garment in garments
    )
    return round(total, 2)


def classify_measurements(
    order_value: float,
    estimated_weight_kg: float,
    garment_count: int,
    thresholds: Optional[ClassificationThresholds] = None,
) -> ClassificationResult:
    """Classify from raw measurements. Deterministic for a fixed set of thresholds."""
    limits = thresholds or ClassificationThresholds.from_settings()

    def result(classification: DeliveryClassification, basis: ClassificationBasis, reason: str) -> ClassificationResult:
        return ClassificationResult(
            classification=classification,
            basis=basis,
            garment_count=garment_count,
            estimated_weight_kg=estimated_weight_kg,
            order_value=order_value,
            reason=reason,
        )

    if order_value > limits.max_value:
        return result(
            DeliveryClassification.BULK,
            ClassificationBasis.VALUE,
            f"Order value (KES {order_value:,.0f}) exceeds threshold of KES {limits.max_value:,.0f}",
        )

    if estimated_weight_kg > limits.max_weight_kg:
        return result(
            DeliveryClassification.BULK,
            ClassificationBasis.WEIGHT,
            f"Estimated weight ({estimated_weight_kg:g}kg) exceeds threshold of {limits.max_weight_kg:g}kg",
        )

    if garment_count > limits.max_garments:
        return result(
            DeliveryClassification.BULK,
            ClassificationBasis.GARMENT_COUNT,
            f"Garment count ({garment_count}) exceeds threshold of {limits.max_garments}",
        )

    return result(
        DeliveryClassification.SMALL,
        ClassificationBasis.GARMENT_COUNT,
        f"Order meets Small delivery criteria: {garment_count} garments, "
        f"{estimated_weight_kg:g}kg estimated, KES {order_value:,.0f} value",
    )


def classify_delivery(order: Order, thresholds: Optional[ClassificationThresholds] = None) -> ClassificationResult:
    return classify_measurements(
        order_value=order.total_amount or 0.0,
        estimated_weight_kg=estimate_garment_weight(order.garments),
        garment_count=len(order.garments),
        thresholds=thresholds,
    )


def classify_multiple_deliveries(
    orders: Sequence[Order],
    thresholds: Optional[ClassificationThresholds] = None,
) -> Dict[str, ClassificationResult]:
    limits = thresholds or ClassificationThresholds.from_settings()
    return {order.order_id: classify_delivery(order, limits) for order in orders}


def get_vehicle_recommendation(classification: DeliveryClassification) -> VehicleRecommendation:
    if classification == DeliveryClassification.SMALL:
        return VehicleRecommendation(
            vehicle_type="Motorcycle",
            description="Suitable for quick, single-order deliveries",
            max_capacity="5 garments or 10kg",
        )
    return VehicleRecommendation(
        vehicle_type="Van",
        description="Required for large orders or multiple deliveries",
        max_capacity="50+ garments or 100kg",
    )
