import pytest

from conftest import add_order
from cleanroute.models.domain import ClassificationBasis, DeliveryClassification, Garment, Order, OrderStatus
from cleanroute.services.classification import (
    ClassificationThresholds,
    classify_delivery,
    classify_measurements,
    classify_multiple_deliveries,
    estimate_garment_weight,
    get_vehicle_recommendation,
)


def _order(order_id: str, garment_types, total_amount: float) -> Order:
    return Order(
        order_id=order_id,
        branch_id="B1",
        status=OrderStatus.RECEIVED,
        garments=[Garment(garment_id=f"G{i}", type=kind) for i, kind in enumerate(garment_types)],
        total_amount=total_amount,
    )


def test_small_order_is_classified_on_garment_count():
    result = classify_delivery(_order("O1", ["Shirt", "Shirt", "Suit"], 2000))

    assert result.classification == DeliveryClassification.SMALL
    assert result.basis == ClassificationBasis.GARMENT_COUNT
    assert result.estimated_weight_kg == 1.4
    assert result.garment_count == 3


def test_high_value_order_is_bulk_on_value():
    result = classify_delivery(_order("O1", ["Shirt", "Shirt", "Suit"], 6000))

    assert result.classification == DeliveryClassification.BULK
    assert result.basis == ClassificationBasis.VALUE
    assert "exceeds threshold" in result.reason


def test_value_takes_priority_over_weight_and_count():
    result = classify_measurements(order_value=9000, estimated_weight_kg=30, garment_count=40)

    assert result.basis == ClassificationBasis.VALUE


def test_weight_takes_priority_over_count():
    result = classify_delivery(_order("O1", ["Duvet"] * 6, 1000))

    assert result.estimated_weight_kg == 18.0
    assert result.basis == ClassificationBasis.WEIGHT


def test_too_many_garments_is_bulk():
    result = classify_delivery(_order("O1", ["Tie"] * 6, 600))

    assert result.classification == DeliveryClassification.BULK
    assert result.basis == ClassificationBasis.GARMENT_COUNT


@pytest.mark.parametrize(
    "value, weight, count, expected",
    [
        (5000, 10.0, 5, DeliveryClassification.SMALL),
        (5000.01, 10.0, 5, DeliveryClassification.BULK),
        (5000, 10.01, 5, DeliveryClassification.BULK),
        (5000, 10.0, 6, DeliveryClassification.BULK),
    ],
)
def test_thresholds_are_exclusive_upper_bounds(value, weight, count, expected):
    assert classify_measurements(value, weight, count).classification == expected


def test_custom_thresholds():
    limits = ClassificationThresholds(max_value=100, max_weight_kg=1, max_garments=1)

    result = classify_measurements(50, 0.5, 2, limits)

    assert result.classification == DeliveryClassification.BULK
    assert result.basis == ClassificationBasis.GARMENT_COUNT


def test_unknown_garment_types_use_default_weight():
    garments = [Garment(garment_id="G1", type="Kimono"), Garment(garment_id="G2", type="Shirt")]

    assert estimate_garment_weight(garments) == 0.5


def test_empty_order_is_small():
    result = classify_delivery(_order("O1", [], 0))

    assert result.classification == DeliveryClassification.SMALL
    assert result.garment_count == 0
    assert result.estimated_weight_kg == 0


def test_classify_multiple_deliveries_keys_by_order_id():
    results = classify_multiple_deliveries([_order("A", ["Shirt"], 100), _order("B", ["Shirt"], 7000)])

    assert results["A"].classification == DeliveryClassification.SMALL
    assert results["B"].classification == DeliveryClassification.BULK


def test_vehicle_recommendation():
    assert get_vehicle_recommendation(DeliveryClassification.SMALL).vehicle_type == "Motorcycle"
    assert get_vehicle_recommendation(DeliveryClassification.BULK).vehicle_type == "Van"


def test_result_record_uses_plain_values():
    record = classify_delivery(_order("O1", ["Shirt"], 100)).as_record()

    assert record["classification"] == "Small"
    assert record["basis"] == "garment_count"
