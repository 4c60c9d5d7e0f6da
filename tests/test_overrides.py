import pytest

from conftest import START, add_order
from cleanroute.data.orders_repository import get_order
from cleanroute.exceptions import NotFoundException, OverrideNotPermittedException, ValidationException
from cleanroute.models.domain import ClassificationBasis, DeliveryClassification
from cleanroute.services.classification import (
    apply_classification_override,
    record_classification,
    role_may_override,
    validate_override_request,
)
from cleanroute.services.classification.overrides import effective_classification

REASON = "Customer asked for van delivery"


@pytest.fixture
def classified(store, clock):
    add_order(store, "ORD-1", "B1", garment_types=("Shirt", "Shirt", "Suit"), total_amount=2000)
    record_classification("ORD-1", store=store)
    return store


def test_record_classification_persists_automatic_result(classified):
    order = get_order(classified, "ORD-1")

    assert order.delivery_classification == DeliveryClassification.SMALL
    assert order.classification_basis == ClassificationBasis.GARMENT_COUNT
    assert order.classification_result["estimated_weight_kg"] == 1.4


@pytest.mark.parametrize(
    "role, allowed",
    [("admin", True), ("store_manager", True), ("logistics_manager", True), ("front_desk", False), ("driver", False)],
)
def test_role_may_override(role, allowed):
    assert role_may_override(role) is allowed


def test_validate_override_rejects_same_classification_and_short_reason():
    same = validate_override_request(DeliveryClassification.SMALL, DeliveryClassification.SMALL, REASON)
    short = validate_override_request(DeliveryClassification.SMALL, DeliveryClassification.BULK, "too short")

    assert not same.valid
    assert same.details == {"current_classification": "Small"}
    assert not short.valid
    assert short.details == {"min_length": 10}
    assert validate_override_request(DeliveryClassification.SMALL, DeliveryClassification.BULK, REASON).valid


def test_override_appends_audit_record(classified, clock):
    clock.advance(minutes=30)

    record = apply_classification_override(
        "ORD-1",
        DeliveryClassification.BULK,
        may_override=True,
        override_by="mgr-1",
        override_by_name="Grace",
        reason=f"  {REASON}  ",
        store=classified,
    )

    assert record.original_classification == DeliveryClassification.SMALL
    assert record.reason == REASON
    order = get_order(classified, "ORD-1")
    assert order.delivery_classification == DeliveryClassification.BULK
    assert order.classification_basis == ClassificationBasis.MANUAL
    assert order.classification_override_by == "mgr-1"
    assert len(order.classification_overrides) == 1
    assert order.classification_overrides[0].override_at == START.replace(minute=30)
    assert order.classification_result["classification"] == "Small"


def test_second_override_keeps_history(classified):
    apply_classification_override(
        "ORD-1", DeliveryClassification.BULK, may_override=True, override_by="mgr-1", override_by_name="", reason=REASON,
        store=classified,
    )
    apply_classification_override(
        "ORD-1", DeliveryClassification.SMALL, may_override=True, override_by="mgr-2", override_by_name="", reason=REASON,
        store=classified,
    )

    order = get_order(classified, "ORD-1")
    assert [o.new_classification for o in order.classification_overrides] == [
        DeliveryClassification.BULK,
        DeliveryClassification.SMALL,
    ]
    assert order.classification_overrides[1].original_classification == DeliveryClassification.BULK
    assert effective_classification(order) == DeliveryClassification.SMALL


def test_override_without_capability_is_refused(classified):
    with pytest.raises(OverrideNotPermittedException):
        apply_classification_override(
            "ORD-1", DeliveryClassification.BULK, may_override=False, override_by="clerk", override_by_name="",
            reason=REASON, store=classified,
        )
    assert get_order(classified, "ORD-1").classification_overrides == []


def test_override_to_same_classification_is_rejected(classified):
    with pytest.raises(ValidationException) as exc_info:
        apply_classification_override(
            "ORD-1", DeliveryClassification.SMALL, may_override=True, override_by="mgr-1", override_by_name="",
            reason=REASON, store=classified,
        )
    assert exc_info.value.details["current_classification"] == "Small"
    assert get_order(classified, "ORD-1").version == 1


def test_override_with_short_reason_is_rejected(classified):
    with pytest.raises(ValidationException):
        apply_classification_override(
            "ORD-1", DeliveryClassification.BULK, may_override=True, override_by="mgr-1", override_by_name="",
            reason="   short   ", store=classified,
        )


def test_override_on_unclassified_order_classifies_first(store, clock):
    add_order(store, "ORD-2", "B1", garment_types=("Shirt",), total_amount=100)

    record = apply_classification_override(
        "ORD-2", DeliveryClassification.BULK, may_override=True, override_by="mgr-1", override_by_name="",
        reason=REASON, store=store,
    )

    assert record.original_classification == DeliveryClassification.SMALL
    assert get_order(store, "ORD-2").classification_result["classification"] == "Small"


def test_reclassifying_keeps_override_in_force(classified):
    apply_classification_override(
        "ORD-1", DeliveryClassification.BULK, may_override=True, override_by="mgr-1", override_by_name="",
        reason=REASON, store=classified,
    )

    record_classification("ORD-1", store=classified)

    assert get_order(classified, "ORD-1").delivery_classification == DeliveryClassification.BULK


def test_override_on_missing_order(store):
    with pytest.raises(NotFoundException):
        apply_classification_override(
            "NOPE", DeliveryClassification.BULK, may_override=True, override_by="mgr-1", override_by_name="",
            reason=REASON, store=store,
        )
