"""Recording automatic classifications and applying manager overrides."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from ...clock import utcnow
from ...config import settings
from ...data.orders_repository import get_order, update_order
from ...exceptions import OverrideNotPermittedException, ValidationException
from ...models.domain import ClassificationBasis, ClassificationOverride, DeliveryClassification, Order
from ...persistence import DocumentStore, get_document_store
from .classifier import ClassificationResult, classify_delivery

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OverrideValidation:
    valid: bool
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


def role_may_override(role: str, allowed_roles: Optional[Sequence[str]] = None) -> bool:
    """Map a role name to the override capability flag the core consumes."""
    roles = allowed_roles if allowed_roles is not None else settings.override_roles
    return role in roles


def validate_override_request(
    current: DeliveryClassification,
    new: DeliveryClassification,
    reason: str,
    min_length: Optional[int] = None,
) -> OverrideValidation:
    minimum = min_length if min_length is not None else settings.override_min_reason_length
    if current == new:
        return OverrideValidation(
            valid=False,
            error="New classification must be different from current classification",
            details={"current_classification": current.value},
        )
    if not reason or len(reason.strip()) < minimum:
        return OverrideValidation(
            valid=False,
            error=f"Override reason must be at least {minimum} characters",
            details={"min_length": minimum},
        )
    return OverrideValidation(valid=True)


def record_classification(order_id: str, *, store: Optional[DocumentStore] = None) -> ClassificationResult:
    """Classify an order and store the automatic result.

    When an override is in force the effective classification is left alone;
    only the automatic result is refreshed.
    """
    store = store or get_document_store()
    order = get_order(store, order_id)
    result = classify_delivery(order)
    changes: dict = {"classification_result": result.as_record()}
    if not order.classification_overrides:
        changes["delivery_classification"] = result.classification
        changes["classification_basis"] = result.basis
    update_order(store, order, changes)
    logger.info(f"Order {order_id} classified {result.classification.value} ({result.basis.value})")
    return result


def effective_classification(order: Order) -> Optional[DeliveryClassification]:
    if order.classification_overrides:
        return order.classification_overrides[-1].new_classification
    return order.delivery_classification


def apply_classification_override(
    order_id: str,
    new_classification: DeliveryClassification,
    *,
    may_override: bool,
    override_by: str,
    override_by_name: str,
    reason: str,
    store: Optional[DocumentStore] = None,
) -> ClassificationOverride:
    """Replace an order's classification with a manager decision.

    Appends exactly one audit record; earlier records and the automatic result
    are kept.

    Raises:
        OverrideNotPermittedException: If ``may_override`` is false
        ValidationException: If the target equals the current classification
            or the reason is too short
    """
    if not may_override:
        logger.warning(f"Override on order {order_id} refused for {override_by}: not permitted")
        raise OverrideNotPermittedException(override_by)

    store = store or get_document_store()
    order = get_order(store, order_id)
    changes: dict = {}

    current = effective_classification(order)
    if current is None:
        automatic = classify_delivery(order)
        current = automatic.classification
        changes["classification_result"] = automatic.as_record()

    validation = validate_override_request(current, new_classification, reason)
    if not validation.valid:
        logger.warning(f"Override on order {order_id} rejected: {validation.error}")
        raise ValidationException(validation.error, validation.details)

    record = ClassificationOverride(
        original_classification=current,
        new_classification=new_classification,
        override_by=override_by,
        override_by_name=override_by_name,
        reason=reason.strip(),
        override_at=utcnow(),
    )
    changes.update(
        {
            "delivery_classification": new_classification,
            "classification_basis": ClassificationBasis.MANUAL,
            "classification_override_by": override_by,
            "classification_overrides": [*order.classification_overrides, record],
        }
    )
    update_order(store, order, changes)
    logger.info(
        f"Order {order_id} classification overridden {current.value} -> {new_classification.value} by {override_by}"
    )
    return record
