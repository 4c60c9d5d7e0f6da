"""Per-garment stage completion and inspection tracking."""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from ...clock import ensure_utc, utcnow
from ...config import settings
from ...data.orders_repository import get_order, query_orders, update_order
from ...exceptions import NotFoundException, ValidationException
from ...models.domain import ConditionAssessment, Garment, Order, OrderStatus, StageHandler, WorkstationStage
from ...persistence import DocumentStore, Eq, OrderBy, get_document_store

logger = logging.getLogger(__name__)


def _find_garment(order: Order, garment_id: str) -> int:
    for index, garment in enumerate(order.garments):
        if garment.garment_id == garment_id:
            return index
    raise NotFoundException("garments", f"{order.order_id}/{garment_id}")


def complete_stage_for_garment(
    order_id: str,
    garment_id: str,
    stage: WorkstationStage,
    staff_id: str,
    staff_name: str,
    started_at: Optional[datetime] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> Garment:
    """Record that ``staff_id`` finished ``stage`` on a garment.

    Handlers are appended, never replaced, so several staff can share a stage.
    Duration in whole seconds is added to the stage total when ``started_at``
    is given.
    """
    store = store or get_document_store()
    order = get_order(store, order_id)
    index = _find_garment(order, garment_id)
    garment = order.garments[index]
    completed_at = utcnow()

    handlers = {key: list(items) for key, items in garment.stage_handlers.items()}
    handlers.setdefault(stage.value, []).append(StageHandler(uid=staff_id, name=staff_name, completed_at=completed_at))

    durations = dict(garment.stage_durations)
    if started_at is not None:
        seconds = int((completed_at - ensure_utc(started_at)).total_seconds())
        if seconds > 0:
            durations[stage.value] = durations.get(stage.value, 0) + seconds

    updated_garment = dataclasses.replace(garment, stage_handlers=handlers, stage_durations=durations)
    garments = list(order.garments)
    garments[index] = updated_garment
    update_order(store, order, {"garments": garments})
    logger.info(f"Garment {garment_id} of order {order_id} completed '{stage.value}' by {staff_id}")
    return updated_garment


def complete_garment_inspection(
    order_id: str,
    garment_id: str,
    condition: ConditionAssessment,
    inspected_by: str,
    *,
    store: Optional[DocumentStore] = None,
) -> Order:
    store = store or get_document_store()
    order = get_order(store, order_id)
    index = _find_garment(order, garment_id)

    garments = list(order.garments)
    garments[index] = dataclasses.replace(
        garments[index],
        inspection_completed=True,
        inspection_completed_by=inspected_by,
        inspection_completed_at=utcnow(),
        condition_assessment=condition,
    )
    changes: dict = {"garments": garments}
    if condition == ConditionAssessment.MAJOR_ISSUES:
        changes["major_issues_detected"] = True
        logger.warning(f"Major issues flagged on garment {garment_id} of order {order_id}")
    return update_order(store, order, changes)


def is_order_inspection_complete(order_id: str, *, store: Optional[DocumentStore] = None) -> bool:
    store = store or get_document_store()
    order = get_order(store, order_id)
    return all(garment.inspection_completed for garment in order.garments)


def approve_garment_with_major_issue(
    order_id: str,
    garment_id: str,
    manager_id: str,
    adjust_estimated_hours: Optional[float] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> Order:
    """Record a workstation manager's sign-off on a major-issue flag.

    A positive ``adjust_estimated_hours`` pushes the order's estimated
    completion back by that many hours.

    Raises:
        NotFoundException: If the order or garment does not exist
        ValidationException: If the order has no major issue flagged
    """
    store = store or get_document_store()
    order = get_order(store, order_id)
    _find_garment(order, garment_id)
    if not order.major_issues_detected:
        raise ValidationException(
            f"Order {order_id} has no major issue awaiting review",
            {"order_id": order_id, "garment_id": garment_id},
        )

    changes: dict = {"major_issues_reviewed_by": manager_id, "major_issues_approved_at": utcnow()}
    if adjust_estimated_hours and adjust_estimated_hours > 0 and order.estimated_completion is not None:
        changes["estimated_completion"] = order.estimated_completion + timedelta(hours=adjust_estimated_hours)
    logger.info(f"Major issue on garment {garment_id} of order {order_id} approved by {manager_id}")
    return update_order(store, order, changes)


def get_orders_pending_inspection(
    branch_id: str,
    limit: Optional[int] = None,
    *,
    store: Optional[DocumentStore] = None,
) -> List[Order]:
    """Orders at ``branch_id`` still in inspection, oldest first."""
    store = store or get_document_store()
    return query_orders(
        store,
        [Eq("branch_id", branch_id), Eq("status", OrderStatus.INSPECTION.value)],
        OrderBy("created_at"),
        limit if limit is not None else settings.default_query_limit,
    )
