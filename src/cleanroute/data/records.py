"""Conversion between stored documents and domain dataclasses."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from ..clock import ensure_utc
from ..models.domain import (
    Branch,
    BranchType,
    ClassificationBasis,
    ClassificationOverride,
    ConditionAssessment,
    DeliveryClassification,
    Garment,
    Order,
    OrderStatus,
    RoutingStatus,
    StageHandler,
    WorkstationAssignment,
    WorkstationStage,
)


def to_record_value(value: Any) -> Any:
    """Convert a domain value into its JSON-compatible stored form."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return ensure_utc(value).isoformat(timespec="microseconds")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_record_value(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(key): to_record_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_record_value(item) for item in value]
    return value


def to_record(entity: Any, id_field: str) -> dict[str, Any]:
    record = to_record_value(entity)
    record["id"] = getattr(entity, id_field)
    return record


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    try:
        return ensure_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except ValueError as exc:
        raise ValueError(f"Unable to parse timestamp from value '{value}'") from exc


def _parse_enum(enum_type, value: Any):
    if value is None or value == "":
        return None
    return enum_type(value)


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _stage_handler_from_record(record: Mapping[str, Any]) -> StageHandler:
    return StageHandler(
        uid=record["uid"],
        name=record.get("name") or "",
        completed_at=_parse_datetime(record.get("completed_at")),
    )


def garment_from_record(record: Mapping[str, Any]) -> Garment:
    handlers = record.get("stage_handlers") or {}
    return Garment(
        garment_id=record["garment_id"],
        type=record.get("type") or "Other",
        stage_handlers={
            stage: [_stage_handler_from_record(item) for item in items or []]
            for stage, items in handlers.items()
        },
        stage_durations={stage: int(seconds) for stage, seconds in (record.get("stage_durations") or {}).items()},
        inspection_completed=bool(record.get("inspection_completed", False)),
        inspection_completed_by=record.get("inspection_completed_by"),
        inspection_completed_at=_parse_datetime(record.get("inspection_completed_at")),
        condition_assessment=_parse_enum(ConditionAssessment, record.get("condition_assessment")),
    )


def _override_from_record(record: Mapping[str, Any]) -> ClassificationOverride:
    return ClassificationOverride(
        original_classification=DeliveryClassification(record["original_classification"]),
        new_classification=DeliveryClassification(record["new_classification"]),
        override_by=record["override_by"],
        override_by_name=record.get("override_by_name") or "",
        reason=record["reason"],
        override_at=_parse_datetime(record.get("override_at")),
    )


def order_from_record(record: Mapping[str, Any]) -> Order:
    return Order(
        order_id=record.get("order_id") or record["id"],
        branch_id=record["branch_id"],
        status=OrderStatus(record.get("status") or OrderStatus.RECEIVED.value),
        garments=[garment_from_record(item) for item in record.get("garments") or []],
        total_amount=_coerce_float(record.get("total_amount")) or 0.0,
        created_at=_parse_datetime(record.get("created_at")),
        processing_branch_id=record.get("processing_branch_id"),
        origin_branch_id=record.get("origin_branch_id"),
        destination_branch_id=record.get("destination_branch_id"),
        routing_status=_parse_enum(RoutingStatus, record.get("routing_status")),
        assigned_workstation_stage=_parse_enum(WorkstationStage, record.get("assigned_workstation_stage")),
        assigned_workstation_staff_id=record.get("assigned_workstation_staff_id"),
        routed_at=_parse_datetime(record.get("routed_at")),
        transferred_at=_parse_datetime(record.get("transferred_at")),
        arrived_at_branch_at=_parse_datetime(record.get("arrived_at_branch_at")),
        sorting_completed_at=_parse_datetime(record.get("sorting_completed_at")),
        earliest_delivery_time=_parse_datetime(record.get("earliest_delivery_time")),
        delivery_classification=_parse_enum(DeliveryClassification, record.get("delivery_classification")),
        classification_basis=_parse_enum(ClassificationBasis, record.get("classification_basis")),
        classification_result=record.get("classification_result"),
        classification_override_by=record.get("classification_override_by"),
        classification_overrides=[_override_from_record(item) for item in record.get("classification_overrides") or []],
        estimated_completion=_parse_datetime(record.get("estimated_completion")),
        major_issues_detected=bool(record.get("major_issues_detected", False)),
        major_issues_reviewed_by=record.get("major_issues_reviewed_by"),
        major_issues_approved_at=_parse_datetime(record.get("major_issues_approved_at")),
        version=int(record.get("version") or 0),
    )


def branch_from_record(record: Mapping[str, Any]) -> Branch:
    return Branch(
        branch_id=record.get("branch_id") or record["id"],
        name=record.get("name") or "",
        branch_type=BranchType(record.get("branch_type") or BranchType.MAIN.value),
        main_store_id=record.get("main_store_id") or None,
        sorting_window_hours=_coerce_float(record.get("sorting_window_hours")),
        active=bool(record.get("active", True)),
    )


def assignment_from_record(record: Mapping[str, Any]) -> WorkstationAssignment:
    return WorkstationAssignment(
        assignment_id=record.get("assignment_id") or record["id"],
        staff_id=record["staff_id"],
        staff_name=record.get("staff_name") or "",
        permanent_stage=WorkstationStage(record["permanent_stage"]),
        branch_id=record["branch_id"],
        is_active=bool(record.get("is_active", True)),
        created_at=_parse_datetime(record.get("created_at")),
        created_by=record.get("created_by") or "",
        updated_at=_parse_datetime(record.get("updated_at")),
    )
