"""Workstation assignment lookups and writes."""

from __future__ import annotations

import dataclasses
from typing import Any, Optional, Sequence

from ..exceptions import NotFoundException
from ..models.domain import WorkstationAssignment
from ..persistence import WORKSTATION_ASSIGNMENTS, DocumentStore, Filter, OrderBy
from .records import assignment_from_record, to_record, to_record_value


def get_assignment(store: DocumentStore, assignment_id: str) -> WorkstationAssignment:
    record = store.get(WORKSTATION_ASSIGNMENTS, assignment_id)
    if record is None:
        raise NotFoundException(WORKSTATION_ASSIGNMENTS, assignment_id)
    return assignment_from_record(record)


def save_assignment(store: DocumentStore, assignment: WorkstationAssignment) -> None:
    store.set(WORKSTATION_ASSIGNMENTS, assignment.assignment_id, to_record(assignment, "assignment_id"))


def update_assignment(
    store: DocumentStore,
    assignment: WorkstationAssignment,
    changes: dict[str, Any],
) -> WorkstationAssignment:
    """Write ``changes`` (keyed by attribute name) and return the updated assignment."""
    fields = {name: to_record_value(value) for name, value in changes.items()}
    store.update(WORKSTATION_ASSIGNMENTS, assignment.assignment_id, fields)
    return dataclasses.replace(assignment, **changes)


def query_assignments(
    store: DocumentStore,
    filters: Sequence[Filter],
    order_by: Optional[OrderBy] = None,
    limit: Optional[int] = None,
) -> list[WorkstationAssignment]:
    records = store.query(WORKSTATION_ASSIGNMENTS, filters, order_by, limit)
    return [assignment_from_record(record) for record in records]
