"""Permanent staff-to-stage assignments."""

from __future__ import annotations

import logging
import time
import uuid
from typing import List, Optional

from ...clock import utcnow
from ...data.assignments_repository import get_assignment, query_assignments, save_assignment, update_assignment
from ...models.domain import WorkstationAssignment, WorkstationStage
from ...persistence import DocumentStore, Eq, OrderBy, get_document_store

logger = logging.getLogger(__name__)


def generate_assignment_id() -> str:
    return f"ASSIGN-{int(time.time() * 1000)}-{uuid.uuid4().hex[:7]}".upper()


def assign_staff_to_permanent_stage(
    staff_id: str,
    staff_name: str,
    stage: WorkstationStage,
    branch_id: str,
    created_by: str,
    *,
    store: Optional[DocumentStore] = None,
) -> WorkstationAssignment:
    """Bind a staff member to a stage at a branch.

    Re-assigning the same staff/stage/branch returns the existing active
    assignment instead of creating a duplicate.
    """
    store = store or get_document_store()
    existing = query_assignments(
        store,
        [
            Eq("staff_id", staff_id),
            Eq("permanent_stage", stage.value),
            Eq("branch_id", branch_id),
            Eq("is_active", True),
        ],
        limit=1,
    )
    if existing:
        logger.info(f"Staff '{staff_id}' already assigned to '{stage.value}' at '{branch_id}'")
        return existing[0]

    assignment = WorkstationAssignment(
        assignment_id=generate_assignment_id(),
        staff_id=staff_id,
        staff_name=staff_name,
        permanent_stage=stage,
        branch_id=branch_id,
        is_active=True,
        created_at=utcnow(),
        created_by=created_by,
    )
    save_assignment(store, assignment)
    logger.info(f"Assigned staff '{staff_id}' to '{stage.value}' at '{branch_id}' ({assignment.assignment_id})")
    return assignment


def deactivate_staff_assignment(assignment_id: str, *, store: Optional[DocumentStore] = None) -> WorkstationAssignment:
    """Soft-delete an assignment so historical workload queries keep working."""
    store = store or get_document_store()
    assignment = get_assignment(store, assignment_id)
    assignment = update_assignment(store, assignment, {"is_active": False, "updated_at": utcnow()})
    logger.info(f"Deactivated workstation assignment {assignment_id}")
    return assignment


def get_active_staff_assignments(
    branch_id: str,
    *,
    store: Optional[DocumentStore] = None,
) -> List[WorkstationAssignment]:
    store = store or get_document_store()
    return query_assignments(
        store,
        [Eq("branch_id", branch_id), Eq("is_active", True)],
        order_by=OrderBy("created_at", descending=True),
    )


def get_staff_by_stage(
    stage: WorkstationStage,
    branch_id: str,
    *,
    store: Optional[DocumentStore] = None,
) -> List[WorkstationAssignment]:
    store = store or get_document_store()
    return query_assignments(
        store,
        [
            Eq("branch_id", branch_id),
            Eq("permanent_stage", stage.value),
            Eq("is_active", True),
        ],
    )
