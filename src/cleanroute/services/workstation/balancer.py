"""Workload balancing for workstation stage assignment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ...data.orders_repository import query_orders
from ...models.domain import WorkstationStage
from ...persistence import DocumentStore, Eq, In, get_document_store
from ..routing.workflow import OPEN_ROUTING_STATUSES
from .assignments import get_active_staff_assignments

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StaffWorkload:
    staff_id: str
    staff_name: str
    open_orders: int


def count_open_orders(
    staff_id: str,
    *,
    exclude_order_id: Optional[str] = None,
    store: Optional[DocumentStore] = None,
) -> int:
    """Orders bound to ``staff_id`` whose routing status is assigned or processing."""
    store = store or get_document_store()
    orders = query_orders(
        store,
        [
            Eq("assigned_workstation_staff_id", staff_id),
            In("routing_status", tuple(status.value for status in OPEN_ROUTING_STATUSES)),
        ],
    )
    return sum(1 for order in orders if order.order_id != exclude_order_id)


def get_stage_workloads(
    branch_id: str,
    stage: WorkstationStage,
    *,
    exclude_order_id: Optional[str] = None,
    store: Optional[DocumentStore] = None,
) -> List[StaffWorkload]:
    """Open-order counts for staff permanently assigned to ``stage`` at ``branch_id``.

    The result is sorted by ascending count. The sort is stable, so staff with
    equal counts keep the order in which their assignments were listed.
    ``exclude_order_id`` leaves one order out of every count, which is how an
    order being re-balanced avoids weighing on its own holder.
    """
    store = store or get_document_store()
    assignments = get_active_staff_assignments(branch_id, store=store)

    workloads: list[StaffWorkload] = []
    seen: set[str] = set()
    for assignment in assignments:
        if assignment.permanent_stage != stage or assignment.staff_id in seen:
            continue
        seen.add(assignment.staff_id)
        workloads.append(
            StaffWorkload(
                staff_id=assignment.staff_id,
                staff_name=assignment.staff_name,
                open_orders=count_open_orders(assignment.staff_id, exclude_order_id=exclude_order_id, store=store),
            )
        )

    workloads.sort(key=lambda workload: workload.open_orders)
    return workloads


def find_available_staff_for_stage(
    branch_id: str,
    stage: WorkstationStage,
    *,
    exclude_order_id: Optional[str] = None,
    prefer_staff_id: Optional[str] = None,
    store: Optional[DocumentStore] = None,
) -> Optional[str]:
    """Staff id with the fewest open orders, or ``None`` when nobody covers the stage.

    ``None`` is a normal outcome: the order stays assigned to the stage without
    staff until someone picks it up manually. ``prefer_staff_id`` wins a tie
    for the lowest count.
    """
    workloads = get_stage_workloads(branch_id, stage, exclude_order_id=exclude_order_id, store=store)
    if not workloads:
        logger.warning(f"No active staff for stage '{stage.value}' at branch '{branch_id}'")
        return None
    chosen = workloads[0]
    for workload in workloads:
        if workload.staff_id == prefer_staff_id and workload.open_orders == chosen.open_orders:
            chosen = workload
            break
    logger.info(
        f"Selected staff '{chosen.staff_id}' for stage '{stage.value}' at branch '{branch_id}' "
        f"({chosen.open_orders} open orders)"
    )
    return chosen.staff_id
