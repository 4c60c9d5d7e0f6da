from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from cleanroute.data.assignments_repository import save_assignment
from cleanroute.data.branch_repository import save_branch
from cleanroute.data.orders_repository import save_order
from cleanroute.models.domain import (
    Branch,
    BranchType,
    Garment,
    Order,
    OrderStatus,
    WorkstationAssignment,
    WorkstationStage,
)
from cleanroute.persistence import MemoryDocumentStore
from cleanroute.services.classification import overrides as overrides_module
from cleanroute.services.routing import service as routing_service
from cleanroute.services.sorting import service as sorting_service
from cleanroute.services.workstation import assignments as assignments_module
from cleanroute.services.workstation import garments as garments_module

START = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)

# Modules that read the current time through their own ``utcnow`` reference.
CLOCK_MODULES = (
    routing_service,
    sorting_service,
    garments_module,
    assignments_module,
    overrides_module,
)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FrozenClock:
    frozen = FrozenClock(START)
    for module in CLOCK_MODULES:
        monkeypatch.setattr(module, "utcnow", frozen)
    return frozen


def add_branch(
    store,
    branch_id: str,
    branch_type: BranchType = BranchType.MAIN,
    main_store_id: Optional[str] = None,
    sorting_window_hours: Optional[float] = None,
) -> Branch:
    branch = Branch(
        branch_id=branch_id,
        name=f"Branch {branch_id}",
        branch_type=branch_type,
        main_store_id=main_store_id,
        sorting_window_hours=sorting_window_hours,
    )
    save_branch(store, branch)
    return branch


def add_order(
    store,
    order_id: str,
    branch_id: str,
    garment_types: tuple[str, ...] = ("Shirt",),
    total_amount: float = 1000.0,
    status: OrderStatus = OrderStatus.RECEIVED,
    created_at: datetime = START,
    **fields,
) -> Order:
    order = Order(
        order_id=order_id,
        branch_id=branch_id,
        status=status,
        garments=[Garment(garment_id=f"{order_id}-G{i + 1}", type=kind) for i, kind in enumerate(garment_types)],
        total_amount=total_amount,
        created_at=created_at,
        **fields,
    )
    save_order(store, order)
    return order


def add_staff(
    store,
    staff_id: str,
    stage: WorkstationStage,
    branch_id: str,
    created_at: datetime = START,
    is_active: bool = True,
) -> WorkstationAssignment:
    assignment = WorkstationAssignment(
        assignment_id=f"ASSIGN-{staff_id}-{stage.value}",
        staff_id=staff_id,
        staff_name=f"Staff {staff_id}",
        permanent_stage=stage,
        branch_id=branch_id,
        is_active=is_active,
        created_at=created_at,
        created_by="admin",
    )
    save_assignment(store, assignment)
    return assignment
