"""Domain models for orders, branches and workstation assignments."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class RoutingStatus(str, Enum):
    """Position of an order in the inter-branch/workstation state machine."""

    PENDING = "pending"
    IN_TRANSIT = "in_transit"
    RECEIVED = "received"
    ASSIGNED = "assigned"
    PROCESSING = "processing"
    READY_FOR_RETURN = "ready_for_return"


class OrderStatus(str, Enum):
    """Customer-facing order status."""

    RECEIVED = "received"
    INSPECTION = "inspection"
    QUEUED = "queued"
    WASHING = "washing"
    DRYING = "drying"
    IRONING = "ironing"
    QUALITY_CHECK = "quality_check"
    PACKAGING = "packaging"
    QUEUED_FOR_DELIVERY = "queued_for_delivery"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    COLLECTED = "collected"


class WorkstationStage(str, Enum):
    INSPECTION = "inspection"
    WASHING = "washing"
    DRYING = "drying"
    IRONING = "ironing"
    QUALITY_CHECK = "quality_check"
    PACKAGING = "packaging"


# Production pipeline order.
STAGE_SEQUENCE: tuple[WorkstationStage, ...] = tuple(WorkstationStage)


class BranchType(str, Enum):
    MAIN = "main"
    SATELLITE = "satellite"


class DeliveryClassification(str, Enum):
    SMALL = "Small"
    BULK = "Bulk"


class ClassificationBasis(str, Enum):
    GARMENT_COUNT = "garment_count"
    WEIGHT = "weight"
    VALUE = "value"
    MANUAL = "manual"


class ConditionAssessment(str, Enum):
    GOOD = "good"
    MINOR_ISSUES = "minor_issues"
    MAJOR_ISSUES = "major_issues"


@dataclass(slots=True)
class StageHandler:
    """A staff member who completed a stage for a garment."""

    uid: str
    name: str
    completed_at: datetime


@dataclass(slots=True)
class Garment:
    """Line item embedded in an order."""

    garment_id: str
    type: str
    stage_handlers: dict[str, list[StageHandler]] = field(default_factory=dict)
    stage_durations: dict[str, int] = field(default_factory=dict)
    inspection_completed: bool = False
    inspection_completed_by: Optional[str] = None
    inspection_completed_at: Optional[datetime] = None
    condition_assessment: Optional[ConditionAssessment] = None


@dataclass(slots=True)
class ClassificationOverride:
    """Append-only audit record of a manual delivery classification change."""

    original_classification: DeliveryClassification
    new_classification: DeliveryClassification
    override_by: str
    override_by_name: str
    reason: str
    override_at: datetime


@dataclass(slots=True)
class Order:
    """Represents an order moving through routing, production and sorting."""

    order_id: str
    branch_id: str
    status: OrderStatus
    garments: list[Garment] = field(default_factory=list)
    total_amount: float = 0.0
    created_at: Optional[datetime] = None
    processing_branch_id: Optional[str] = None
    origin_branch_id: Optional[str] = None
    destination_branch_id: Optional[str] = None
    routing_status: Optional[RoutingStatus] = None
    assigned_workstation_stage: Optional[WorkstationStage] = None
    assigned_workstation_staff_id: Optional[str] = None
    routed_at: Optional[datetime] = None
    transferred_at: Optional[datetime] = None
    arrived_at_branch_at: Optional[datetime] = None
    sorting_completed_at: Optional[datetime] = None
    earliest_delivery_time: Optional[datetime] = None
    delivery_classification: Optional[DeliveryClassification] = None
    classification_basis: Optional[ClassificationBasis] = None
    classification_result: Optional[dict] = None
    classification_override_by: Optional[str] = None
    classification_overrides: list[ClassificationOverride] = field(default_factory=list)
    estimated_completion: Optional[datetime] = None
    major_issues_detected: bool = False
    major_issues_reviewed_by: Optional[str] = None
    major_issues_approved_at: Optional[datetime] = None
    version: int = 0

    @property
    def effective_processing_branch_id(self) -> str:
        return self.processing_branch_id or self.branch_id


@dataclass(slots=True)
class Branch:
    """A physical location. Read-only to the routing engine."""

    branch_id: str
    name: str
    branch_type: BranchType = BranchType.MAIN
    main_store_id: Optional[str] = None
    sorting_window_hours: Optional[float] = None
    active: bool = True


@dataclass(slots=True)
class WorkstationAssignment:
    """Durable binding of a staff member to a permanent stage at a branch."""

    assignment_id: str
    staff_id: str
    staff_name: str
    permanent_stage: WorkstationStage
    branch_id: str
    is_active: bool
    created_at: datetime
    created_by: str
    updated_at: Optional[datetime] = None
