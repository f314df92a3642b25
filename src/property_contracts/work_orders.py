"""Maintenance work-order assignment contract.

Work orders are created by a property owner and assigned to a staff
member. The registry tracks, per staff member, how many of their orders are
still active (assigned or in progress).

Sections:
    1. Constants (receipt types, on-chain codes)
    2. Enums and normalization
    3. WorkOrder model and registry state
    4. Transition table
    5. Contract functions
    6. Workload audit and replay
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from property_contracts.config import Clock, RegistryPolicy
from property_contracts.models import (
    CONFLICT,
    FORBIDDEN,
    NOT_FOUND,
    ContractEvent,
    ContractResult,
    Ok,
    Principal,
    ValidationError,
    validate_principal,
)
from property_contracts.storage import ContractState, EventStore

logger = logging.getLogger("property_contracts.work_orders")

# ── Section 1: Constants ─────────────────────────────────────────────────────

CONTRACT_NAME: str = "maintenance-assignment"

WORK_ORDER_CREATED: str = "WorkOrderCreated"
WORK_ORDER_STATUS_UPDATED: str = "WorkOrderStatusUpdated"
WORK_ORDER_REASSIGNED: str = "WorkOrderReassigned"

WORK_ORDER_EVENT_TYPES: FrozenSet[str] = frozenset({
    WORK_ORDER_CREATED,
    WORK_ORDER_STATUS_UPDATED,
    WORK_ORDER_REASSIGNED,
})

# ── Section 2: Enums ─────────────────────────────────────────────────────────


class TaskType(str, Enum):
    """Kind of maintenance work."""

    CLEANING = "cleaning"
    REPAIR = "repair"


class WorkOrderStatus(str, Enum):
    """Work-order lifecycle states."""

    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    VERIFIED = "verified"


ACTIVE_STATUSES: FrozenSet[WorkOrderStatus] = frozenset({
    WorkOrderStatus.ASSIGNED,
    WorkOrderStatus.IN_PROGRESS,
})

CLOSED_STATUSES: FrozenSet[WorkOrderStatus] = frozenset({
    WorkOrderStatus.COMPLETED,
    WorkOrderStatus.VERIFIED,
})

# uint codes used by the deployed contract
STATUS_CODES: Dict[int, WorkOrderStatus] = {
    0: WorkOrderStatus.ASSIGNED,
    1: WorkOrderStatus.IN_PROGRESS,
    2: WorkOrderStatus.COMPLETED,
    3: WorkOrderStatus.VERIFIED,
}

TASK_TYPE_CODES: Dict[int, TaskType] = {
    0: TaskType.CLEANING,
    1: TaskType.REPAIR,
}

STATUS_ALIASES: Dict[str, WorkOrderStatus] = {"in-progress": WorkOrderStatus.IN_PROGRESS}


def normalize_status(value: Union[WorkOrderStatus, str, int]) -> WorkOrderStatus:
    """Resolve a status given as enum member, value string, alias, or uint code.

    Raises:
        property_contracts.ValidationError: If value does not name a known
            status. This is the library error, not pydantic's.
    """
    if isinstance(value, WorkOrderStatus):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        if value in STATUS_CODES:
            return STATUS_CODES[value]
    elif isinstance(value, str):
        for member in WorkOrderStatus:
            if member.value == value:
                return member
        if value in STATUS_ALIASES:
            return STATUS_ALIASES[value]

    raise ValidationError(
        f"Unknown work-order status: {value!r}. "
        f"Valid values: {[m.value for m in WorkOrderStatus]}. "
        f"Codes: {sorted(STATUS_CODES)}"
    )


def normalize_task_type(value: Union[TaskType, str, int]) -> TaskType:
    """Resolve a task type given as enum member, value string, or uint code.

    Raises:
        property_contracts.ValidationError: If value does not name a known
            task type.
    """
    if isinstance(value, TaskType):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        if value in TASK_TYPE_CODES:
            return TASK_TYPE_CODES[value]
    elif isinstance(value, str):
        for member in TaskType:
            if member.value == value:
                return member

    raise ValidationError(
        f"Unknown task type: {value!r}. "
        f"Valid values: {[m.value for m in TaskType]}. "
        f"Codes: {sorted(TASK_TYPE_CODES)}"
    )


# ── Section 3: Models ────────────────────────────────────────────────────────


class WorkOrder(BaseModel):
    """A maintenance task assigned to a staff member."""

    model_config = ConfigDict(frozen=True)

    order_id: int = Field(..., ge=0, description="Sequential identifier")
    property_owner: Principal = Field(..., description="Principal that created the order")
    room_number: int = Field(..., ge=0, description="Room the work is for")
    assigned_to: Principal = Field(..., description="Staff member doing the work")
    task_type: TaskType
    status: WorkOrderStatus = WorkOrderStatus.ASSIGNED
    description: str = ""
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


class WorkOrderRegistry(ContractState):
    """Mutable state of one maintenance-assignment contract instance."""

    contract_name = CONTRACT_NAME

    def __init__(
        self,
        policy: Optional[RegistryPolicy] = None,
        clock: Optional[Clock] = None,
        event_store: Optional[EventStore] = None,
    ) -> None:
        super().__init__(policy=policy, clock=clock, event_store=event_store)
        self.next_order_id = 0
        self.work_orders: Dict[int, WorkOrder] = {}
        self.staff_assignments: Dict[str, int] = {}


# ── Section 4: Transition table ──────────────────────────────────────────────

# Enforced only when RegistryPolicy.lifecycle == "strict"
_ALLOWED_TRANSITIONS: Dict[WorkOrderStatus, FrozenSet[WorkOrderStatus]] = {
    WorkOrderStatus.ASSIGNED: frozenset({
        WorkOrderStatus.IN_PROGRESS,
        WorkOrderStatus.COMPLETED,
    }),
    WorkOrderStatus.IN_PROGRESS: frozenset({
        WorkOrderStatus.COMPLETED,
        WorkOrderStatus.ASSIGNED,
    }),
    # Rework after a failed inspection
    WorkOrderStatus.COMPLETED: frozenset({
        WorkOrderStatus.VERIFIED,
        WorkOrderStatus.IN_PROGRESS,
    }),
    WorkOrderStatus.VERIFIED: frozenset(),
}


def is_allowed_transition(from_status: WorkOrderStatus, to_status: WorkOrderStatus) -> bool:
    """Return True if strict mode permits moving from_status -> to_status.

    Re-applying the current status is always allowed.
    """
    if from_status is to_status:
        return True
    return to_status in _ALLOWED_TRANSITIONS[from_status]


# ── Section 5: Contract functions ────────────────────────────────────────────


def _increment_workload(registry: WorkOrderRegistry, staff: str) -> None:
    registry.staff_assignments[staff] = registry.staff_assignments.get(staff, 0) + 1


def _decrement_workload(registry: WorkOrderRegistry, staff: str) -> None:
    current = registry.staff_assignments.get(staff, 0)
    if current <= 0:
        logger.warning("Workload for %s already at %d; not decrementing", staff, current)
        return
    registry.staff_assignments[staff] = current - 1


def create_work_order(
    registry: WorkOrderRegistry,
    caller: str,
    room_number: int,
    assigned_to: str,
    task_type: Union[TaskType, str, int],
    description: str,
) -> ContractResult:
    """Create a work order owned by caller and assigned to assigned_to.

    Any principal may create an order. Returns Ok(order_id); ids are
    allocated sequentially from 0.

    Raises:
        property_contracts.ValidationError: If task_type is unknown.
        pydantic.ValidationError: If caller or assigned_to is empty, or
            room_number is negative.
    """
    now = registry.clock()
    order = WorkOrder(
        order_id=registry.next_order_id,
        property_owner=caller,
        room_number=room_number,
        assigned_to=assigned_to,
        task_type=normalize_task_type(task_type),
        description=description,
        created_at=now,
        updated_at=now,
    )
    registry.work_orders[order.order_id] = order
    registry.next_order_id += 1
    _increment_workload(registry, order.assigned_to)

    registry.emit(WORK_ORDER_CREATED, caller, {
        "order_id": order.order_id,
        "room_number": order.room_number,
        "assigned_to": order.assigned_to,
        "task_type": order.task_type.value,
        "status": order.status.value,
    })
    logger.debug("Created work order %d for %s", order.order_id, order.assigned_to)
    return Ok(order.order_id)


def update_work_order_status(
    registry: WorkOrderRegistry,
    caller: str,
    order_id: int,
    new_status: Union[WorkOrderStatus, str, int],
) -> ContractResult:
    """Set the status of an order. Caller must be its owner or assignee.

    Moving an order from an active status into completed/verified releases
    the assignee's workload once; moving it back reclaims it.

    Raises:
        property_contracts.ValidationError: If new_status is unknown. This
            is checked before the order is looked up.
    """
    status = normalize_status(new_status)
    order = registry.work_orders.get(order_id)
    if order is None:
        logger.info("Declined status update: work order %s not found", order_id)
        return NOT_FOUND
    if caller != order.property_owner and caller != order.assigned_to:
        logger.info(
            "Declined status update on work order %d: %s is neither owner nor assignee",
            order_id, caller,
        )
        return FORBIDDEN
    if registry.policy.lifecycle == "strict" and not is_allowed_transition(order.status, status):
        logger.info(
            "Declined status update on work order %d: %s -> %s is not allowed",
            order_id, order.status.value, status.value,
        )
        return CONFLICT

    previous = order.status
    if previous in ACTIVE_STATUSES and status in CLOSED_STATUSES:
        _decrement_workload(registry, order.assigned_to)
    elif previous in CLOSED_STATUSES and status in ACTIVE_STATUSES:
        _increment_workload(registry, order.assigned_to)

    registry.work_orders[order_id] = order.model_copy(
        update={"status": status, "updated_at": registry.clock()}
    )
    registry.emit(WORK_ORDER_STATUS_UPDATED, caller, {
        "order_id": order_id,
        "assigned_to": order.assigned_to,
        "from_status": previous.value,
        "to_status": status.value,
    })
    logger.debug("Work order %d: %s -> %s", order_id, previous.value, status.value)
    return Ok(True)


def reassign_work_order(
    registry: WorkOrderRegistry,
    caller: str,
    order_id: int,
    new_assignee: str,
) -> ContractResult:
    """Hand an order to a different staff member. Owner only.

    Workload moves with the order only while it is active; a completed or
    verified order carries no workload to transfer.

    Raises:
        pydantic.ValidationError: If new_assignee is empty.
    """
    new_assignee = validate_principal(new_assignee)
    order = registry.work_orders.get(order_id)
    if order is None:
        logger.info("Declined reassignment: work order %s not found", order_id)
        return NOT_FOUND
    if caller != order.property_owner:
        logger.info(
            "Declined reassignment of work order %d: %s is not the owner",
            order_id, caller,
        )
        return FORBIDDEN

    previous_assignee = order.assigned_to
    if order.is_active:
        _decrement_workload(registry, previous_assignee)
        _increment_workload(registry, new_assignee)

    registry.work_orders[order_id] = order.model_copy(
        update={"assigned_to": new_assignee, "updated_at": registry.clock()}
    )
    registry.emit(WORK_ORDER_REASSIGNED, caller, {
        "order_id": order_id,
        "previous_assignee": previous_assignee,
        "new_assignee": new_assignee,
        "status": order.status.value,
    })
    logger.debug("Work order %d reassigned %s -> %s", order_id, previous_assignee, new_assignee)
    return Ok(True)


def get_work_order(registry: WorkOrderRegistry, order_id: int) -> Optional[WorkOrder]:
    return registry.work_orders.get(order_id)


def get_staff_workload(registry: WorkOrderRegistry, staff: str) -> int:
    return registry.staff_assignments.get(staff, 0)


# ── Section 6: Workload audit and replay ─────────────────────────────────────


class WorkloadAnomaly(BaseModel):
    """Disagreement between a staff counter and the stored orders.

    Valid kind values: "negative_workload", "workload_mismatch".
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    staff: str
    message: str


class WorkloadAudit(BaseModel):
    """Result of audit_staff_workload()."""

    model_config = ConfigDict(frozen=True)

    expected: Dict[str, int] = Field(default_factory=dict)
    anomalies: Tuple[WorkloadAnomaly, ...] = ()

    @property
    def consistent(self) -> bool:
        return len(self.anomalies) == 0


def audit_staff_workload(registry: WorkOrderRegistry) -> WorkloadAudit:
    """Recount active orders per assignee and compare with the counters."""
    expected: Dict[str, int] = dict(Counter(
        order.assigned_to for order in registry.work_orders.values() if order.is_active
    ))
    anomalies: List[WorkloadAnomaly] = []

    for staff in sorted(set(expected) | set(registry.staff_assignments)):
        actual = registry.staff_assignments.get(staff, 0)
        want = expected.get(staff, 0)
        if actual < 0:
            anomalies.append(WorkloadAnomaly(
                kind="negative_workload",
                staff=staff,
                message=f"Workload for {staff} is negative: {actual}",
            ))
        elif actual != want:
            anomalies.append(WorkloadAnomaly(
                kind="workload_mismatch",
                staff=staff,
                message=f"Workload for {staff} is {actual}, expected {want}",
            ))

    return WorkloadAudit(expected=expected, anomalies=tuple(anomalies))


def reduce_workload_events(events: Sequence[ContractEvent]) -> Dict[str, int]:
    """Fold work-order receipts into per-staff active-assignment counters.

    Pipeline: filter(contract, WORK_ORDER_EVENT_TYPES) -> sort(sequence) -> fold.
    Replaying a registry's receipts yields its staff_assignments map.
    """
    relevant = sorted(
        (
            e for e in events
            if e.contract == CONTRACT_NAME and e.event_type in WORK_ORDER_EVENT_TYPES
        ),
        key=lambda e: e.sequence,
    )
    workload: Dict[str, int] = {}

    def bump(staff: str, delta: int) -> None:
        current = workload.get(staff, 0)
        if delta < 0 and current <= 0:
            return
        workload[staff] = current + delta

    for event in relevant:
        payload = event.payload
        if event.event_type == WORK_ORDER_CREATED:
            bump(payload["assigned_to"], 1)
        elif event.event_type == WORK_ORDER_STATUS_UPDATED:
            previous = WorkOrderStatus(payload["from_status"])
            target = WorkOrderStatus(payload["to_status"])
            if previous in ACTIVE_STATUSES and target in CLOSED_STATUSES:
                bump(payload["assigned_to"], -1)
            elif previous in CLOSED_STATUSES and target in ACTIVE_STATUSES:
                bump(payload["assigned_to"], 1)
        elif WorkOrderStatus(payload["status"]) in ACTIVE_STATUSES:
            bump(payload["previous_assignee"], -1)
            bump(payload["new_assignee"], 1)

    return workload
