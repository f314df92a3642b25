"""
property-contracts: in-process models of property-management smart contracts.

This library provides three independent contract registries: maintenance
work-order assignment with staff-workload accounting, property
verification administered by a contract owner, and quality verification
of completed work. Every operation receives its registry explicitly and
returns ``Ok(value)`` or ``Err(code)``.

Example:
    >>> from property_contracts import WorkOrderRegistry, create_work_order, get_staff_workload
    >>> registry = WorkOrderRegistry()
    >>> create_work_order(registry, "owner", 101, "staff", "cleaning", "Clean room").unwrap()
    0
    >>> get_staff_workload(registry, "staff")
    1
"""

__version__ = "1.0.0"

# Core data models
from property_contracts.models import (
    CONFLICT,
    FORBIDDEN,
    NOT_FOUND,
    ContractEvent,
    ContractResult,
    Err,
    ErrorCode,
    Ok,
    Principal,
    PropertyContractsError,
    ResultError,
    StorageError,
    UnknownMethodError,
    ValidationError,
    validate_principal,
)

# Configuration
from property_contracts.config import (
    DEFAULT_POLICY,
    RegistryPolicy,
    utc_now,
)

# Storage
from property_contracts.storage import (
    ContractState,
    EventStore,
    InMemoryEventStore,
)

# Maintenance assignment contract
from property_contracts.work_orders import (
    ACTIVE_STATUSES,
    CLOSED_STATUSES,
    STATUS_CODES,
    TASK_TYPE_CODES,
    WORK_ORDER_CREATED,
    WORK_ORDER_EVENT_TYPES,
    WORK_ORDER_REASSIGNED,
    WORK_ORDER_STATUS_UPDATED,
    TaskType,
    WorkloadAnomaly,
    WorkloadAudit,
    WorkOrder,
    WorkOrderRegistry,
    WorkOrderStatus,
    audit_staff_workload,
    create_work_order,
    get_staff_workload,
    get_work_order,
    is_allowed_transition,
    normalize_status,
    normalize_task_type,
    reassign_work_order,
    reduce_workload_events,
    update_work_order_status,
)

# Property verification contract
from property_contracts.property_verification import (
    OWNERSHIP_TRANSFERRED,
    PROPERTY_EVENT_TYPES,
    PROPERTY_REGISTERED,
    PROPERTY_VERIFIED,
    PropertyRegistry,
    VerifiedProperty,
    get_property_details,
    is_property_verified,
    register_property,
    transfer_ownership,
    verify_property,
)

# Quality verification contract
from property_contracts.quality_verification import (
    MAX_RATING,
    QUALITY_EVENT_TYPES,
    VERIFIER_AUTHORIZED,
    VERIFIER_REVOKED,
    WORK_QUALITY_VERIFIED,
    QualityRegistry,
    QualityVerification,
    authorize_verifier,
    get_verification_details,
    is_authorized_verifier,
    is_work_satisfactory,
    revoke_verifier,
    verify_work_quality,
)

# Transaction submission
from property_contracts.dispatch import (
    ContractCall,
    call_read_only,
    submit,
)

__all__ = [
    # Core data models
    "CONFLICT",
    "FORBIDDEN",
    "NOT_FOUND",
    "ContractEvent",
    "ContractResult",
    "Err",
    "ErrorCode",
    "Ok",
    "Principal",
    "PropertyContractsError",
    "ResultError",
    "StorageError",
    "UnknownMethodError",
    "ValidationError",
    "validate_principal",
    # Configuration
    "DEFAULT_POLICY",
    "RegistryPolicy",
    "utc_now",
    # Storage
    "ContractState",
    "EventStore",
    "InMemoryEventStore",
    # Maintenance assignment contract
    "ACTIVE_STATUSES",
    "CLOSED_STATUSES",
    "STATUS_CODES",
    "TASK_TYPE_CODES",
    "WORK_ORDER_CREATED",
    "WORK_ORDER_EVENT_TYPES",
    "WORK_ORDER_REASSIGNED",
    "WORK_ORDER_STATUS_UPDATED",
    "TaskType",
    "WorkloadAnomaly",
    "WorkloadAudit",
    "WorkOrder",
    "WorkOrderRegistry",
    "WorkOrderStatus",
    "audit_staff_workload",
    "create_work_order",
    "get_staff_workload",
    "get_work_order",
    "is_allowed_transition",
    "normalize_status",
    "normalize_task_type",
    "reassign_work_order",
    "reduce_workload_events",
    "update_work_order_status",
    # Property verification contract
    "OWNERSHIP_TRANSFERRED",
    "PROPERTY_EVENT_TYPES",
    "PROPERTY_REGISTERED",
    "PROPERTY_VERIFIED",
    "PropertyRegistry",
    "VerifiedProperty",
    "get_property_details",
    "is_property_verified",
    "register_property",
    "transfer_ownership",
    "verify_property",
    # Quality verification contract
    "MAX_RATING",
    "QUALITY_EVENT_TYPES",
    "VERIFIER_AUTHORIZED",
    "VERIFIER_REVOKED",
    "WORK_QUALITY_VERIFIED",
    "QualityRegistry",
    "QualityVerification",
    "authorize_verifier",
    "get_verification_details",
    "is_authorized_verifier",
    "is_work_satisfactory",
    "revoke_verifier",
    "verify_work_quality",
    # Transaction submission
    "ContractCall",
    "call_read_only",
    "submit",
]
