"""Quality verification contract.

Property owners authorize verifiers; verifiers record a rating and a
satisfactory/unsatisfactory verdict per work order. A repeat verification
of the same order replaces the earlier record.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from property_contracts.config import Clock, RegistryPolicy
from property_contracts.models import (
    FORBIDDEN,
    ContractResult,
    Ok,
    Principal,
    validate_principal,
)
from property_contracts.storage import ContractState, EventStore

logger = logging.getLogger("property_contracts.quality_verification")

CONTRACT_NAME: str = "quality-verification"

VERIFIER_AUTHORIZED: str = "VerifierAuthorized"
VERIFIER_REVOKED: str = "VerifierRevoked"
WORK_QUALITY_VERIFIED: str = "WorkQualityVerified"

QUALITY_EVENT_TYPES: FrozenSet[str] = frozenset({
    VERIFIER_AUTHORIZED,
    VERIFIER_REVOKED,
    WORK_QUALITY_VERIFIED,
})

MAX_RATING: int = 5


class QualityVerification(BaseModel):
    """Quality review of one work order."""

    model_config = ConfigDict(frozen=True)

    order_id: int = Field(..., ge=0, description="Work order under review")
    verified_by: Principal
    rating: int = Field(..., ge=0, le=MAX_RATING, description="Score out of 5")
    comments: str = ""
    verification_date: datetime
    is_satisfactory: bool


class QualityRegistry(ContractState):
    """Mutable state of one quality-verification contract instance."""

    contract_name = CONTRACT_NAME

    def __init__(
        self,
        policy: Optional[RegistryPolicy] = None,
        clock: Optional[Clock] = None,
        event_store: Optional[EventStore] = None,
    ) -> None:
        super().__init__(policy=policy, clock=clock, event_store=event_store)
        self.quality_verifications: Dict[int, QualityVerification] = {}
        # (property_owner, verifier) -> authorized
        self.authorized_verifiers: Dict[Tuple[str, str], bool] = {}


def authorize_verifier(registry: QualityRegistry, caller: str, verifier: str) -> ContractResult:
    """Allow verifier to review work on caller's behalf.

    Raises:
        pydantic.ValidationError: If caller or verifier is empty.
    """
    caller = validate_principal(caller)
    verifier = validate_principal(verifier)
    registry.authorized_verifiers[(caller, verifier)] = True
    registry.emit(VERIFIER_AUTHORIZED, caller, {"verifier": verifier})
    logger.debug("%s authorized verifier %s", caller, verifier)
    return Ok(True)


def revoke_verifier(registry: QualityRegistry, caller: str, verifier: str) -> ContractResult:
    """Withdraw a previous authorization. Revoking an unknown pair is allowed.

    Raises:
        pydantic.ValidationError: If caller or verifier is empty.
    """
    caller = validate_principal(caller)
    verifier = validate_principal(verifier)
    registry.authorized_verifiers[(caller, verifier)] = False
    registry.emit(VERIFIER_REVOKED, caller, {"verifier": verifier})
    logger.debug("%s revoked verifier %s", caller, verifier)
    return Ok(True)


def verify_work_quality(
    registry: QualityRegistry,
    caller: str,
    order_id: int,
    rating: int,
    comments: str,
    is_satisfactory: bool,
    property_owner: Optional[str] = None,
) -> ContractResult:
    """Record caller's review of order_id, replacing any earlier review.

    Any caller is accepted unless the policy requires an authorized
    verifier, in which case property_owner must have authorized caller.

    Raises:
        pydantic.ValidationError: If order_id is negative or not an integer,
            rating is outside 0..MAX_RATING, or caller is empty. Nothing is
            stored.
    """
    if registry.policy.require_authorized_verifier and (
        property_owner is None or not is_authorized_verifier(registry, property_owner, caller)
    ):
        logger.info(
            "Declined quality verification of order %s: %s is not authorized by %s",
            order_id, caller, property_owner,
        )
        return FORBIDDEN

    record = QualityVerification(
        order_id=order_id,
        verified_by=caller,
        rating=rating,
        comments=comments,
        verification_date=registry.clock(),
        is_satisfactory=is_satisfactory,
    )
    replaced = record.order_id in registry.quality_verifications
    registry.quality_verifications[record.order_id] = record
    registry.emit(WORK_QUALITY_VERIFIED, caller, {
        "order_id": record.order_id,
        "rating": record.rating,
        "is_satisfactory": record.is_satisfactory,
        "replaced": replaced,
    })
    logger.debug("Order %s verified by %s (rating=%d)", order_id, caller, record.rating)
    return Ok(True)


def is_authorized_verifier(registry: QualityRegistry, property_owner: str, verifier: str) -> bool:
    return registry.authorized_verifiers.get((property_owner, verifier), False)


def get_verification_details(
    registry: QualityRegistry, order_id: int
) -> Optional[QualityVerification]:
    return registry.quality_verifications.get(order_id)


def is_work_satisfactory(registry: QualityRegistry, order_id: int) -> bool:
    record = registry.quality_verifications.get(order_id)
    if record is None:
        return False
    return record.is_satisfactory
