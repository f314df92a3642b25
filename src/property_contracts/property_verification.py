"""Property verification contract.

A single administrative principal (the contract owner) registers
properties and marks them verified. The contract owner role can be handed
to another principal by its current holder.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field

from property_contracts.config import Clock, RegistryPolicy
from property_contracts.models import (
    FORBIDDEN,
    NOT_FOUND,
    ContractResult,
    Ok,
    validate_principal,
)
from property_contracts.storage import ContractState, EventStore

logger = logging.getLogger("property_contracts.property_verification")

CONTRACT_NAME: str = "property-verification"

PROPERTY_REGISTERED: str = "PropertyRegistered"
PROPERTY_VERIFIED: str = "PropertyVerified"
OWNERSHIP_TRANSFERRED: str = "OwnershipTransferred"

PROPERTY_EVENT_TYPES: FrozenSet[str] = frozenset({
    PROPERTY_REGISTERED,
    PROPERTY_VERIFIED,
    OWNERSHIP_TRANSFERRED,
})


class VerifiedProperty(BaseModel):
    """Registry entry for one property owner."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Property name")
    address: str = Field(..., description="Street address")
    verified: bool = False
    verification_date: Optional[datetime] = Field(
        None, description="Block time of verification (None until verified)"
    )


class PropertyRegistry(ContractState):
    """Mutable state of one property-verification contract instance."""

    contract_name = CONTRACT_NAME

    def __init__(
        self,
        contract_owner: str,
        policy: Optional[RegistryPolicy] = None,
        clock: Optional[Clock] = None,
        event_store: Optional[EventStore] = None,
    ) -> None:
        owner = validate_principal(contract_owner)
        super().__init__(policy=policy, clock=clock, event_store=event_store)
        self.contract_owner = owner
        self.verified_properties: Dict[str, VerifiedProperty] = {}


def register_property(
    registry: PropertyRegistry,
    caller: str,
    name: str,
    address: str,
) -> ContractResult:
    """Register (or re-register) the caller's property as unverified.

    Only the contract owner may register; the entry is keyed by caller.
    """
    if caller != registry.contract_owner:
        logger.info("Declined property registration: %s is not the contract owner", caller)
        return FORBIDDEN

    registry.verified_properties[caller] = VerifiedProperty(name=name, address=address)
    registry.emit(PROPERTY_REGISTERED, caller, {"property_owner": caller, "name": name})
    logger.debug("Registered property %r for %s", name, caller)
    return Ok(True)


def verify_property(
    registry: PropertyRegistry,
    caller: str,
    property_owner: str,
) -> ContractResult:
    """Mark property_owner's property verified. Contract owner only."""
    if caller != registry.contract_owner:
        logger.info("Declined property verification: %s is not the contract owner", caller)
        return FORBIDDEN
    entry = registry.verified_properties.get(property_owner)
    if entry is None:
        logger.info("Declined property verification: no property for %s", property_owner)
        return NOT_FOUND

    now = registry.clock()
    registry.verified_properties[property_owner] = entry.model_copy(
        update={"verified": True, "verification_date": now}
    )
    registry.emit(PROPERTY_VERIFIED, caller, {"property_owner": property_owner})
    logger.debug("Verified property of %s", property_owner)
    return Ok(True)


def is_property_verified(registry: PropertyRegistry, property_owner: str) -> bool:
    entry = registry.verified_properties.get(property_owner)
    if entry is None:
        return False
    return entry.verified


def get_property_details(
    registry: PropertyRegistry, property_owner: str
) -> Optional[VerifiedProperty]:
    return registry.verified_properties.get(property_owner)


def transfer_ownership(
    registry: PropertyRegistry,
    caller: str,
    new_owner: str,
) -> ContractResult:
    """Hand the contract owner role to new_owner. Contract owner only.

    Raises:
        pydantic.ValidationError: If the contract owner passes an empty
            new_owner. Other callers get FORBIDDEN whatever they pass.
    """
    if caller != registry.contract_owner:
        logger.info("Declined ownership transfer: %s is not the contract owner", caller)
        return FORBIDDEN
    new_owner = validate_principal(new_owner)

    previous = registry.contract_owner
    registry.contract_owner = new_owner
    registry.emit(OWNERSHIP_TRANSFERRED, caller, {
        "previous_owner": previous,
        "new_owner": new_owner,
    })
    logger.info("Contract ownership transferred %s -> %s", previous, new_owner)
    return Ok(True)
