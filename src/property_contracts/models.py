"""Core data models for property-contracts library."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# Principals are opaque identities compared by equality (e.g. Stacks addresses)
Principal = Annotated[str, Field(min_length=1)]

_PRINCIPAL_ADAPTER: TypeAdapter[str] = TypeAdapter(Principal)


def validate_principal(value: object) -> str:
    """Return value unchanged if it is a usable principal.

    Raises:
        pydantic.ValidationError: If value is not a non-empty string.
    """
    return _PRINCIPAL_ADAPTER.validate_python(value, strict=True)


class ErrorCode(int, Enum):
    """Numeric error codes returned by contract functions."""

    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409


class ContractEvent(BaseModel):
    """Immutable receipt of one successful mutating contract call."""

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(
        ...,
        min_length=26,
        max_length=26,
        description="Unique receipt identifier (ULID)",
    )
    event_type: str = Field(
        ...,
        min_length=1,
        description="Receipt type identifier (e.g., 'WorkOrderCreated')",
    )
    contract: str = Field(
        ...,
        min_length=1,
        description="Name of the contract that emitted this receipt",
    )
    caller: Principal = Field(
        ...,
        description="Principal that submitted the call",
    )
    sequence: int = Field(
        ...,
        ge=0,
        description="Per-contract sequence number (strictly increasing)",
    )
    block_time: datetime = Field(
        ...,
        description="Block timestamp at which the call was applied",
    )
    payload: Dict[str, Any] = Field(
        default_factory=dict,
        description="Call-specific data",
    )

    def __repr__(self) -> str:
        """Human-readable representation."""
        return (
            f"ContractEvent(event_id={self.event_id[:8]}..., "
            f"type={self.event_type}, "
            f"contract={self.contract}, "
            f"seq={self.sequence})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize receipt to dictionary (for storage)."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContractEvent":
        """Deserialize receipt from dictionary."""
        return cls(**data)


# Custom Exceptions
class PropertyContractsError(Exception):
    """Base exception for all library errors."""
    pass


class StorageError(PropertyContractsError):
    """Receipt store refused an operation."""
    pass


class ValidationError(PropertyContractsError):
    """Argument could not be coerced to a contract value.

    Raised for unknown status or task-type codes and for call arguments that
    do not fit a method. Field constraints on models (empty principals,
    ratings, negative ids) surface as pydantic.ValidationError instead.
    """
    pass


class ResultError(PropertyContractsError):
    """Raised when unwrapping an Err result."""

    def __init__(self, code: ErrorCode) -> None:
        self.code = code
        super().__init__(f"Contract call failed with error {code.value} ({code.name})")


class UnknownMethodError(PropertyContractsError):
    """Raised when a call names a method the contract does not expose."""

    def __init__(self, contract: str, method: str) -> None:
        self.contract = contract
        self.method = method
        super().__init__(f"Contract {contract!r} has no method {method!r}")


# Call results
@dataclass(frozen=True)
class Ok:
    """Successful contract call carrying its return value."""

    value: Any = True

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the discriminated on-chain response shape."""
        return {"type": "ok", "value": self.value}


@dataclass(frozen=True)
class Err:
    """Declined contract call carrying its error code."""

    code: ErrorCode

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise ResultError(self.code)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the discriminated on-chain response shape."""
        return {"type": "err", "value": self.code.value}


ContractResult = Union[Ok, Err]

FORBIDDEN: Err = Err(ErrorCode.FORBIDDEN)
NOT_FOUND: Err = Err(ErrorCode.NOT_FOUND)
CONFLICT: Err = Err(ErrorCode.CONFLICT)
