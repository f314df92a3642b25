"""Unit tests for core data models."""
import pytest
from datetime import datetime, timezone
from pydantic import ValidationError as PydanticValidationError
from ulid import ULID
from property_contracts.models import (
    CONFLICT, FORBIDDEN, NOT_FOUND,
    ContractEvent, Err, ErrorCode, Ok,
    PropertyContractsError, ResultError, StorageError, UnknownMethodError,
    ValidationError,
    validate_principal,
)
from property_contracts.config import DEFAULT_POLICY, RegistryPolicy, utc_now

BLOCK_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


class TestContractEvent:
    """Tests for ContractEvent model."""

    def test_event_creation_valid(self):
        """Test creating a valid receipt."""
        event = ContractEvent(
            event_id="01ARZ3NDEKTSV4RRFFQ69G5FAV",
            event_type="WorkOrderCreated",
            contract="maintenance-assignment",
            caller="ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM",
            sequence=0,
            block_time=BLOCK_TIME,
            payload={"order_id": 0},
        )
        assert event.event_id == "01ARZ3NDEKTSV4RRFFQ69G5FAV"
        assert event.payload == {"order_id": 0}

    def test_event_validation_empty_caller(self):
        """Test receipt validation fails with an empty caller."""
        with pytest.raises(PydanticValidationError):
            ContractEvent(
                event_id=str(ULID()),
                event_type="WorkOrderCreated",
                contract="maintenance-assignment",
                caller="",
                sequence=0,
                block_time=BLOCK_TIME,
            )

    def test_event_validation_negative_sequence(self):
        """Test receipt validation fails with a negative sequence."""
        with pytest.raises(PydanticValidationError):
            ContractEvent(
                event_id=str(ULID()),
                event_type="WorkOrderCreated",
                contract="maintenance-assignment",
                caller="owner",
                sequence=-1,
                block_time=BLOCK_TIME,
            )

    def test_event_validation_short_id(self):
        """Test receipt validation fails when event_id is not a ULID."""
        with pytest.raises(PydanticValidationError):
            ContractEvent(
                event_id="short",
                event_type="WorkOrderCreated",
                contract="maintenance-assignment",
                caller="owner",
                sequence=0,
                block_time=BLOCK_TIME,
            )

    def test_event_immutable(self):
        """Test receipts are frozen."""
        event = ContractEvent(
            event_id=str(ULID()),
            event_type="WorkOrderCreated",
            contract="maintenance-assignment",
            caller="owner",
            sequence=0,
            block_time=BLOCK_TIME,
        )
        with pytest.raises(PydanticValidationError):
            event.sequence = 5  # type: ignore[misc]

    def test_to_dict_from_dict(self):
        """Test serialization survives a dict round trip."""
        event = ContractEvent(
            event_id=str(ULID()),
            event_type="PropertyVerified",
            contract="property-verification",
            caller="owner",
            sequence=3,
            block_time=BLOCK_TIME,
            payload={"property_owner": "owner"},
        )
        assert ContractEvent.from_dict(event.to_dict()) == event

    def test_repr(self):
        """Test repr is abbreviated."""
        event = ContractEvent(
            event_id="01ARZ3NDEKTSV4RRFFQ69G5FAV",
            event_type="PropertyVerified",
            contract="property-verification",
            caller="owner",
            sequence=3,
            block_time=BLOCK_TIME,
        )
        assert repr(event) == (
            "ContractEvent(event_id=01ARZ3ND..., type=PropertyVerified, "
            "contract=property-verification, seq=3)"
        )


class TestResults:
    """Tests for Ok/Err call results."""

    def test_ok_unwrap(self):
        """Test Ok carries its value."""
        assert Ok(7).unwrap() == 7
        assert Ok().value is True
        assert Ok(7).is_ok

    def test_err_unwrap_raises(self):
        """Test unwrapping Err raises ResultError with the code."""
        with pytest.raises(ResultError) as exc_info:
            Err(ErrorCode.NOT_FOUND).unwrap()
        assert exc_info.value.code is ErrorCode.NOT_FOUND
        assert "404" in str(exc_info.value)

    def test_to_dict_shapes(self):
        """Test discriminated response shapes."""
        assert Ok(0).to_dict() == {"type": "ok", "value": 0}
        assert FORBIDDEN.to_dict() == {"type": "err", "value": 403}
        assert NOT_FOUND.to_dict() == {"type": "err", "value": 404}
        assert CONFLICT.to_dict() == {"type": "err", "value": 409}

    def test_err_equality(self):
        """Test errors compare by code."""
        assert Err(ErrorCode.FORBIDDEN) == FORBIDDEN
        assert FORBIDDEN != NOT_FOUND
        assert not FORBIDDEN.is_ok

    def test_error_codes_are_ints(self):
        """Test ErrorCode values compare as plain ints."""
        assert ErrorCode.FORBIDDEN == 403
        assert ErrorCode(404) is ErrorCode.NOT_FOUND


class TestValidatePrincipal:
    """Tests for principal validation."""

    def test_accepts_address(self):
        """Test non-empty strings pass through unchanged."""
        assert validate_principal("ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM") == (
            "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
        )

    @pytest.mark.parametrize("bad", ["", None, 42])
    def test_rejects_non_principals(self, bad):
        """Test empty and non-string values are rejected."""
        with pytest.raises(PydanticValidationError):
            validate_principal(bad)


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        """Test all library errors derive from PropertyContractsError."""
        assert issubclass(ResultError, PropertyContractsError)
        assert issubclass(UnknownMethodError, PropertyContractsError)
        assert issubclass(ValidationError, PropertyContractsError)
        assert issubclass(StorageError, PropertyContractsError)

    def test_unknown_method_message(self):
        """Test UnknownMethodError names the contract and method."""
        exc = UnknownMethodError("property-verification", "burn")
        assert exc.contract == "property-verification"
        assert "'burn'" in str(exc)


class TestRegistryPolicy:
    """Tests for RegistryPolicy configuration."""

    def test_defaults(self):
        """Test defaults reproduce the deployed contracts."""
        assert DEFAULT_POLICY.lifecycle == "permissive"
        assert DEFAULT_POLICY.require_authorized_verifier is False

    def test_unknown_lifecycle_rejected(self):
        """Test lifecycle only accepts known modes."""
        with pytest.raises(PydanticValidationError):
            RegistryPolicy(lifecycle="relaxed")  # type: ignore[arg-type]

    def test_frozen(self):
        """Test policies are immutable."""
        policy = RegistryPolicy(lifecycle="strict")
        with pytest.raises(PydanticValidationError):
            policy.lifecycle = "permissive"  # type: ignore[misc]

    def test_utc_now_is_aware(self):
        """Test the default clock returns timezone-aware UTC times."""
        assert utc_now().tzinfo is timezone.utc
