"""Transaction-submission surface addressing contract functions by method name.

Calls name methods the way the deployed contracts do (``create-work-order``,
``verify-property``); argument names may be given in kebab-case or
snake_case.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

from property_contracts import property_verification as pv
from property_contracts import quality_verification as qv
from property_contracts import work_orders as wo
from property_contracts.models import (
    ContractResult,
    Principal,
    UnknownMethodError,
    ValidationError,
)
from property_contracts.storage import ContractState

logger = logging.getLogger("property_contracts.dispatch")

_PUBLIC_METHODS: Dict[Type[ContractState], Dict[str, Callable[..., ContractResult]]] = {
    wo.WorkOrderRegistry: {
        "create-work-order": wo.create_work_order,
        "update-work-order-status": wo.update_work_order_status,
        "reassign-work-order": wo.reassign_work_order,
    },
    pv.PropertyRegistry: {
        "register-property": pv.register_property,
        "verify-property": pv.verify_property,
        "transfer-ownership": pv.transfer_ownership,
    },
    qv.QualityRegistry: {
        "authorize-verifier": qv.authorize_verifier,
        "revoke-verifier": qv.revoke_verifier,
        "verify-work-quality": qv.verify_work_quality,
    },
}

_READ_ONLY_METHODS: Dict[Type[ContractState], Dict[str, Callable[..., Any]]] = {
    wo.WorkOrderRegistry: {
        "get-work-order": wo.get_work_order,
        "get-staff-workload": wo.get_staff_workload,
    },
    pv.PropertyRegistry: {
        "is-property-verified": pv.is_property_verified,
        "get-property-details": pv.get_property_details,
    },
    qv.QualityRegistry: {
        "is-authorized-verifier": qv.is_authorized_verifier,
        "get-verification-details": qv.get_verification_details,
        "is-work-satisfactory": qv.is_work_satisfactory,
    },
}

# On-chain argument names that differ from the Python parameter names
_ARGUMENT_ALIASES: Dict[str, str] = {
    "verifier_address": "verifier",
    "staff_address": "staff",
}


class ContractCall(BaseModel):
    """A public function call submitted by a principal."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., min_length=1, description="On-chain method name")
    caller: Principal = Field(..., description="Principal submitting the call")
    args: Tuple[Any, ...] = Field(default=(), description="Positional arguments")
    arguments: Dict[str, Any] = Field(
        default_factory=dict, description="Named arguments (kebab-case or snake_case)"
    )


def _lookup(
    table: Dict[Type[ContractState], Dict[str, Callable[..., Any]]],
    registry: ContractState,
    method: str,
) -> Callable[..., Any]:
    for registry_type, methods in table.items():
        if isinstance(registry, registry_type):
            func = methods.get(method)
            if func is not None:
                return func
            break
    raise UnknownMethodError(registry.contract_name, method)


def _normalize_arguments(arguments: Dict[str, Any]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for key, value in arguments.items():
        name = key.replace("-", "_")
        normalized[_ARGUMENT_ALIASES.get(name, name)] = value
    return normalized


def _invoke(func: Callable[..., Any], method: str, *args: Any, **kwargs: Any) -> Any:
    try:
        inspect.signature(func).bind(*args, **kwargs)
    except TypeError as exc:
        raise ValidationError(f"Bad arguments for {method!r}: {exc}") from exc
    return func(*args, **kwargs)


def submit(registry: ContractState, call: ContractCall) -> ContractResult:
    """Apply a public function call to registry and return its result.

    Raises:
        UnknownMethodError: If the registry exposes no public method of that name.
        property_contracts.ValidationError: If the arguments do not bind to
            the method's parameters.
        pydantic.ValidationError: Raised by the method itself for values
            that bind but are out of range, such as an empty principal.
    """
    func = _lookup(_PUBLIC_METHODS, registry, call.method)
    result: ContractResult = _invoke(
        func, call.method, registry, call.caller, *call.args,
        **_normalize_arguments(call.arguments),
    )
    logger.debug("%s.%s by %s -> %s", registry.contract_name, call.method, call.caller, result)
    return result


def call_read_only(registry: ContractState, method: str, *args: Any, **arguments: Any) -> Any:
    """Evaluate a read-only function; returns its plain value."""
    func = _lookup(_READ_ONLY_METHODS, registry, method)
    return _invoke(func, method, registry, *args, **_normalize_arguments(arguments))
