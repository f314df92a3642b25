"""Registry policy and block clock configuration."""

from datetime import datetime, timezone
from typing import Callable, Literal

from pydantic import BaseModel, ConfigDict, Field

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default block clock: current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


class RegistryPolicy(BaseModel):
    """Opt-in behaviors that tighten the default contract rules.

    The defaults reproduce the deployed contracts: any status may follow any
    other, and any principal may record a quality verification.
    """

    model_config = ConfigDict(frozen=True)

    lifecycle: Literal["permissive", "strict"] = Field(
        default="permissive",
        description="'strict' rejects work-order status moves outside the transition table",
    )
    require_authorized_verifier: bool = Field(
        default=False,
        description="Reject quality verifications from principals the owner has not authorized",
    )


DEFAULT_POLICY: RegistryPolicy = RegistryPolicy()
