"""Shared pytest fixtures for all tests."""
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from property_contracts import (
    PropertyRegistry,
    QualityRegistry,
    RegistryPolicy,
    WorkOrderRegistry,
)

CONTRACT_OWNER = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_clock(start: datetime = BASE_TIME, step: timedelta = timedelta(seconds=1)) -> Callable[[], datetime]:
    """Build a deterministic block clock that advances by step on every read."""
    state = {"now": start}

    def clock() -> datetime:
        current = state["now"]
        state["now"] = current + step
        return current

    return clock


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return make_clock()


@pytest.fixture
def work_orders(clock: Callable[[], datetime]) -> WorkOrderRegistry:
    return WorkOrderRegistry(clock=clock)


@pytest.fixture
def strict_work_orders(clock: Callable[[], datetime]) -> WorkOrderRegistry:
    return WorkOrderRegistry(policy=RegistryPolicy(lifecycle="strict"), clock=clock)


@pytest.fixture
def properties(clock: Callable[[], datetime]) -> PropertyRegistry:
    return PropertyRegistry(contract_owner=CONTRACT_OWNER, clock=clock)


@pytest.fixture
def quality(clock: Callable[[], datetime]) -> QualityRegistry:
    return QualityRegistry(clock=clock)


@pytest.fixture
def strict_quality(clock: Callable[[], datetime]) -> QualityRegistry:
    return QualityRegistry(policy=RegistryPolicy(require_authorized_verifier=True), clock=clock)
