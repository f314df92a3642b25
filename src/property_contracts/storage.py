"""Receipt storage and the shared contract state base."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Set

from ulid import ULID

from property_contracts.config import DEFAULT_POLICY, Clock, RegistryPolicy, utc_now
from property_contracts.models import ContractEvent, StorageError

logger = logging.getLogger("property_contracts.storage")


class EventStore(ABC):
    """Abstract store for contract receipts."""

    @abstractmethod
    def attach(self, contract: str) -> None:
        """Reserve the receipt log of contract for a single registry.

        Raises:
            StorageError: If the log is already reserved or already holds
                receipts for contract.
        """

    @abstractmethod
    def save_event(self, event: ContractEvent) -> None:
        """Persist a receipt. Saving the same event_id twice overwrites."""

    @abstractmethod
    def load_events(self, contract: str) -> List[ContractEvent]:
        """Load receipts for one contract, ordered by sequence."""

    @abstractmethod
    def load_all_events(self) -> List[ContractEvent]:
        """Load every receipt, ordered by (contract, sequence)."""


class InMemoryEventStore(EventStore):
    """Dict-backed EventStore for tests and single-process use."""

    def __init__(self) -> None:
        self._events: Dict[str, ContractEvent] = {}
        self._attached: Set[str] = set()

    def attach(self, contract: str) -> None:
        if contract in self._attached:
            raise StorageError(f"Receipt log for {contract!r} is already attached to a registry")
        if any(e.contract == contract for e in self._events.values()):
            raise StorageError(f"Receipt log for {contract!r} already holds receipts")
        self._attached.add(contract)

    def save_event(self, event: ContractEvent) -> None:
        self._events[event.event_id] = event

    def load_events(self, contract: str) -> List[ContractEvent]:
        return sorted(
            (e for e in self._events.values() if e.contract == contract),
            key=lambda e: e.sequence,
        )

    def load_all_events(self) -> List[ContractEvent]:
        return sorted(self._events.values(), key=lambda e: (e.contract, e.sequence))


class ContractState:
    """State shared by every contract registry.

    Holds the policy, the block clock, and the receipt log. Subclasses add
    their own maps; operations receive the registry instance explicitly.
    """

    contract_name: str = "contract"

    def __init__(
        self,
        policy: Optional[RegistryPolicy] = None,
        clock: Optional[Clock] = None,
        event_store: Optional[EventStore] = None,
    ) -> None:
        self.policy = policy if policy is not None else DEFAULT_POLICY
        self.clock = clock if clock is not None else utc_now
        self.event_store = event_store if event_store is not None else InMemoryEventStore()
        self.event_store.attach(self.contract_name)
        self._sequence = 0

    @property
    def events(self) -> List[ContractEvent]:
        """Receipts emitted by this registry, oldest first."""
        return self.event_store.load_events(self.contract_name)

    def emit(self, event_type: str, caller: str, payload: Dict[str, Any]) -> ContractEvent:
        """Record a receipt for a successful mutation."""
        event = ContractEvent(
            event_id=str(ULID()),
            event_type=event_type,
            contract=self.contract_name,
            caller=caller,
            sequence=self._sequence,
            block_time=self.clock(),
            payload=payload,
        )
        self.event_store.save_event(event)
        self._sequence += 1
        logger.debug("Recorded %r", event)
        return event
