"""
Governance Events

One record per successful mutating operation. The event log is the only
audit trail the DAO keeps.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

E = TypeVar("E")


@dataclass(frozen=True)
class ProposalAdded:
    id: int
    description: str
    recipient: str
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ProposalAdded",
            "id": self.id,
            "description": self.description,
            "recipient": self.recipient,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class DepositMade:
    account: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "DepositMade",
            "account": self.account,
            "amount": str(self.amount),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class WithdrawalMade:
    account: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "WithdrawalMade",
            "account": self.account,
            "amount": str(self.amount),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class Voted:
    account: str
    id: int
    support: bool
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "Voted",
            "account": self.account,
            "id": self.id,
            "support": self.support,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ProposalFinished:
    id: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ProposalFinished",
            "id": self.id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ProposalRejected:
    """Carries the final tallies and the quorum the proposal was measured against."""
    id: int
    votes_for: int
    votes_against: int
    min_quorum: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ProposalRejected",
            "id": self.id,
            "votesFor": str(self.votes_for),
            "votesAgainst": str(self.votes_against),
            "minQuorum": str(self.min_quorum),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class QuorumChanged:
    new_value: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "QuorumChanged",
            "newValue": str(self.new_value),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class DebatingPeriodChanged:
    new_value: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "DebatingPeriodChanged",
            "newValue": str(self.new_value),
            "timestamp": self.timestamp,
        }


class EventLog:
    """Append-only list of emitted governance events."""

    def __init__(self):
        self._events: List[Any] = []

    def emit(self, event: Any) -> Any:
        self._events.append(event)
        return event

    def filter(self, event_type: Type[E]) -> List[E]:
        """All events of *event_type*, oldest first."""
        return [e for e in self._events if isinstance(e, event_type)]

    def last(self, event_type: Optional[Type[E]] = None) -> Optional[Any]:
        events = self._events if event_type is None else self.filter(event_type)
        return events[-1] if events else None

    @property
    def events(self) -> List[Any]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._events))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": len(self._events),
            "events": [e.to_dict() for e in self._events],
        }
