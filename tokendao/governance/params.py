"""
Admin Parameter Store

Quorum and debating period live in one explicit configuration object,
owned by the proposal registry and changed only through admin-gated
setters. Deadlines are snapshotted into proposals at creation; the quorum
is read at resolution time.
"""

from dataclasses import dataclass
from typing import Any, Dict

from ..logger import get_logger
from .access import AccessControl
from .events import DebatingPeriodChanged, EventLog, QuorumChanged
from .proposals import GovernanceError

logger = get_logger(__name__)


class InvalidParameterError(GovernanceError):
    """Rejected governance parameter value."""


class NonPositiveQuorumError(InvalidParameterError):
    """Minimal quorum must be positive."""


class NonPositivePeriodError(InvalidParameterError):
    """Debating period must be positive."""


@dataclass
class GovernanceParameters:
    minimal_quorum: int
    debating_period: int

    def __post_init__(self):
        _require_quorum(self.minimal_quorum)
        _require_period(self.debating_period)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minimalQuorum": str(self.minimal_quorum),
            "debatingPeriod": self.debating_period,
        }


def _require_quorum(value: int):
    if value <= 0:
        raise NonPositiveQuorumError(f"Minimal quorum must be positive, got {value}")


def _require_period(value: int):
    if value <= 0:
        raise NonPositivePeriodError(f"Debating period must be positive, got {value}")


class ParameterStore:
    """Admin-gated access to :class:`GovernanceParameters`."""

    def __init__(
        self,
        parameters: GovernanceParameters,
        access: AccessControl,
        events: EventLog,
    ):
        self._parameters = parameters
        self._access = access
        self._events = events

    @property
    def minimal_quorum(self) -> int:
        return self._parameters.minimal_quorum

    @property
    def debating_period(self) -> int:
        return self._parameters.debating_period

    def set_minimal_quorum(self, caller: str, value: int) -> QuorumChanged:
        self._access.require_admin(caller)
        _require_quorum(value)
        old = self._parameters.minimal_quorum
        self._parameters.minimal_quorum = value
        logger.info(f"QuorumChanged: {old} → {value}")
        return self._events.emit(QuorumChanged(new_value=value))

    def set_debating_period(self, caller: str, value: int) -> DebatingPeriodChanged:
        self._access.require_admin(caller)
        _require_period(value)
        old = self._parameters.debating_period
        self._parameters.debating_period = value
        logger.info(f"DebatingPeriodChanged: {old}s → {value}s")
        return self._events.emit(DebatingPeriodChanged(new_value=value))

    def to_dict(self) -> Dict[str, Any]:
        return self._parameters.to_dict()
