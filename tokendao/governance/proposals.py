"""
Governance Proposals

Defines the proposal lifecycle, the action a proposal carries, and the
registry that assigns identifiers and stores proposal records.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional

from eth_utils import keccak

from ..constants import ZERO_ADDRESS
from ..crypto.address import normalize_address
from ..crypto.contract import decode_function_call
from ..exceptions import DAOException, InvalidAddressError
from ..logger import get_logger
from .events import EventLog, ProposalAdded

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EXCEPTIONS
# ══════════════════════════════════════════════════════════════════════

class GovernanceError(DAOException):
    """Base governance exception."""


class InvalidCallerError(GovernanceError):
    """Caller is missing, malformed or the zero address."""


class InvalidProposalError(GovernanceError):
    """Raised when proposal data is invalid."""


class ProposalLifecycleError(GovernanceError):
    """Raised on illegal state transitions."""


class ProposalNotFoundError(GovernanceError):
    """No proposal was ever created under this id."""


class ProposalIdCollisionError(GovernanceError):
    """Block-offset id scheme produced an id that is already taken."""


# ══════════════════════════════════════════════════════════════════════
#  ENUMS
# ══════════════════════════════════════════════════════════════════════

class ProposalStatus(IntEnum):
    """Lifecycle stage. UNDEFINED is the state of any id never created."""
    UNDEFINED = 0
    ADDED = 1       # Live voting state
    FINISHED = 2    # Accepted and executed
    REJECTED = 3    # Quorum or majority not reached


_VALID_TRANSITIONS: Dict[ProposalStatus, set] = {
    ProposalStatus.UNDEFINED: {ProposalStatus.ADDED},
    ProposalStatus.ADDED:     {ProposalStatus.FINISHED, ProposalStatus.REJECTED},
    # Terminal states, no further transitions
    ProposalStatus.FINISHED:  set(),
    ProposalStatus.REJECTED:  set(),
}


class ProposalIdScheme(str, Enum):
    """How the registry derives a new proposal id."""
    SEQUENTIAL = "sequential"       # 1, 2, 3, ... independent of the chain
    BLOCK_OFFSET = "block_offset"   # block height + proposals created so far


# ══════════════════════════════════════════════════════════════════════
#  ACTION
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ProposalAction:
    """
    The call a proposal triggers when accepted.

    Opaque to the governance core: *call_data* is handed to the recipient
    unchanged, at most once, and only after the proposal has passed.
    """
    recipient: str
    call_data: bytes = b""

    @property
    def selector(self) -> bytes:
        return decode_function_call(self.call_data)[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipient": self.recipient,
            "callData": "0x" + self.call_data.hex(),
        }


# ══════════════════════════════════════════════════════════════════════
#  PROPOSAL
# ══════════════════════════════════════════════════════════════════════

@dataclass
class Proposal:
    """
    Governance proposal record.

    Fields:
        id:               Identifier assigned by the registry
        description:      Free-text rationale
        recipient:        Address the action is sent to
        call_data:        Opaque payload for the recipient
        voting_deadline:  Votes accepted while now < voting_deadline
        votes_for:        Sum of supporting voter weight
        votes_against:    Sum of opposing voter weight
        status:           Current lifecycle stage
        created_at:       Creation timestamp (clock seconds)
        block_height:     Block height at creation
        resolved_at:      Timestamp of FINISHED / REJECTED
    """
    id: int
    description: str = ""
    recipient: str = ZERO_ADDRESS
    call_data: bytes = b""
    voting_deadline: int = 0
    votes_for: int = 0
    votes_against: int = 0
    status: ProposalStatus = ProposalStatus.UNDEFINED
    created_at: int = 0
    block_height: int = 0
    resolved_at: Optional[int] = None
    _history: List[Dict[str, Any]] = field(default_factory=list, repr=False)

    @classmethod
    def undefined(cls, proposal_id: int) -> "Proposal":
        """Zero-valued record returned for ids that were never created."""
        return cls(id=proposal_id)

    # ── Properties ────────────────────────────────────────────────────

    @property
    def action(self) -> ProposalAction:
        return ProposalAction(recipient=self.recipient, call_data=self.call_data)

    @property
    def proposal_hash(self) -> str:
        """Deterministic hash of the immutable proposal fields."""
        payload = (
            self.id.to_bytes(32, "big")
            + bytes.fromhex(self.recipient[2:])
            + keccak(self.call_data)
            + self.voting_deadline.to_bytes(32, "big")
            + self.description.encode()
        )
        return "0x" + keccak(payload).hex()

    @property
    def exists(self) -> bool:
        return self.status != ProposalStatus.UNDEFINED

    @property
    def is_terminal(self) -> bool:
        return self.status in (ProposalStatus.FINISHED, ProposalStatus.REJECTED)

    @property
    def total_votes(self) -> int:
        return self.votes_for + self.votes_against

    @property
    def history(self) -> List[Dict[str, Any]]:
        return list(self._history)

    # ── State transitions ─────────────────────────────────────────────

    def transition_to(self, new_status: ProposalStatus, timestamp: int, reason: str = ""):
        """
        Advance proposal to *new_status*.

        Raises ProposalLifecycleError on invalid transitions.
        """
        allowed = _VALID_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise ProposalLifecycleError(
                f"Cannot transition from {self.status.name} → {new_status.name}. "
                f"Allowed: {[s.name for s in allowed]}"
            )
        old = self.status
        self._history.append({
            "from": old.name,
            "to": new_status.name,
            "reason": reason,
            "timestamp": timestamp,
        })
        self.status = new_status
        logger.debug(f"Proposal #{self.id}: {old.name} → {new_status.name} | {reason}")

    def mark_finished(self, timestamp: int):
        self.transition_to(ProposalStatus.FINISHED, timestamp, "Accepted and executed")
        self.resolved_at = timestamp

    def mark_rejected(self, timestamp: int, reason: str = "Quorum or majority not reached"):
        self.transition_to(ProposalStatus.REJECTED, timestamp, reason)
        self.resolved_at = timestamp

    # ── Serialization ─────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "recipient": self.recipient,
            "callData": "0x" + self.call_data.hex(),
            "votingDeadline": self.voting_deadline,
            "votesFor": str(self.votes_for),
            "votesAgainst": str(self.votes_against),
            "status": self.status.name,
            "createdAt": self.created_at,
            "blockHeight": self.block_height,
            "resolvedAt": self.resolved_at,
            "proposalHash": self.proposal_hash,
        }

    def __repr__(self) -> str:
        return (
            f"<Proposal #{self.id} status={self.status.name} "
            f"for={self.votes_for} against={self.votes_against}>"
        )


# ══════════════════════════════════════════════════════════════════════
#  REGISTRY
# ══════════════════════════════════════════════════════════════════════

class ProposalRegistry:
    """
    Stores proposals, assigns identifiers and gates creation to admins.

    Owns the governance parameters: new proposals snapshot the current
    debating period into their deadline.
    """

    def __init__(
        self,
        access,
        params,
        clock,
        events: EventLog,
        id_scheme: ProposalIdScheme = ProposalIdScheme.SEQUENTIAL,
    ):
        """
        Args:
            access:    AccessControl used for the admin check
            params:    ParameterStore holding quorum / debating period
            clock:     Clock supplying now() and block_height()
            events:    Event log receiving ProposalAdded
            id_scheme: Identifier derivation
        """
        self.access = access
        self.params = params
        self.clock = clock
        self.events = events
        self.id_scheme = ProposalIdScheme(id_scheme)
        self._proposals: Dict[int, Proposal] = {}
        self._count = 0
        self._next_sequential_id = 1

    @property
    def count(self) -> int:
        """Number of proposals ever created."""
        return self._count

    def _next_id(self) -> int:
        if self.id_scheme == ProposalIdScheme.BLOCK_OFFSET:
            pid = self.clock.block_height() + self._count
            if pid in self._proposals:
                raise ProposalIdCollisionError(
                    f"Proposal id {pid} already in use "
                    f"(block {self.clock.block_height()}, count {self._count})"
                )
            return pid
        pid = self._next_sequential_id
        self._next_sequential_id += 1
        return pid

    def add_proposal(
        self,
        caller: str,
        recipient: str,
        description: str,
        call_data: bytes = b"",
    ) -> Proposal:
        """
        Create a proposal in the ADDED state.

        Raises:
            UnauthorizedError:        caller is not an admin
            InvalidProposalError:     malformed recipient / description / payload
            ProposalIdCollisionError: block-offset id already taken
        """
        self.access.require_admin(caller)

        try:
            recipient = normalize_address(recipient)
        except InvalidAddressError as e:
            raise InvalidProposalError(f"Invalid recipient: {recipient!r}") from e
        if not isinstance(description, str):
            raise InvalidProposalError("Proposal description must be a string")
        if not isinstance(call_data, (bytes, bytearray)):
            raise InvalidProposalError("Proposal call data must be bytes")

        pid = self._next_id()
        now = self.clock.now()
        proposal = Proposal(
            id=pid,
            description=description,
            recipient=recipient,
            call_data=bytes(call_data),
            voting_deadline=now + self.params.debating_period,
            created_at=now,
            block_height=self.clock.block_height(),
        )
        proposal.transition_to(ProposalStatus.ADDED, now, "Proposal added")

        self._proposals[pid] = proposal
        self._count += 1

        self.events.emit(ProposalAdded(id=pid, description=description, recipient=recipient))
        logger.info(
            f"ProposalAdded #{pid} → {recipient} "
            f"(deadline={proposal.voting_deadline})"
        )
        return proposal

    # ── Lookup ────────────────────────────────────────────────────────

    def get(self, proposal_id: int) -> Proposal:
        """Stored proposal, or a zero-valued UNDEFINED record."""
        proposal = self._proposals.get(proposal_id)
        if proposal is None:
            return Proposal.undefined(proposal_id)
        return proposal

    def get_or_raise(self, proposal_id: int) -> Proposal:
        proposal = self._proposals.get(proposal_id)
        if proposal is None:
            raise ProposalNotFoundError(f"Proposal #{proposal_id} does not exist")
        return proposal

    def exists(self, proposal_id: int) -> bool:
        return proposal_id in self._proposals

    def ids(self) -> List[int]:
        return list(self._proposals.keys())

    def all(self) -> List[Proposal]:
        return list(self._proposals.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self._count,
            "idScheme": self.id_scheme.value,
            "parameters": self.params.to_dict(),
            "proposals": {pid: p.to_dict() for pid, p in self._proposals.items()},
        }

    def __repr__(self) -> str:
        return f"<ProposalRegistry proposals={self._count}>"
