"""
Token-Weighted Voting Engine

Implements:
  - Weight = voter's locked balance at the moment the vote is cast
  - One vote per account per proposal
  - Votes accepted strictly before the proposal's deadline
  - Quorum: votes_for + votes_against >= current minimal quorum
  - Majority: votes_for > votes_against (a tie rejects)
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Set

from ..logger import get_logger
from .events import EventLog, Voted
from .ledger import DepositLedger
from .proposals import (
    GovernanceError,
    Proposal,
    ProposalNotFoundError,
)

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EXCEPTIONS
# ══════════════════════════════════════════════════════════════════════

class VotingError(GovernanceError):
    """Base voting error."""


class VotingClosedError(VotingError):
    """Deadline reached; the proposal no longer accepts votes."""


class AlreadyResolvedError(VotingError):
    """Proposal is already FINISHED or REJECTED."""


class NoVotingWeightError(VotingError):
    """Voter has no locked balance."""


class AlreadyVotedError(VotingError):
    """Voter already cast a vote on this proposal."""


class VotingNotFinishedError(VotingError):
    """Resolution attempted before the deadline."""


# ══════════════════════════════════════════════════════════════════════
#  VOTE DATA
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class VoteRecord:
    """An individual vote cast by a voter."""
    proposal_id: int
    voter: str
    support: bool
    weight: int
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposalId": self.proposal_id,
            "voter": self.voter,
            "support": self.support,
            "weight": str(self.weight),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class VotingResult:
    """Outcome of a proposal measured against the quorum in force at resolution."""
    proposal_id: int
    votes_for: int
    votes_against: int
    minimal_quorum: int

    @property
    def total_votes(self) -> int:
        return self.votes_for + self.votes_against

    @property
    def quorum_reached(self) -> bool:
        return self.total_votes >= self.minimal_quorum

    @property
    def accepted(self) -> bool:
        return self.votes_for > self.votes_against

    @property
    def passed(self) -> bool:
        return self.quorum_reached and self.accepted

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposalId": self.proposal_id,
            "votesFor": str(self.votes_for),
            "votesAgainst": str(self.votes_against),
            "minimalQuorum": str(self.minimal_quorum),
            "quorumReached": self.quorum_reached,
            "accepted": self.accepted,
            "passed": self.passed,
        }


# ══════════════════════════════════════════════════════════════════════
#  VOTING ENGINE
# ══════════════════════════════════════════════════════════════════════

class VotingEngine:
    """
    Accepts weighted votes, keeps per-proposal voter lists and decides
    whether a proposal may be resolved.
    """

    def __init__(self, ledger: DepositLedger, events: EventLog):
        self.ledger = ledger
        self.events = events
        self._votes: Dict[int, List[VoteRecord]] = {}
        self._voters: Dict[int, Set[str]] = {}  # proposal_id → {voter_addresses}

    # ── Cast vote ─────────────────────────────────────────────────────

    def cast_vote(self, proposal: Proposal, voter: str, support: bool, now: int) -> VoteRecord:
        """
        Add *voter*'s current locked balance to one side of the tally.

        Raises:
            ProposalNotFoundError, VotingClosedError, AlreadyResolvedError,
            NoVotingWeightError, AlreadyVotedError
        """
        pid = proposal.id
        if not proposal.exists:
            raise ProposalNotFoundError(f"Proposal #{pid} does not exist")
        if now >= proposal.voting_deadline:
            raise VotingClosedError(
                f"Voting on proposal #{pid} closed at {proposal.voting_deadline}"
            )
        if proposal.is_terminal:
            raise AlreadyResolvedError(
                f"Proposal #{pid} is already {proposal.status.name}"
            )

        weight = self.ledger.locked_balance(voter)
        if weight == 0:
            raise NoVotingWeightError(f"{voter} has no locked tokens to vote with")
        if self.has_voted(pid, voter):
            raise AlreadyVotedError(f"{voter} has already voted on proposal #{pid}")

        self._voters.setdefault(pid, set()).add(voter)
        self.ledger.record_vote(voter, proposal.voting_deadline)

        if support:
            proposal.votes_for += weight
        else:
            proposal.votes_against += weight

        record = VoteRecord(
            proposal_id=pid,
            voter=voter,
            support=bool(support),
            weight=weight,
            timestamp=now,
        )
        self._votes.setdefault(pid, []).append(record)
        self.events.emit(Voted(account=voter, id=pid, support=bool(support)))

        logger.info(
            f"Voted: {voter} → {'FOR' if support else 'AGAINST'} on proposal #{pid} "
            f"(weight={weight})"
        )
        return record

    # ── Resolution ────────────────────────────────────────────────────

    def require_resolvable(self, proposal: Proposal, now: int):
        """
        Raises:
            ProposalNotFoundError, VotingNotFinishedError, AlreadyResolvedError
        """
        if not proposal.exists:
            raise ProposalNotFoundError(f"Proposal #{proposal.id} does not exist")
        if now < proposal.voting_deadline:
            raise VotingNotFinishedError(
                f"Voting on proposal #{proposal.id} runs until {proposal.voting_deadline}"
            )
        if proposal.is_terminal:
            raise AlreadyResolvedError(
                f"Proposal #{proposal.id} is already {proposal.status.name}"
            )

    def tally(self, proposal: Proposal, minimal_quorum: int) -> VotingResult:
        return VotingResult(
            proposal_id=proposal.id,
            votes_for=proposal.votes_for,
            votes_against=proposal.votes_against,
            minimal_quorum=minimal_quorum,
        )

    def release_voters(self, proposal_id: int):
        """Release the vote gate of every account that voted on *proposal_id*."""
        for record in self._votes.get(proposal_id, []):
            self.ledger.release_vote(record.voter)

    # ── Queries ───────────────────────────────────────────────────────

    def has_voted(self, proposal_id: int, voter: str) -> bool:
        return voter in self._voters.get(proposal_id, set())

    def get_votes(self, proposal_id: int) -> List[VoteRecord]:
        return list(self._votes.get(proposal_id, []))

    def voters(self, proposal_id: int) -> List[str]:
        """Voters in the order their ballots were cast."""
        return [r.voter for r in self._votes.get(proposal_id, [])]

    def voter_count(self, proposal_id: int) -> int:
        return len(self._voters.get(proposal_id, set()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposals": {
                pid: [r.to_dict() for r in records]
                for pid, records in self._votes.items()
            },
        }

    def __repr__(self) -> str:
        return f"<VotingEngine proposals={len(self._votes)}>"
