"""
tokendao Governance

Provides:
  - Proposal / ProposalStatus / ProposalRegistry     (proposals.py)
  - DepositLedger / LockPolicy / AccountState         (ledger.py)
  - VotingEngine / VoteRecord / VotingResult          (voting.py)
  - ActionExecutor / ExecutionRecord                  (execution.py)
  - ParameterStore / GovernanceParameters             (params.py)
  - AccessControl / ADMIN_ROLE                        (access.py)
  - DAO                                               (dao.py)
"""

from .proposals import (
    GovernanceError,
    InvalidCallerError,
    InvalidProposalError,
    Proposal,
    ProposalAction,
    ProposalIdCollisionError,
    ProposalIdScheme,
    ProposalLifecycleError,
    ProposalNotFoundError,
    ProposalRegistry,
    ProposalStatus,
)
from .access import ADMIN_ROLE, AccessControl, UnauthorizedError
from .params import (
    GovernanceParameters,
    InvalidParameterError,
    NonPositivePeriodError,
    NonPositiveQuorumError,
    ParameterStore,
)
from .ledger import (
    AccountState,
    DepositLedger,
    LedgerError,
    LockPolicy,
    NoBalanceError,
    NonPositiveAmountError,
    NoProposalsYetError,
    TransferFailedError,
    WithdrawLockedError,
)
from .voting import (
    AlreadyResolvedError,
    AlreadyVotedError,
    NoVotingWeightError,
    VoteRecord,
    VotingClosedError,
    VotingEngine,
    VotingError,
    VotingNotFinishedError,
    VotingResult,
)
from .execution import (
    ActionExecutor,
    ExecutionFailedError,
    ExecutionRecord,
    ReentrancyError,
)
from .events import (
    DebatingPeriodChanged,
    DepositMade,
    EventLog,
    ProposalAdded,
    ProposalFinished,
    ProposalRejected,
    QuorumChanged,
    Voted,
    WithdrawalMade,
)
from .clock import Clock, ManualClock, SystemClock
from .dao import DAO

__all__ = [
    # Proposals
    "GovernanceError",
    "InvalidCallerError",
    "InvalidProposalError",
    "Proposal",
    "ProposalAction",
    "ProposalIdCollisionError",
    "ProposalIdScheme",
    "ProposalLifecycleError",
    "ProposalNotFoundError",
    "ProposalRegistry",
    "ProposalStatus",
    # Access / parameters
    "ADMIN_ROLE",
    "AccessControl",
    "UnauthorizedError",
    "GovernanceParameters",
    "InvalidParameterError",
    "NonPositivePeriodError",
    "NonPositiveQuorumError",
    "ParameterStore",
    # Ledger
    "AccountState",
    "DepositLedger",
    "LedgerError",
    "LockPolicy",
    "NoBalanceError",
    "NonPositiveAmountError",
    "NoProposalsYetError",
    "TransferFailedError",
    "WithdrawLockedError",
    # Voting
    "AlreadyResolvedError",
    "AlreadyVotedError",
    "NoVotingWeightError",
    "VoteRecord",
    "VotingClosedError",
    "VotingEngine",
    "VotingError",
    "VotingNotFinishedError",
    "VotingResult",
    # Execution
    "ActionExecutor",
    "ExecutionFailedError",
    "ExecutionRecord",
    "ReentrancyError",
    # Events
    "DebatingPeriodChanged",
    "DepositMade",
    "EventLog",
    "ProposalAdded",
    "ProposalFinished",
    "ProposalRejected",
    "QuorumChanged",
    "Voted",
    "WithdrawalMade",
    # Clock
    "Clock",
    "ManualClock",
    "SystemClock",
    # Facade
    "DAO",
]
