"""
DAO

Token-weighted governance facade. Holders deposit tokens into the DAO vault
to gain voting weight, the admin adds proposals carrying a recipient call,
holders vote during the debating period, and anyone may resolve a proposal
once its deadline has passed.

Every mutating operation runs under one asyncio.Lock. A context variable
records which DAOs the current task is operating on, so a recipient handler
that calls back into the same DAO during execution fails with
ReentrancyError instead of waiting on the lock forever.
"""

import asyncio
import contextvars
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Tuple

from ..constants import DAO_DEFAULT_DEBATING_PERIOD, DAO_DEFAULT_MINIMAL_QUORUM
from ..crypto.address import generate_contract_address, is_zero_address, normalize_address
from ..exceptions import InvalidAddressError
from ..logger import get_logger
from ..tokens.adapter import TokenAdapter
from .access import AccessControl
from .clock import Clock, SystemClock
from .events import (
    DebatingPeriodChanged,
    DepositMade,
    EventLog,
    ProposalFinished,
    ProposalRejected,
    QuorumChanged,
    Voted,
    WithdrawalMade,
)
from .execution import ActionExecutor, ExecutionFailedError, ReentrancyError
from .ledger import AccountState, DepositLedger, LockPolicy
from .params import GovernanceParameters, ParameterStore
from .proposals import (
    InvalidCallerError,
    Proposal,
    ProposalIdScheme,
    ProposalRegistry,
)
from .voting import VotingEngine

logger = get_logger(__name__)

# ids of the DAOs whose operation is running in the current task
_active_operations: contextvars.ContextVar[Tuple[int, ...]] = contextvars.ContextVar(
    "tokendao_active_operations", default=()
)


class DAO:
    """
    Governance state machine over a fungible voting token.

    Args:
        token:           Token exposing async transfer / transfer_from
        deployer:        Address granted the admin role
        minimal_quorum:  Minimum votes_for + votes_against to decide a proposal
        debating_period: Seconds a proposal accepts votes
        lock_policy:     Withdrawal gate (TIMESTAMP or COUNTER)
        id_scheme:       Proposal id derivation (SEQUENTIAL or BLOCK_OFFSET)
        clock:           Time source; defaults to SystemClock
        executor:        Delivers accepted proposal actions
        vault:           Custody address; defaults to the deployer's first
                         CREATE address
    """

    def __init__(
        self,
        token,
        deployer: str,
        minimal_quorum: int = DAO_DEFAULT_MINIMAL_QUORUM,
        debating_period: int = DAO_DEFAULT_DEBATING_PERIOD,
        *,
        lock_policy: LockPolicy = LockPolicy.TIMESTAMP,
        id_scheme: ProposalIdScheme = ProposalIdScheme.SEQUENTIAL,
        clock: Optional[Clock] = None,
        executor: Optional[ActionExecutor] = None,
        vault: Optional[str] = None,
    ):
        deployer = normalize_address(deployer)
        self.token = token
        self.clock = clock or SystemClock()
        self.executor = executor if executor is not None else ActionExecutor()
        self.vault = normalize_address(vault) if vault else generate_contract_address(deployer, 1)

        self._events = EventLog()
        self.access = AccessControl(deployer)
        self.params = ParameterStore(
            GovernanceParameters(minimal_quorum, debating_period),
            self.access,
            self._events,
        )
        self.adapter = TokenAdapter(token, self.vault)
        self.ledger = DepositLedger(self.adapter, self._events, lock_policy)
        self.registry = ProposalRegistry(
            self.access, self.params, self.clock, self._events, id_scheme
        )
        self.voting = VotingEngine(self.ledger, self._events)
        self._lock = asyncio.Lock()

        logger.info(
            f"DAO deployed by {deployer} (vault={self.vault}, quorum={minimal_quorum}, "
            f"period={debating_period}s, policy={self.ledger.policy.value}, "
            f"ids={self.registry.id_scheme.value})"
        )

    @classmethod
    def from_config(
        cls,
        config,
        token,
        deployer: str,
        clock: Optional[Clock] = None,
        executor: Optional[ActionExecutor] = None,
        vault: Optional[str] = None,
    ) -> "DAO":
        """
        Build a DAO from a :class:`tokendao.config.DAOConfig`.

        The whole config is validated first, then its [logging] level is
        applied before the DAO is deployed.
        """
        config.validate()
        config.logging.apply()
        return cls(
            token,
            deployer,
            config.dao.minimal_quorum,
            config.dao.debating_period,
            lock_policy=LockPolicy(config.dao.lock_policy),
            id_scheme=ProposalIdScheme(config.dao.proposal_id_scheme),
            clock=clock,
            executor=executor,
            vault=vault,
        )

    # ── Guards ────────────────────────────────────────────────────────

    @asynccontextmanager
    async def _operation(self, name: str):
        active = _active_operations.get()
        if id(self) in active:
            raise ReentrancyError(f"{name} called while another DAO operation is running")
        async with self._lock:
            token = _active_operations.set(active + (id(self),))
            try:
                yield
            finally:
                _active_operations.reset(token)

    @staticmethod
    def _require_caller(caller: Optional[str]) -> str:
        if is_zero_address(caller):
            raise InvalidCallerError(f"Invalid caller: {caller!r}")
        try:
            return normalize_address(caller)
        except InvalidAddressError as e:
            raise InvalidCallerError(f"Invalid caller: {caller!r}") from e

    # ══════════════════════════════════════════════════════════════════
    #  PROPOSALS
    # ══════════════════════════════════════════════════════════════════

    async def add_proposal(
        self,
        caller: str,
        recipient: str,
        description: str,
        call_data: bytes = b"",
    ) -> Proposal:
        async with self._operation("add_proposal"):
            caller = self._require_caller(caller)
            return self.registry.add_proposal(caller, recipient, description, call_data)

    # ══════════════════════════════════════════════════════════════════
    #  DEPOSIT / WITHDRAW
    # ══════════════════════════════════════════════════════════════════

    async def deposit(self, caller: str, amount: int) -> DepositMade:
        """
        Lock *amount* tokens from *caller* in the vault.

        The caller must have approved the vault for at least *amount*.
        """
        async with self._operation("deposit"):
            caller = self._require_caller(caller)
            return await self.ledger.deposit(caller, amount, self.registry.count > 0)

    async def withdraw(self, caller: str) -> WithdrawalMade:
        """Return the caller's whole locked balance."""
        async with self._operation("withdraw"):
            caller = self._require_caller(caller)
            return await self.ledger.withdraw(caller, self.clock.now())

    # ══════════════════════════════════════════════════════════════════
    #  VOTING / RESOLUTION
    # ══════════════════════════════════════════════════════════════════

    async def vote(self, caller: str, proposal_id: int, support: bool) -> Voted:
        async with self._operation("vote"):
            caller = self._require_caller(caller)
            proposal = self.registry.get(proposal_id)
            self.voting.cast_vote(proposal, caller, support, self.clock.now())
            return self._events.last(Voted)

    async def finish_proposal(self, caller: str, proposal_id: int):
        """
        Resolve a proposal whose deadline has passed.

        Passed proposals have their action executed before the status flips;
        a failed execution raises ExecutionFailedError and leaves the
        proposal ADDED so it can be resolved again later.

        Returns:
            ProposalFinished or ProposalRejected event
        """
        async with self._operation("finish_proposal"):
            caller = self._require_caller(caller)
            now = self.clock.now()
            proposal = self.registry.get(proposal_id)
            self.voting.require_resolvable(proposal, now)

            result = self.voting.tally(proposal, self.params.minimal_quorum)
            if result.passed:
                if not await self.executor.execute(proposal.action):
                    logger.warning(
                        f"Execution of proposal #{proposal_id} → {proposal.recipient} failed; "
                        f"proposal stays {proposal.status.name}"
                    )
                    raise ExecutionFailedError(
                        f"Call to {proposal.recipient} for proposal #{proposal_id} failed"
                    )
                proposal.mark_finished(now)
                self.voting.release_voters(proposal_id)
                logger.info(f"ProposalFinished #{proposal_id} (resolved by {caller})")
                return self._events.emit(ProposalFinished(id=proposal_id))

            reason = "Quorum not reached" if not result.quorum_reached else "Majority not reached"
            proposal.mark_rejected(now, reason)
            self.voting.release_voters(proposal_id)
            logger.info(
                f"ProposalRejected #{proposal_id}: {reason} "
                f"(for={result.votes_for}, against={result.votes_against}, "
                f"quorum={result.minimal_quorum})"
            )
            return self._events.emit(ProposalRejected(
                id=proposal_id,
                votes_for=result.votes_for,
                votes_against=result.votes_against,
                min_quorum=result.minimal_quorum,
            ))

    # ══════════════════════════════════════════════════════════════════
    #  ADMIN PARAMETERS
    # ══════════════════════════════════════════════════════════════════

    async def set_minimal_quorum(self, caller: str, value: int) -> QuorumChanged:
        async with self._operation("set_minimal_quorum"):
            caller = self._require_caller(caller)
            return self.params.set_minimal_quorum(caller, value)

    async def set_debating_period(self, caller: str, value: int) -> DebatingPeriodChanged:
        async with self._operation("set_debating_period"):
            caller = self._require_caller(caller)
            return self.params.set_debating_period(caller, value)

    # ══════════════════════════════════════════════════════════════════
    #  VIEWS
    # ══════════════════════════════════════════════════════════════════

    def proposals(self, proposal_id: int) -> Proposal:
        """Stored proposal, or a zero-valued UNDEFINED record."""
        return self.registry.get(proposal_id)

    @property
    def proposals_count(self) -> int:
        return self.registry.count

    def frozen_tokens(self, account: str) -> int:
        return self.ledger.locked_balance(normalize_address(account))

    def user_votes(self, account: str, proposal_id: int) -> bool:
        return self.voting.has_voted(proposal_id, normalize_address(account))

    def account(self, address: str) -> AccountState:
        return self.ledger.account(normalize_address(address))

    def is_admin(self, address: str) -> bool:
        return self.access.is_admin(address)

    @property
    def minimal_quorum(self) -> int:
        return self.params.minimal_quorum

    @property
    def debating_period(self) -> int:
        return self.params.debating_period

    @property
    def lock_policy(self) -> LockPolicy:
        return self.ledger.policy

    @property
    def events(self) -> EventLog:
        return self._events

    def voters(self, proposal_id: int) -> List[str]:
        return self.voting.voters(proposal_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vault": self.vault,
            "admins": self.access.to_dict(),
            "registry": self.registry.to_dict(),
            "ledger": self.ledger.to_dict(),
            "votes": self.voting.to_dict(),
            "executor": self.executor.to_dict(),
            "events": len(self._events),
        }

    def __repr__(self) -> str:
        return (
            f"<DAO vault={self.vault} proposals={self.proposals_count} "
            f"quorum={self.minimal_quorum} policy={self.ledger.policy.value}>"
        )
