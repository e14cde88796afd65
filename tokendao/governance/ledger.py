"""
Deposit / Withdraw Ledger

Tracks each account's locked balance (its voting weight) and the gate that
keeps the balance in the vault while the account has open voting
commitments. Tokens always move through the token adapter first; the ledger
changes only after the transfer is confirmed.

Two gating policies exist and exactly one is chosen per DAO:

  TIMESTAMP  voting extends ``lock_expiry`` to the proposal deadline;
             withdrawal is blocked while now < lock_expiry. The lock lapses
             with time, whether or not the proposal was ever resolved.
  COUNTER    voting increments ``active_vote_count``; resolving a proposal
             decrements it for every voter. Withdrawal is blocked while the
             count is non-zero, so an unresolved proposal keeps its voters
             locked indefinitely.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from ..logger import get_logger
from ..tokens.adapter import TokenAdapter
from .events import DepositMade, EventLog, WithdrawalMade
from .proposals import GovernanceError

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EXCEPTIONS
# ══════════════════════════════════════════════════════════════════════

class LedgerError(GovernanceError):
    """Base deposit/withdraw error."""


class NonPositiveAmountError(LedgerError):
    """Deposit amount must be positive."""


class NoProposalsYetError(LedgerError):
    """Deposits open only after the first proposal exists."""


class NoBalanceError(LedgerError):
    """Nothing to withdraw."""


class WithdrawLockedError(LedgerError):
    """Account still has open voting commitments."""


class TransferFailedError(LedgerError):
    """The token refused or failed the transfer."""


# ══════════════════════════════════════════════════════════════════════
#  ACCOUNT STATE
# ══════════════════════════════════════════════════════════════════════

class LockPolicy(str, Enum):
    TIMESTAMP = "timestamp"
    COUNTER = "counter"


@dataclass
class AccountState:
    locked_balance: int = 0
    lock_expiry: int = 0
    active_vote_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lockedBalance": str(self.locked_balance),
            "lockExpiry": self.lock_expiry,
            "activeVoteCount": self.active_vote_count,
        }


# ══════════════════════════════════════════════════════════════════════
#  LEDGER
# ══════════════════════════════════════════════════════════════════════

class DepositLedger:
    """Locked balances held in vault custody on behalf of voters."""

    def __init__(
        self,
        adapter: TokenAdapter,
        events: EventLog,
        policy: LockPolicy = LockPolicy.TIMESTAMP,
    ):
        self.adapter = adapter
        self.events = events
        self.policy = LockPolicy(policy)
        self._accounts: Dict[str, AccountState] = {}

    # ── Queries ───────────────────────────────────────────────────────

    def account(self, address: str) -> AccountState:
        """Copy of the account's state (zero-valued if unknown)."""
        state = self._accounts.get(address)
        if state is None:
            return AccountState()
        return AccountState(
            locked_balance=state.locked_balance,
            lock_expiry=state.lock_expiry,
            active_vote_count=state.active_vote_count,
        )

    def locked_balance(self, address: str) -> int:
        state = self._accounts.get(address)
        return state.locked_balance if state else 0

    @property
    def total_locked(self) -> int:
        return sum(s.locked_balance for s in self._accounts.values())

    def is_locked(self, address: str, now: int) -> bool:
        state = self._accounts.get(address)
        if state is None:
            return False
        if self.policy == LockPolicy.TIMESTAMP:
            return now < state.lock_expiry
        return state.active_vote_count != 0

    # ── Vote gate ─────────────────────────────────────────────────────

    def record_vote(self, address: str, voting_deadline: int):
        """Apply the policy's lock for a freshly cast vote."""
        state = self._accounts.setdefault(address, AccountState())
        if self.policy == LockPolicy.TIMESTAMP:
            state.lock_expiry = max(state.lock_expiry, voting_deadline)
        else:
            state.active_vote_count += 1

    def release_vote(self, address: str):
        """Undo one vote's lock once its proposal is resolved (counter policy only)."""
        if self.policy != LockPolicy.COUNTER:
            return
        state = self._accounts.get(address)
        if state is not None and state.active_vote_count > 0:
            state.active_vote_count -= 1

    # ── Deposit / withdraw ────────────────────────────────────────────

    async def deposit(self, account: str, amount: int, has_proposals: bool) -> DepositMade:
        """
        Pull *amount* from *account* into the vault and credit its balance.

        Raises:
            NonPositiveAmountError, NoProposalsYetError, TransferFailedError
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise NonPositiveAmountError(f"Deposit amount must be an integer, got {amount!r}")
        if amount <= 0:
            raise NonPositiveAmountError(f"Deposit amount must be positive, got {amount}")
        if not has_proposals:
            raise NoProposalsYetError("No proposal has been added yet")

        if not await self.adapter.pull_transfer(account, amount):
            raise TransferFailedError(f"Token transfer of {amount} from {account} failed")

        state = self._accounts.setdefault(account, AccountState())
        state.locked_balance += amount

        logger.info(f"DepositMade: {account} amount={amount} (locked={state.locked_balance})")
        return self.events.emit(DepositMade(account=account, amount=amount))

    async def withdraw(self, account: str, now: int) -> WithdrawalMade:
        """
        Return the account's entire locked balance.

        Raises:
            NoBalanceError, WithdrawLockedError, TransferFailedError
        """
        amount = self.locked_balance(account)
        if amount == 0:
            raise NoBalanceError(f"{account} has no tokens to withdraw")
        if self.is_locked(account, now):
            state = self._accounts[account]
            if self.policy == LockPolicy.TIMESTAMP:
                detail = f"locked until {state.lock_expiry}"
            else:
                detail = f"{state.active_vote_count} unresolved vote(s)"
            raise WithdrawLockedError(f"{account} cannot withdraw while locked ({detail})")

        if not await self.adapter.push_transfer(account, amount):
            raise TransferFailedError(f"Token transfer of {amount} to {account} failed")

        self._accounts[account].locked_balance = 0

        logger.info(f"WithdrawalMade: {account} amount={amount}")
        return self.events.emit(WithdrawalMade(account=account, amount=amount))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "policy": self.policy.value,
            "totalLocked": str(self.total_locked),
            "accounts": {a: s.to_dict() for a, s in self._accounts.items()},
        }

    def __repr__(self) -> str:
        return f"<DepositLedger policy={self.policy.value} locked={self.total_locked}>"
