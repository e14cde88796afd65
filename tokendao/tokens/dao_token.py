"""
DaoToken: ERC20-style governance token

Implements a Python-native fungible token with:
  - ERC-20 interface (transfer, approve, transferFrom, balanceOf, allowance)
  - Owner-only mint / burn / burnFrom
  - Transfer, Approval, TokensMinted and TokensBurned events

Amounts are integers in base units (18 decimals by default).
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from ..constants import (
    DAO_TOKEN_DECIMALS,
    DAO_TOKEN_INITIAL_SUPPLY,
    DAO_TOKEN_NAME,
    DAO_TOKEN_SYMBOL,
)
from ..crypto.address import is_zero_address, normalize_address
from ..exceptions import DAOException
from ..logger import get_logger

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EXCEPTIONS
# ══════════════════════════════════════════════════════════════════════

class DaoTokenError(DAOException):
    """Base exception for token operations."""


class InsufficientBalanceError(DaoTokenError):
    """Raised when sender balance is too low."""


class InsufficientAllowanceError(DaoTokenError):
    """Raised when spender allowance is too low."""


class NotOwnerError(DaoTokenError):
    """Raised when a privileged call does not come from the owner."""


# ══════════════════════════════════════════════════════════════════════
#  EVENTS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TransferEvent:
    """Emitted on every successful transfer."""
    token_symbol: str
    sender: str
    recipient: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "Transfer",
            "token": self.token_symbol,
            "from": self.sender,
            "to": self.recipient,
            "amount": str(self.amount),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ApprovalEvent:
    """Emitted on every successful approve."""
    token_symbol: str
    owner: str
    spender: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "Approval",
            "token": self.token_symbol,
            "owner": self.owner,
            "spender": self.spender,
            "amount": str(self.amount),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class TokensMintedEvent:
    token_symbol: str
    recipient: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "TokensMinted",
            "token": self.token_symbol,
            "to": self.recipient,
            "amount": str(self.amount),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class TokensBurnedEvent:
    token_symbol: str
    account: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "TokensBurned",
            "token": self.token_symbol,
            "from": self.account,
            "amount": str(self.amount),
            "timestamp": self.timestamp,
        }


# ══════════════════════════════════════════════════════════════════════
#  DAO TOKEN
# ══════════════════════════════════════════════════════════════════════

class DaoToken:
    """
    Fungible voting token.

    Mirrors ERC-20 semantics:
        - balance_of(address) → int
        - transfer(sender, recipient, amount)
        - approve(owner, spender, amount)
        - transfer_from(spender, sender, recipient, amount)
        - total_supply → int

    Owner-only supply management:
        - mint(caller, recipient, amount)
        - burn(caller, account, amount)
        - burn_from(caller, account, amount)   (spends caller's allowance)

    State-mutating calls are coroutines so the token can stand in for a
    remote contract behind the DAO's token adapter.
    """

    def __init__(
        self,
        owner: str,
        name: str = DAO_TOKEN_NAME,
        symbol: str = DAO_TOKEN_SYMBOL,
        decimals: int = DAO_TOKEN_DECIMALS,
        initial_supply: int = DAO_TOKEN_INITIAL_SUPPLY,
    ):
        """
        Args:
            owner: Deploying account, credited with the initial supply
            name: Human-readable token name
            symbol: Short ticker
            decimals: Fractional digits
            initial_supply: Base units minted to *owner*
        """
        if not name:
            raise DaoTokenError("Token name cannot be empty")
        if not symbol:
            raise DaoTokenError("Token symbol cannot be empty")
        if decimals < 0 or decimals > 18:
            raise DaoTokenError(f"Decimals must be 0-18, got {decimals}")
        if initial_supply < 0:
            raise DaoTokenError("Initial supply cannot be negative")

        self.owner = normalize_address(owner)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._total_supply = 0

        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}  # (owner, spender)
        self._events: List[Any] = []

        if initial_supply > 0:
            self._mint(self.owner, initial_supply)

        logger.info(f"DaoToken deployed: {symbol} ({name}), supply={initial_supply}")

    @classmethod
    def from_config(cls, config, owner: str) -> "DaoToken":
        """Deploy a token from the [token] section of a DAOConfig."""
        config.token.validate()
        return cls(
            owner,
            name=config.token.name,
            symbol=config.token.symbol,
            initial_supply=config.token.initial_supply,
        )

    # ── Read-only views ───────────────────────────────────────────────

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, address: str) -> int:
        return self._balances.get(normalize_address(address), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get(
            (normalize_address(owner), normalize_address(spender)), 0
        )

    @property
    def events(self) -> List[Any]:
        return list(self._events)

    # ── Internal movements ────────────────────────────────────────────

    def _require_owner(self, caller: str):
        if normalize_address(caller) != self.owner:
            raise NotOwnerError(f"{caller} is not the token owner")

    @staticmethod
    def _require_int(amount, action: str):
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise DaoTokenError(f"{action} amount must be an integer, got {amount!r}")

    def _move(self, sender: str, recipient: str, amount: int) -> TransferEvent:
        self._require_int(amount, "Transfer")
        if is_zero_address(sender):
            raise DaoTokenError("Transfer from the zero address")
        if is_zero_address(recipient):
            raise DaoTokenError("Transfer to the zero address")
        if amount < 0:
            raise DaoTokenError("Transfer amount cannot be negative")

        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        bal = self._balances.get(sender, 0)
        if bal < amount:
            raise InsufficientBalanceError(
                f"{sender} balance {bal} < transfer amount {amount}"
            )

        self._balances[sender] = bal - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount

        event = TransferEvent(
            token_symbol=self.symbol,
            sender=sender,
            recipient=recipient,
            amount=amount,
        )
        self._events.append(event)
        return event

    def _mint(self, recipient: str, amount: int) -> TokensMintedEvent:
        self._require_int(amount, "Mint")
        if is_zero_address(recipient):
            raise DaoTokenError("Mint to the zero address")
        recipient = normalize_address(recipient)
        self._total_supply += amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        event = TokensMintedEvent(
            token_symbol=self.symbol, recipient=recipient, amount=amount
        )
        self._events.append(event)
        return event

    def _burn(self, account: str, amount: int) -> TokensBurnedEvent:
        self._require_int(amount, "Burn")
        if is_zero_address(account):
            raise DaoTokenError("Burn from the zero address")
        account = normalize_address(account)
        bal = self._balances.get(account, 0)
        if bal < amount:
            raise InsufficientBalanceError(
                f"{account} balance {bal} < burn amount {amount}"
            )
        self._balances[account] = bal - amount
        self._total_supply -= amount
        event = TokensBurnedEvent(
            token_symbol=self.symbol, account=account, amount=amount
        )
        self._events.append(event)
        return event

    def _check_allowance(self, owner: str, spender: str, amount: int, action: str) -> int:
        allow = self.allowance(owner, spender)
        if allow < amount:
            raise InsufficientAllowanceError(
                f"{action} amount {amount} exceeds allowance {allow}"
            )
        return allow

    def _check_balance(self, account: str, amount: int, action: str):
        bal = self.balance_of(account)
        if bal < amount:
            raise InsufficientBalanceError(
                f"{account} balance {bal} < {action} amount {amount}"
            )

    # ── Core ERC-20 operations ────────────────────────────────────────

    async def transfer(self, sender: str, recipient: str, amount: int) -> TransferEvent:
        """Move *amount* from *sender* to *recipient*."""
        event = self._move(sender, recipient, amount)
        logger.debug(f"Transfer: {event.sender} → {event.recipient} {amount} {self.symbol}")
        return event

    async def approve(self, owner: str, spender: str, amount: int) -> ApprovalEvent:
        """Set *spender*'s allowance over *owner*'s tokens."""
        if amount < 0:
            raise DaoTokenError("Allowance amount cannot be negative")
        if is_zero_address(owner) or is_zero_address(spender):
            raise DaoTokenError("Approve with the zero address")

        owner = normalize_address(owner)
        spender = normalize_address(spender)
        self._allowances[(owner, spender)] = amount

        event = ApprovalEvent(
            token_symbol=self.symbol, owner=owner, spender=spender, amount=amount
        )
        self._events.append(event)
        logger.debug(f"Approve: {owner} → {spender} allowance={amount} {self.symbol}")
        return event

    async def transfer_from(
        self,
        spender: str,
        sender: str,
        recipient: str,
        amount: int,
    ) -> TransferEvent:
        """
        Transfer on behalf of *sender* using *spender*'s allowance.

        Allowance and balance are both checked before anything moves, so a
        failing call leaves them untouched.
        """
        self._require_int(amount, "Transfer")
        allow = self._check_allowance(sender, spender, amount, "transfer")
        self._check_balance(sender, amount, "transfer")
        event = self._move(sender, recipient, amount)
        self._allowances[(event.sender, normalize_address(spender))] = allow - amount
        logger.debug(
            f"transferFrom: spender={spender} {event.sender} → {event.recipient} "
            f"{amount} {self.symbol}"
        )
        return event

    # ── Supply management (owner only) ────────────────────────────────

    async def mint(self, caller: str, recipient: str, amount: int) -> TokensMintedEvent:
        self._require_owner(caller)
        if amount <= 0:
            raise DaoTokenError("Mint amount must be positive")
        event = self._mint(recipient, amount)
        logger.info(f"TokensMinted: {amount} {self.symbol} → {event.recipient}")
        return event

    async def burn(self, caller: str, account: str, amount: int) -> TokensBurnedEvent:
        self._require_owner(caller)
        if amount <= 0:
            raise DaoTokenError("Burn amount must be positive")
        event = self._burn(account, amount)
        logger.info(f"TokensBurned: {event.account} burned {amount} {self.symbol}")
        return event

    async def burn_from(self, caller: str, account: str, amount: int) -> TokensBurnedEvent:
        """Burn from *account*, spending the allowance it granted to *caller*."""
        self._require_owner(caller)
        if amount <= 0:
            raise DaoTokenError("Burn amount must be positive")
        allow = self._check_allowance(account, caller, amount, "burn")
        event = self._burn(account, amount)
        self._allowances[(event.account, self.owner)] = allow - amount
        logger.info(f"TokensBurned: {event.account} burned {amount} {self.symbol} (from)")
        return event

    # ── Serialization ─────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "totalSupply": str(self._total_supply),
            "owner": self.owner,
            "holders": len([b for b in self._balances.values() if b > 0]),
        }

    def __repr__(self) -> str:
        return f"<DaoToken {self.symbol} supply={self._total_supply}>"
