"""
DAO Voting Token

Provides:
  - DaoToken      : ERC-20–style fungible token with owner mint / burn
  - TokenAdapter  : pull/push transfers between holders and the DAO vault
"""

from .dao_token import (
    ApprovalEvent,
    DaoToken,
    DaoTokenError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    NotOwnerError,
    TokensBurnedEvent,
    TokensMintedEvent,
    TransferEvent,
)
from .adapter import TokenAdapter

__all__ = [
    # Core token
    "DaoToken",
    "DaoTokenError",
    "InsufficientBalanceError",
    "InsufficientAllowanceError",
    "NotOwnerError",
    # Events
    "TransferEvent",
    "ApprovalEvent",
    "TokensMintedEvent",
    "TokensBurnedEvent",
    # Adapter
    "TokenAdapter",
]
