"""
Token Adapter

Thin wrapper around the external fungible token used by the DAO vault.
Both calls report plain success/failure; the ledger decides what a failure
means and never touches balances before a transfer is confirmed.
"""

from typing import Any, Dict

from ..crypto.address import normalize_address
from ..logger import get_logger

logger = get_logger(__name__)


class TokenAdapter:
    """
    Pull/push transfers between token holders and the DAO vault.

    Args:
        token: Object exposing async ``transfer(sender, recipient, amount)``
               and ``transfer_from(spender, sender, recipient, amount)``
        vault: Address holding deposited tokens in custody
    """

    def __init__(self, token, vault: str):
        self.token = token
        self.vault = normalize_address(vault)
        self._pulled = 0
        self._pushed = 0

    async def pull_transfer(self, holder: str, amount: int) -> bool:
        """Move *amount* from *holder* into the vault using the vault's allowance."""
        try:
            result = await self.token.transfer_from(self.vault, holder, self.vault, amount)
        except Exception as e:
            logger.warning(f"Pull transfer of {amount} from {holder} failed: {e}")
            return False
        if not result:
            logger.warning(f"Pull transfer of {amount} from {holder} was refused by the token")
            return False
        self._pulled += amount
        return True

    async def push_transfer(self, recipient: str, amount: int) -> bool:
        """Move *amount* from the vault back to *recipient*."""
        try:
            result = await self.token.transfer(self.vault, recipient, amount)
        except Exception as e:
            logger.warning(f"Push transfer of {amount} to {recipient} failed: {e}")
            return False
        if not result:
            logger.warning(f"Push transfer of {amount} to {recipient} was refused by the token")
            return False
        self._pushed += amount
        return True

    @property
    def custody(self) -> int:
        """Net amount moved into the vault through this adapter."""
        return self._pulled - self._pushed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vault": self.vault,
            "pulled": str(self._pulled),
            "pushed": str(self._pushed),
            "custody": str(self.custody),
        }

    def __repr__(self) -> str:
        return f"<TokenAdapter vault={self.vault} custody={self.custody}>"
