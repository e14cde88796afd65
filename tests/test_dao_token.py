"""
DaoToken & Token Adapter Test Suite

Coverage:
  - DaoToken deploy, balance_of, transfer, approve, transfer_from
  - Owner-only mint / burn / burn_from
  - TokenAdapter pull/push transfers and failure reporting
"""

import os
import sys

import pytest
from eth_utils import to_checksum_address

# ── Path setup ────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from tokendao.constants import (
    DAO_TOKEN_DECIMALS,
    DAO_TOKEN_INITIAL_SUPPLY,
    DAO_TOKEN_NAME,
    DAO_TOKEN_SYMBOL,
    ZERO_ADDRESS,
)
from tokendao.tokens import (
    ApprovalEvent,
    DaoToken,
    DaoTokenError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    NotOwnerError,
    TokenAdapter,
    TokensBurnedEvent,
    TokensMintedEvent,
    TransferEvent,
)


# ══════════════════════════════════════════════════════════════════════
#  HELPERS
# ══════════════════════════════════════════════════════════════════════

OWNER = to_checksum_address("0x" + "0a" * 20)
ALICE = to_checksum_address("0x" + "a1" * 20)
BOB = to_checksum_address("0x" + "b2" * 20)
VAULT = to_checksum_address("0x" + "fe" * 20)

UNIT = 10 ** DAO_TOKEN_DECIMALS


def make_token(supply=1_000 * UNIT, **kwargs) -> DaoToken:
    """Helper to create a token owned by OWNER."""
    return DaoToken(OWNER, initial_supply=supply, **kwargs)


class BrokenToken:
    """Token whose every transfer raises."""

    async def transfer(self, sender, recipient, amount):
        raise RuntimeError("token paused")

    async def transfer_from(self, spender, sender, recipient, amount):
        raise RuntimeError("token paused")


class RefusingToken:
    """Token that reports failure by returning False instead of raising."""

    async def transfer(self, sender, recipient, amount):
        return False

    async def transfer_from(self, spender, sender, recipient, amount):
        return False


# ══════════════════════════════════════════════════════════════════════
#  DAO TOKEN
# ══════════════════════════════════════════════════════════════════════


class TestDaoTokenDeploy:
    """Deployment defaults and validation."""

    def test_deploy_defaults(self):
        token = DaoToken(OWNER)
        assert token.name == DAO_TOKEN_NAME == "DaoToken"
        assert token.symbol == DAO_TOKEN_SYMBOL == "DAT"
        assert token.decimals == 18
        assert token.total_supply == DAO_TOKEN_INITIAL_SUPPLY == 1_000_000 * UNIT
        assert token.balance_of(OWNER) == DAO_TOKEN_INITIAL_SUPPLY

    def test_deploy_emits_mint(self):
        token = make_token()
        assert len(token.events) == 1
        assert isinstance(token.events[0], TokensMintedEvent)
        assert token.events[0].recipient == OWNER

    def test_deploy_zero_supply(self):
        token = make_token(supply=0)
        assert token.total_supply == 0
        assert token.events == []

    def test_deploy_empty_name_raises(self):
        with pytest.raises(DaoTokenError, match="name cannot be empty"):
            DaoToken(OWNER, name="")

    def test_deploy_empty_symbol_raises(self):
        with pytest.raises(DaoTokenError, match="symbol cannot be empty"):
            DaoToken(OWNER, symbol="")

    def test_deploy_invalid_decimals_raises(self):
        with pytest.raises(DaoTokenError, match="Decimals"):
            DaoToken(OWNER, decimals=19)

    def test_deploy_negative_supply_raises(self):
        with pytest.raises(DaoTokenError, match="negative"):
            make_token(supply=-1)

    def test_owner_is_checksummed(self):
        token = DaoToken(OWNER.lower())
        assert token.owner == OWNER

    def test_to_dict(self):
        token = make_token()
        d = token.to_dict()
        assert d["symbol"] == "DAT"
        assert d["totalSupply"] == str(1_000 * UNIT)
        assert d["holders"] == 1

    def test_repr(self):
        assert "DAT" in repr(make_token())


class TestDaoTokenTransfer:
    """transfer()."""

    @pytest.mark.asyncio
    async def test_basic_transfer(self):
        token = make_token()
        event = await token.transfer(OWNER, ALICE, 100)
        assert isinstance(event, TransferEvent)
        assert token.balance_of(ALICE) == 100
        assert token.balance_of(OWNER) == 1_000 * UNIT - 100
        assert event.sender == OWNER
        assert event.recipient == ALICE

    @pytest.mark.asyncio
    async def test_transfer_accepts_lowercase_addresses(self):
        token = make_token()
        await token.transfer(OWNER.lower(), ALICE.lower(), 5)
        assert token.balance_of(ALICE) == 5

    @pytest.mark.asyncio
    async def test_transfer_insufficient_balance(self):
        token = make_token()
        with pytest.raises(InsufficientBalanceError):
            await token.transfer(ALICE, BOB, 1)

    @pytest.mark.asyncio
    async def test_transfer_to_zero_address_raises(self):
        token = make_token()
        with pytest.raises(DaoTokenError, match="zero address"):
            await token.transfer(OWNER, ZERO_ADDRESS, 1)

    @pytest.mark.asyncio
    async def test_transfer_negative_raises(self):
        token = make_token()
        with pytest.raises(DaoTokenError, match="negative"):
            await token.transfer(OWNER, ALICE, -1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0.5, 1.0, True])
    async def test_transfer_non_integer_raises(self, amount):
        token = make_token()
        with pytest.raises(DaoTokenError, match="integer"):
            await token.transfer(OWNER, ALICE, amount)
        assert token.balance_of(ALICE) == 0

    @pytest.mark.asyncio
    async def test_failed_transfer_leaves_balances(self):
        token = make_token()
        with pytest.raises(InsufficientBalanceError):
            await token.transfer(OWNER, ALICE, 1_000 * UNIT + 1)
        assert token.balance_of(OWNER) == 1_000 * UNIT
        assert token.balance_of(ALICE) == 0


class TestDaoTokenApprove:
    """approve() and allowance()."""

    @pytest.mark.asyncio
    async def test_approve(self):
        token = make_token()
        event = await token.approve(OWNER, VAULT, 500)
        assert isinstance(event, ApprovalEvent)
        assert token.allowance(OWNER, VAULT) == 500

    @pytest.mark.asyncio
    async def test_approve_overwrites(self):
        token = make_token()
        await token.approve(OWNER, VAULT, 500)
        await token.approve(OWNER, VAULT, 0)
        assert token.allowance(OWNER, VAULT) == 0

    @pytest.mark.asyncio
    async def test_approve_negative_raises(self):
        token = make_token()
        with pytest.raises(DaoTokenError, match="negative"):
            await token.approve(OWNER, VAULT, -1)

    @pytest.mark.asyncio
    async def test_approve_zero_spender_raises(self):
        token = make_token()
        with pytest.raises(DaoTokenError, match="zero address"):
            await token.approve(OWNER, ZERO_ADDRESS, 1)


class TestDaoTokenTransferFrom:
    """transfer_from()."""

    @pytest.mark.asyncio
    async def test_transfer_from_spends_allowance(self):
        token = make_token()
        await token.approve(OWNER, VAULT, 300)
        await token.transfer_from(VAULT, OWNER, VAULT, 200)
        assert token.balance_of(VAULT) == 200
        assert token.allowance(OWNER, VAULT) == 100

    @pytest.mark.asyncio
    async def test_transfer_from_without_allowance(self):
        token = make_token()
        with pytest.raises(InsufficientAllowanceError):
            await token.transfer_from(VAULT, OWNER, VAULT, 1)
        assert token.balance_of(VAULT) == 0

    @pytest.mark.asyncio
    async def test_transfer_from_insufficient_balance_keeps_allowance(self):
        token = make_token()
        await token.transfer(OWNER, ALICE, 10)
        await token.approve(ALICE, VAULT, 100)
        with pytest.raises(InsufficientBalanceError):
            await token.transfer_from(VAULT, ALICE, VAULT, 50)
        assert token.allowance(ALICE, VAULT) == 100
        assert token.balance_of(ALICE) == 10


class TestDaoTokenSupply:
    """Owner-only mint / burn / burn_from."""

    @pytest.mark.asyncio
    async def test_mint(self):
        token = make_token()
        event = await token.mint(OWNER, ALICE, 50)
        assert isinstance(event, TokensMintedEvent)
        assert token.balance_of(ALICE) == 50
        assert token.total_supply == 1_000 * UNIT + 50

    @pytest.mark.asyncio
    async def test_mint_non_owner_raises(self):
        token = make_token()
        with pytest.raises(NotOwnerError):
            await token.mint(ALICE, ALICE, 50)

    @pytest.mark.asyncio
    async def test_mint_zero_raises(self):
        token = make_token()
        with pytest.raises(DaoTokenError, match="positive"):
            await token.mint(OWNER, ALICE, 0)

    @pytest.mark.asyncio
    async def test_burn(self):
        token = make_token()
        event = await token.burn(OWNER, OWNER, 100)
        assert isinstance(event, TokensBurnedEvent)
        assert token.total_supply == 1_000 * UNIT - 100

    @pytest.mark.asyncio
    async def test_burn_more_than_balance(self):
        token = make_token()
        with pytest.raises(InsufficientBalanceError):
            await token.burn(OWNER, ALICE, 1)

    @pytest.mark.asyncio
    async def test_burn_non_owner_raises(self):
        token = make_token()
        with pytest.raises(NotOwnerError):
            await token.burn(ALICE, OWNER, 1)

    @pytest.mark.asyncio
    async def test_burn_from_spends_allowance(self):
        token = make_token()
        await token.transfer(OWNER, ALICE, 100)
        await token.approve(ALICE, OWNER, 60)
        await token.burn_from(OWNER, ALICE, 40)
        assert token.balance_of(ALICE) == 60
        assert token.allowance(ALICE, OWNER) == 20
        assert token.total_supply == 1_000 * UNIT - 40

    @pytest.mark.asyncio
    async def test_burn_from_without_allowance(self):
        token = make_token()
        await token.transfer(OWNER, ALICE, 100)
        with pytest.raises(InsufficientAllowanceError):
            await token.burn_from(OWNER, ALICE, 10)
        assert token.balance_of(ALICE) == 100


# ══════════════════════════════════════════════════════════════════════
#  TOKEN ADAPTER
# ══════════════════════════════════════════════════════════════════════


class TestTokenAdapter:
    """Pull/push transfers through the vault."""

    @pytest.mark.asyncio
    async def test_pull_transfer(self):
        token = make_token()
        adapter = TokenAdapter(token, VAULT)
        await token.approve(OWNER, VAULT, 100)
        assert await adapter.pull_transfer(OWNER, 100) is True
        assert token.balance_of(VAULT) == 100
        assert adapter.custody == 100

    @pytest.mark.asyncio
    async def test_pull_without_allowance_reports_false(self):
        token = make_token()
        adapter = TokenAdapter(token, VAULT)
        assert await adapter.pull_transfer(OWNER, 100) is False
        assert token.balance_of(VAULT) == 0
        assert adapter.custody == 0

    @pytest.mark.asyncio
    async def test_push_transfer(self):
        token = make_token()
        adapter = TokenAdapter(token, VAULT)
        await token.approve(OWNER, VAULT, 100)
        await adapter.pull_transfer(OWNER, 100)
        assert await adapter.push_transfer(ALICE, 40) is True
        assert token.balance_of(ALICE) == 40
        assert adapter.custody == 60

    @pytest.mark.asyncio
    async def test_push_more_than_custody_reports_false(self):
        token = make_token()
        adapter = TokenAdapter(token, VAULT)
        assert await adapter.push_transfer(ALICE, 1) is False

    @pytest.mark.asyncio
    async def test_exceptions_become_false(self):
        adapter = TokenAdapter(BrokenToken(), VAULT)
        assert await adapter.pull_transfer(ALICE, 1) is False
        assert await adapter.push_transfer(ALICE, 1) is False

    def test_vault_is_checksummed(self):
        adapter = TokenAdapter(make_token(), VAULT.lower())
        assert adapter.vault == VAULT
        assert adapter.to_dict()["vault"] == VAULT

    @pytest.mark.asyncio
    async def test_false_result_is_a_failure(self):
        adapter = TokenAdapter(RefusingToken(), VAULT)
        assert await adapter.pull_transfer(ALICE, 100) is False
        assert await adapter.push_transfer(ALICE, 100) is False
        assert adapter.custody == 0
