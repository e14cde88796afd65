"""
Address Helpers

Ethereum-style 20-byte addresses with EIP-55 checksums, used for every
principal the DAO sees (callers, recipients, the vault).
"""

from typing import Optional

import rlp
from eth_utils import is_address, keccak, to_checksum_address

from ..constants import ZERO_ADDRESS
from ..exceptions import InvalidAddressError


def normalize_address(address: Optional[str]) -> str:
    """
    Return the EIP-55 checksum form of *address*.

    Raises:
        InvalidAddressError: if *address* is empty or not a 20-byte hex address
    """
    if not address or not isinstance(address, str):
        raise InvalidAddressError(f"Invalid address: {address!r}")
    if not is_address(address):
        raise InvalidAddressError(f"Invalid address: {address}")
    return to_checksum_address(address)


def is_zero_address(address: Optional[str]) -> bool:
    """True for None, the empty string and the all-zero address."""
    if not address:
        return True
    try:
        return normalize_address(address) == to_checksum_address(ZERO_ADDRESS)
    except InvalidAddressError:
        return False


def generate_contract_address(sender: str, nonce: int) -> str:
    """
    Generate contract address using CREATE opcode logic.

    Address = keccak256(rlp([sender, nonce]))[-20:]

    Args:
        sender: Deployer address (0x-prefixed hex)
        nonce: Deployer nonce

    Returns:
        Contract address (Ethereum checksum format)
    """
    sender_bytes = bytes.fromhex(normalize_address(sender)[2:])
    rlp_encoded = rlp.encode([sender_bytes, nonce])
    address_bytes = keccak(rlp_encoded)[-20:]
    return to_checksum_address('0x' + address_bytes.hex())
