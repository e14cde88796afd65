"""
Call Data Encoding

Ethereum-compatible function selectors and ABI call data, used to build and
dispatch the action attached to a proposal.
"""

from typing import List, Tuple

from eth_abi import decode, encode
from eth_utils import keccak


def compute_function_selector(function_signature: str) -> bytes:
    """
    Compute Ethereum function selector (first 4 bytes of keccak256(sig)).

    Args:
        function_signature: Function signature like "transfer(address,uint256)"

    Returns:
        4-byte function selector
    """
    return keccak(text=function_signature)[:4]


def parse_argument_types(function_signature: str) -> List[str]:
    """Split the argument list: "f(uint256,string)" -> ["uint256", "string"]."""
    if '(' not in function_signature or not function_signature.endswith(')'):
        raise ValueError(f"Malformed function signature: {function_signature}")
    args_start = function_signature.index('(') + 1
    arg_types_str = function_signature[args_start:-1]
    if not arg_types_str:
        return []
    return [t.strip() for t in arg_types_str.split(',')]


def encode_function_call(function_signature: str, *args) -> bytes:
    """
    Encode function call data (selector + ABI-encoded arguments).

    Args:
        function_signature: Function signature
        *args: Function arguments

    Returns:
        Encoded call data
    """
    selector = compute_function_selector(function_signature)
    arg_types = parse_argument_types(function_signature)
    if not arg_types:
        return selector
    return selector + encode(arg_types, list(args))


def decode_function_call(data: bytes) -> Tuple[bytes, bytes]:
    """
    Split call data into selector and ABI-encoded arguments.

    Returns (b'', b'') when *data* is shorter than a selector.
    """
    if len(data) < 4:
        return b'', b''
    return data[:4], data[4:]


def decode_function_arguments(function_signature: str, data: bytes) -> tuple:
    """Decode the arguments of *data* according to *function_signature*."""
    selector, args = decode_function_call(data)
    if selector != compute_function_selector(function_signature):
        raise ValueError(f"Call data does not match {function_signature}")
    arg_types = parse_argument_types(function_signature)
    if not arg_types:
        return ()
    return tuple(decode(arg_types, args))
