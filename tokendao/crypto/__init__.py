"""
Address and call-data helpers.
"""

from .address import (
    generate_contract_address,
    is_zero_address,
    normalize_address,
)
from .contract import (
    compute_function_selector,
    decode_function_arguments,
    decode_function_call,
    encode_function_call,
)

__all__ = [
    "generate_contract_address",
    "is_zero_address",
    "normalize_address",
    "compute_function_selector",
    "decode_function_arguments",
    "decode_function_call",
    "encode_function_call",
]
