"""
Formatting module for evmfmt.

- scalars: numeric, byte string and text rendering rules
- values: rendering of decoded ABI value trees
"""

from .scalars import (
    CHEAT_CODE,
    UINT256_MAX,
    Signedness,
    format_bytes,
    format_decimal,
    format_hex,
    format_qstring,
    format_string,
    format_word_hex,
    humanize_integer,
    is_printable,
    to_signed,
)
from .values import print_array, print_value, print_values

__all__ = [
    'CHEAT_CODE',
    'UINT256_MAX',
    'Signedness',
    'format_bytes',
    'format_decimal',
    'format_hex',
    'format_qstring',
    'format_string',
    'format_word_hex',
    'humanize_integer',
    'is_printable',
    'to_signed',
    'print_array',
    'print_value',
    'print_values',
]
