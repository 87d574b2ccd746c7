"""
Scalar formatting rules for words, byte strings and text.

All functions are total except ``format_string``, which refuses byte strings
that are not valid UTF-8.
"""

import json
import unicodedata
from enum import Enum

from eth_utils import keccak

from evmfmt.utils.exceptions import InvalidUtf8Error

UINT256_MAX = 2 ** 256 - 1

# Address of the hevm cheat code contract: low 160 bits of keccak("hevm cheat code")
CHEAT_CODE = int.from_bytes(keccak(text="hevm cheat code")[12:], 'big')
CHEAT_CODE_TAG = "<hevm cheat address>"
MAX_UINT256_TAG = "MAX_UINT256"


class Signedness(Enum):
    SIGNED = "signed"
    UNSIGNED = "unsigned"


def to_signed(word: int) -> int:
    """Interpret a 256-bit word as two's complement."""
    word &= UINT256_MAX
    if word >> 255:
        return word - 2 ** 256
    return word


def format_decimal(word: int, signedness: Signedness = Signedness.UNSIGNED) -> str:
    """
    Render a 256-bit word in decimal.

    The sentinels are matched on the unsigned word, before the sign is applied:
    the cheat code address and the all-ones word are shown as fixed tags
    whatever the signedness. A signed all-ones word therefore prints
    ``MAX_UINT256`` rather than ``-1``.
    """
    word &= UINT256_MAX
    if word == CHEAT_CODE:
        return CHEAT_CODE_TAG
    if word == UINT256_MAX:
        return MAX_UINT256_TAG
    if signedness is Signedness.SIGNED:
        return str(to_signed(word))
    return str(word)


def humanize_integer(n: int) -> str:
    """Insert a comma every three digits, e.g. 1234567 -> 1,234,567."""
    sign = "-" if n < 0 else ""
    digits = str(abs(n))
    groups = []
    while digits:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    return sign + ",".join(groups)


def _strip_zeros(data: bytes) -> bytes:
    return bytes(data).rstrip(b"\x00")


def is_printable(data: bytes) -> bool:
    """True if the bytes are valid UTF-8 without control characters."""
    try:
        text = bytes(data).decode("utf-8")
    except UnicodeDecodeError:
        return False
    return not any(unicodedata.category(ch) == "Cc" for ch in text)


def format_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def format_word_hex(word: int) -> str:
    return f"0x{word:x}"


def format_qstring(data: bytes) -> str:
    """
    Double-quoted rendering of UTF-8 bytes, trailing zero bytes dropped.

    Raises:
        InvalidUtf8Error: If the bytes are not valid UTF-8
    """
    return json.dumps(format_string(data), ensure_ascii=False)


def format_bytes(data: bytes) -> str:
    """
    Render a fixed-size byte string.

    Trailing zero padding is dropped and the rest shown as a quoted string when
    printable; otherwise the full, unstripped bytes are shown as hex.
    """
    stripped = _strip_zeros(data)
    if is_printable(stripped):
        return format_qstring(stripped)
    return format_hex(data)


def format_string(data: bytes) -> str:
    """
    Decode a string-typed value, dropping trailing zero bytes.

    Raises:
        InvalidUtf8Error: If the bytes are not valid UTF-8
    """
    stripped = _strip_zeros(data)
    try:
        return stripped.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error(stripped, str(e))
