"""Text rendering of decoded ABI value trees."""

from typing import Sequence

from evmfmt.abi.values import (
    AbiValue,
    AbiUInt,
    AbiInt,
    AbiBool,
    AbiAddress,
    AbiBytes,
    AbiBytesDynamic,
    AbiString,
    AbiArray,
    AbiArrayDynamic,
    AbiTuple,
)

from .scalars import Signedness, format_bytes, format_decimal, format_hex, format_qstring


def print_values(values: Sequence[AbiValue]) -> str:
    """Render values as a parenthesized list: ``(1, true)``."""
    return "(" + ", ".join(print_value(v) for v in values) + ")"


def print_array(values: Sequence[AbiValue]) -> str:
    """Render values as a bracketed list: ``[1, 2]``."""
    return "[" + ", ".join(print_value(v) for v in values) + "]"


def print_value(value: AbiValue) -> str:
    """
    Render one decoded value.

    Raises:
        InvalidUtf8Error: If a string value holds invalid UTF-8
    """
    if isinstance(value, AbiUInt):
        return format_decimal(value.value, Signedness.UNSIGNED)
    if isinstance(value, AbiInt):
        return format_decimal(value.value, Signedness.SIGNED)
    if isinstance(value, AbiBool):
        return "true" if value.value else "false"
    if isinstance(value, AbiAddress):
        return format_hex(value.value)
    if isinstance(value, AbiBytes):
        return format_bytes(value.value)
    if isinstance(value, AbiBytesDynamic):
        return format_hex(value.value)
    if isinstance(value, AbiString):
        return format_qstring(value.value)
    if isinstance(value, (AbiArray, AbiArrayDynamic)):
        return print_array(value.values)
    if isinstance(value, AbiTuple):
        return print_values(value.values)
    raise TypeError(f"Unhandled ABI value: {value!r}")
