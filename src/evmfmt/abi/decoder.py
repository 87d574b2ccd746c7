"""
ABI Value Decoder

Decodes call data, return data and event data laid out with the Contract ABI
head/tail encoding into ``AbiValue`` trees.

A sequence of N types occupies N head entries. Static types live in their head
entry (static arrays and tuples occupy their full static width). Dynamic types
store a byte offset, relative to the start of the sequence, pointing at their
tail. Decoding is strict: any read past the end of the buffer raises
``DecodeError``.
"""

from typing import List, Sequence

from evmfmt.utils.exceptions import DecodeError

from .types import (
    AbiType,
    AbiUIntType,
    AbiIntType,
    AbiBoolType,
    AbiAddressType,
    AbiBytesType,
    AbiBytesDynamicType,
    AbiStringType,
    AbiArrayType,
    AbiArrayDynamicType,
    AbiTupleType,
    WORD_SIZE,
    is_dynamic,
    static_size,
)
from .values import (
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


def _read_word(buffer: bytes, pos: int) -> int:
    if pos < 0 or pos + WORD_SIZE > len(buffer):
        raise DecodeError(
            f"Need {WORD_SIZE} bytes at offset {pos}, buffer has {len(buffer)}",
            offset=pos,
        )
    return int.from_bytes(buffer[pos:pos + WORD_SIZE], 'big')


def _read_slot(buffer: bytes, pos: int) -> bytes:
    _read_word(buffer, pos)
    return buffer[pos:pos + WORD_SIZE]


def _decode_static(abi_type: AbiType, buffer: bytes, pos: int) -> AbiValue:
    if isinstance(abi_type, AbiUIntType):
        return AbiUInt(abi_type.size, _read_word(buffer, pos))
    if isinstance(abi_type, AbiIntType):
        return AbiInt(abi_type.size, _read_word(buffer, pos))
    if isinstance(abi_type, AbiBoolType):
        return AbiBool(_read_word(buffer, pos) != 0)
    if isinstance(abi_type, AbiAddressType):
        return AbiAddress(_read_slot(buffer, pos)[12:])
    if isinstance(abi_type, AbiBytesType):
        return AbiBytes(abi_type.size, _read_slot(buffer, pos)[:abi_type.size])
    if isinstance(abi_type, AbiArrayType):
        size = static_size(abi_type)
        inline = _slice(buffer, pos, size)
        values = decode_values([abi_type.element] * abi_type.length, inline)
        return AbiArray(abi_type.length, abi_type.element, tuple(values))
    if isinstance(abi_type, AbiTupleType):
        inline = _slice(buffer, pos, static_size(abi_type))
        return AbiTuple(tuple(decode_values(abi_type.components, inline)))
    raise TypeError(f"Unhandled static ABI type: {abi_type!r}")


def _slice(buffer: bytes, pos: int, length: int) -> bytes:
    if pos + length > len(buffer):
        raise DecodeError(
            f"Need {length} bytes at offset {pos}, buffer has {len(buffer)}",
            offset=pos,
        )
    return buffer[pos:pos + length]


def _decode_tail(abi_type: AbiType, tail: bytes) -> AbiValue:
    if isinstance(abi_type, (AbiBytesDynamicType, AbiStringType)):
        length = _read_word(tail, 0)
        if length > len(tail) - WORD_SIZE:
            raise DecodeError(
                f"Length word {length} exceeds the {len(tail) - WORD_SIZE} remaining bytes",
                offset=0,
            )
        data = tail[WORD_SIZE:WORD_SIZE + length]
        if isinstance(abi_type, AbiStringType):
            return AbiString(data)
        return AbiBytesDynamic(data)
    if isinstance(abi_type, AbiArrayDynamicType):
        count = _read_word(tail, 0)
        body = tail[WORD_SIZE:]
        # every element needs at least one head word
        if count * WORD_SIZE > len(body):
            raise DecodeError(
                f"Array length {count} exceeds the {len(body)} remaining bytes",
                offset=0,
            )
        values = decode_values([abi_type.element] * count, body)
        return AbiArrayDynamic(abi_type.element, tuple(values))
    if isinstance(abi_type, AbiArrayType):
        if abi_type.length * WORD_SIZE > len(tail):
            raise DecodeError(
                f"Array length {abi_type.length} exceeds the {len(tail)} remaining bytes",
                offset=0,
            )
        values = decode_values([abi_type.element] * abi_type.length, tail)
        return AbiArray(abi_type.length, abi_type.element, tuple(values))
    if isinstance(abi_type, AbiTupleType):
        return AbiTuple(tuple(decode_values(abi_type.components, tail)))
    raise TypeError(f"Unhandled dynamic ABI type: {abi_type!r}")


def decode_values(types: Sequence[AbiType], buffer: bytes) -> List[AbiValue]:
    """
    Decode a head/tail encoded sequence of values.

    Args:
        types: Ordered types of the sequence
        buffer: Encoded bytes; offsets are relative to its start

    Returns:
        Decoded values, one per type

    Raises:
        DecodeError: If the buffer is truncated or an offset is out of range
    """
    buffer = bytes(buffer)
    values = []
    pos = 0
    for abi_type in types:
        if is_dynamic(abi_type):
            offset = _read_word(buffer, pos)
            if offset > len(buffer):
                raise DecodeError(
                    f"Offset {offset} points outside the {len(buffer)}-byte buffer",
                    offset=pos,
                )
            values.append(_decode_tail(abi_type, buffer[offset:]))
            pos += WORD_SIZE
        else:
            values.append(_decode_static(abi_type, buffer, pos))
            pos += static_size(abi_type)
    return values


def decode_value(abi_type: AbiType, buffer: bytes) -> AbiValue:
    """Decode a single value encoded as a one-element sequence (e.g. return data)."""
    return decode_values([abi_type], buffer)[0]
