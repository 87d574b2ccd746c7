"""
Decoded ABI values.

Every value mirrors an ``AbiType`` variant. Integers keep the raw 256-bit word;
for ``AbiInt`` the sign is an interpretation of the top bit applied when the
value is formatted.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from .types import AbiType


@dataclass(frozen=True)
class AbiUInt:
    size: int
    value: int


@dataclass(frozen=True)
class AbiInt:
    size: int
    value: int


@dataclass(frozen=True)
class AbiBool:
    value: bool


@dataclass(frozen=True)
class AbiAddress:
    value: bytes


@dataclass(frozen=True)
class AbiBytes:
    size: int
    value: bytes


@dataclass(frozen=True)
class AbiBytesDynamic:
    value: bytes


@dataclass(frozen=True)
class AbiString:
    value: bytes


@dataclass(frozen=True)
class AbiArray:
    length: int
    element_type: AbiType
    values: Tuple['AbiValue', ...]


@dataclass(frozen=True)
class AbiArrayDynamic:
    element_type: AbiType
    values: Tuple['AbiValue', ...]


@dataclass(frozen=True)
class AbiTuple:
    values: Tuple['AbiValue', ...]


AbiValue = Union[
    AbiUInt, AbiInt, AbiBool, AbiAddress, AbiBytes, AbiBytesDynamic,
    AbiString, AbiArray, AbiArrayDynamic, AbiTuple,
]
