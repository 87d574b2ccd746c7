"""
ABI module for evmfmt.

Type descriptors, decoded value trees and the head/tail decoder.
"""

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
    abi_type_solidity,
    is_dynamic,
    parse_type_name,
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
from .decoder import decode_values, decode_value

__all__ = [
    # Types
    'AbiType',
    'AbiUIntType',
    'AbiIntType',
    'AbiBoolType',
    'AbiAddressType',
    'AbiBytesType',
    'AbiBytesDynamicType',
    'AbiStringType',
    'AbiArrayType',
    'AbiArrayDynamicType',
    'AbiTupleType',
    'abi_type_solidity',
    'is_dynamic',
    'parse_type_name',
    # Values
    'AbiValue',
    'AbiUInt',
    'AbiInt',
    'AbiBool',
    'AbiAddress',
    'AbiBytes',
    'AbiBytesDynamic',
    'AbiString',
    'AbiArray',
    'AbiArrayDynamic',
    'AbiTuple',
    # Decoder
    'decode_values',
    'decode_value',
]
