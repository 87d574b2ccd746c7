"""
ABI type descriptors.

Solidity type names are parsed with the ``eth_abi`` grammar and converted
into a closed set of frozen dataclasses that the decoder and printer dispatch
on.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from eth_abi.exceptions import ABITypeError, ParseError
from eth_abi.grammar import ABIType, BasicType, TupleType, normalize, parse

from evmfmt.utils.exceptions import TypeParseError


@dataclass(frozen=True)
class AbiUIntType:
    size: int


@dataclass(frozen=True)
class AbiIntType:
    size: int


@dataclass(frozen=True)
class AbiBoolType:
    pass


@dataclass(frozen=True)
class AbiAddressType:
    pass


@dataclass(frozen=True)
class AbiBytesType:
    size: int


@dataclass(frozen=True)
class AbiBytesDynamicType:
    pass


@dataclass(frozen=True)
class AbiStringType:
    pass


@dataclass(frozen=True)
class AbiArrayType:
    length: int
    element: 'AbiType'


@dataclass(frozen=True)
class AbiArrayDynamicType:
    element: 'AbiType'


@dataclass(frozen=True)
class AbiTupleType:
    components: Tuple['AbiType', ...]
    names: Tuple[Optional[str], ...] = ()


AbiType = Union[
    AbiUIntType, AbiIntType, AbiBoolType, AbiAddressType, AbiBytesType,
    AbiBytesDynamicType, AbiStringType, AbiArrayType, AbiArrayDynamicType,
    AbiTupleType,
]

WORD_SIZE = 32


def is_dynamic(abi_type: AbiType) -> bool:
    """True if values of this type are offset-indirected in their head slot."""
    if isinstance(abi_type, (AbiBytesDynamicType, AbiStringType, AbiArrayDynamicType)):
        return True
    if isinstance(abi_type, AbiArrayType):
        return is_dynamic(abi_type.element)
    if isinstance(abi_type, AbiTupleType):
        return any(is_dynamic(t) for t in abi_type.components)
    return False


def static_size(abi_type: AbiType) -> int:
    """Number of head bytes a static type occupies."""
    if isinstance(abi_type, AbiArrayType):
        return abi_type.length * static_size(abi_type.element)
    if isinstance(abi_type, AbiTupleType):
        return sum(static_size(t) for t in abi_type.components)
    return WORD_SIZE


def abi_type_solidity(abi_type: AbiType) -> str:
    """Render the canonical Solidity name of a type."""
    if isinstance(abi_type, AbiUIntType):
        return f"uint{abi_type.size}"
    if isinstance(abi_type, AbiIntType):
        return f"int{abi_type.size}"
    if isinstance(abi_type, AbiBoolType):
        return "bool"
    if isinstance(abi_type, AbiAddressType):
        return "address"
    if isinstance(abi_type, AbiBytesType):
        return f"bytes{abi_type.size}"
    if isinstance(abi_type, AbiBytesDynamicType):
        return "bytes"
    if isinstance(abi_type, AbiStringType):
        return "string"
    if isinstance(abi_type, AbiArrayType):
        return f"{abi_type_solidity(abi_type.element)}[{abi_type.length}]"
    if isinstance(abi_type, AbiArrayDynamicType):
        return f"{abi_type_solidity(abi_type.element)}[]"
    if isinstance(abi_type, AbiTupleType):
        return "(" + ",".join(abi_type_solidity(t) for t in abi_type.components) + ")"
    raise TypeError(f"Unhandled ABI type: {abi_type!r}")


def _from_grammar(node: ABIType, type_name: str) -> AbiType:
    if isinstance(node, TupleType):
        base: AbiType = AbiTupleType(
            tuple(_from_grammar(c, type_name) for c in node.components)
        )
    elif isinstance(node, BasicType):
        base = _basic_type(node, type_name)
    else:
        raise TypeParseError(type_name)

    # arrlist is ordered innermost dimension first
    for dim in node.arrlist or ():
        if dim:
            base = AbiArrayType(dim[0], base)
        else:
            base = AbiArrayDynamicType(base)
    return base


def _basic_type(node: BasicType, type_name: str) -> AbiType:
    name, sub = node.base, node.sub
    if name == "uint":
        return AbiUIntType(sub)
    if name == "int":
        return AbiIntType(sub)
    if name == "bool":
        return AbiBoolType()
    if name == "address":
        return AbiAddressType()
    if name == "string":
        return AbiStringType()
    if name == "bytes":
        return AbiBytesDynamicType() if sub is None else AbiBytesType(sub)
    raise TypeParseError(type_name, f"unsupported base type '{name}'")


def parse_type_name(type_name: str) -> AbiType:
    """
    Parse a Solidity type name such as ``uint256``, ``bytes32[]`` or
    ``(address,uint8)[2]``.

    Raises:
        TypeParseError: If the name is malformed or not a supported type
    """
    text = type_name.strip()
    if not text:
        raise TypeParseError(type_name, "empty type name")
    try:
        node = parse(normalize(text))
        node.validate()
    except (ParseError, ABITypeError, ValueError) as e:
        raise TypeParseError(type_name, str(e))
    return _from_grammar(node, type_name)
