"""
Trace Renderer

Turns a trace forest into an indented, optionally colorized text tree. Names,
method signatures, return types and event layouts come from a ``DappInfo``;
whatever it does not know degrades to a placeholder or to raw hex.

Typical line shapes::

    call Token::transfer(0x1111..., 5) (src/Token.sol:12)
    ├╴Transfer(5) (src/Token.sol:14)
    └╴← bool true
"""

from typing import List, Optional, Sequence

from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from evmfmt.abi.decoder import decode_value, decode_values
from evmfmt.abi.types import AbiStringType, AbiType, abi_type_solidity, parse_type_name
from evmfmt.dapp.info import DappInfo, contract_name_part
from evmfmt.format.scalars import format_hex, format_word_hex
from evmfmt.format.values import print_value, print_values
from evmfmt.utils.colors import PlainStyle
from evmfmt.utils.exceptions import DecodeError
from evmfmt.utils.logging import get_logger

from .nodes import (
    CallContext,
    CreationContext,
    EntryTrace,
    ErrorTrace,
    EventTrace,
    EvmError,
    FrameTrace,
    PleaseFetchContract,
    PleaseFetchSlot,
    QueryTrace,
    ReturnTrace,
    Revert,
    Trace,
    TraceTree,
)

logger = get_logger('trace')

ERROR_SELECTOR = function_signature_to_4byte_selector("Error(string)")

UNKNOWN_CONTRACT = "<unknown contract>"
UNKNOWN_METHOD = "[unknown method]"
FALLBACK_FUNCTION = "[fallback function]"


# ============================================================================
# Decoding with hex fallback
# ============================================================================

def _decode_or_none(types: Sequence[AbiType], data: bytes) -> Optional[str]:
    try:
        return print_values(decode_values(types, data))
    except DecodeError as e:
        logger.debug(f"Falling back to hex: {e.message}")
        return None


def show_values(types: Sequence[AbiType], data: bytes) -> str:
    """``(v1, v2)`` for decodable data, hex otherwise."""
    rendered = _decode_or_none(types, data)
    return rendered if rendered is not None else format_hex(data)


def show_value(abi_type: AbiType, data: bytes) -> str:
    try:
        return print_value(decode_value(abi_type, data))
    except DecodeError as e:
        logger.debug(f"Falling back to hex: {e.message}")
        return format_hex(data)


def show_error(output: bytes) -> str:
    """Render a revert payload, decoding ``Error(string)`` reasons."""
    if output[:4] == ERROR_SELECTOR:
        rendered = _decode_or_none([AbiStringType()], output[4:])
        if rendered is not None:
            return rendered
    return format_hex(output)


def get_abi_types(signature: str) -> List[AbiType]:
    """
    Parse the parameter types of ``name(t1,t2)``.

    The list after the last ``(`` is split on commas, so tuple parameters do not
    parse and make the whole call undecodable.

    Raises:
        TypeParseError: If any parameter type does not parse
    """
    params = signature.split("(")[-1][:-1]
    return [parse_type_name(t) for t in params.split(",") if t]


def show_call(signature: str, calldata: bytes) -> str:
    """Arguments of a call as ``(v1, v2)``, or the raw calldata as ``(0x...)``."""
    try:
        types = get_abi_types(signature)
    except DecodeError as e:
        logger.debug(f"Cannot decode arguments of {signature}: {e.message}")
        types = None
    if types is not None:
        rendered = _decode_or_none(types, calldata[4:])
        if rendered is not None:
            return rendered
    return "(" + format_hex(calldata) + ")"


def _show_address(address: int) -> str:
    return to_checksum_address(f"0x{address:040x}")


# ============================================================================
# Single node
# ============================================================================

def _location(dapp: DappInfo, trace: Trace, style: PlainStyle) -> str:
    location = dapp.resolve_source_location(trace)
    if location.resolved:
        return " " + style.location(f"({location.label})")
    return " " + style.location(location.label)


def _show_event(dapp: DappInfo, event: EventTrace, style: PlainStyle) -> str:
    if not event.topics:
        return style.event("log0(" + format_hex(event.data) + ")")
    info = dapp.lookup_event_by_topic(event.topics[0])
    if info is None:
        topics = ", ".join(format_word_hex(t) for t in event.topics)
        return style.event(
            f"log{len(event.topics)}(" + format_hex(event.data) + ", " + topics + ")"
        )
    # indexed arguments live in the topics and are not shown
    types = [t for t, indexed in info.fields if not indexed]
    return style.event(info.name + show_values(types, event.data))


def _show_return(dapp: DappInfo, ret: ReturnTrace) -> str:
    context = ret.context
    if isinstance(context, CreationContext):
        return f"← {len(ret.output)} bytes of code"
    if isinstance(context, CallContext):
        contract = dapp.lookup_contract_by_hash(context.code_hash)
        output = None
        if contract is not None and context.abi is not None:
            output = dapp.lookup_method_output_type(contract, context.abi)
        if output is None:
            return "← " + format_hex(ret.output)
        _, abi_type = output
        return "← " + abi_type_solidity(abi_type) + " " + show_value(abi_type, ret.output)
    raise TypeError(f"Unhandled frame context: {context!r}")


def _show_frame(dapp: DappInfo, frame: FrameTrace, style: PlainStyle) -> str:
    context = frame.context
    contract = dapp.lookup_contract_by_hash(context.code_hash)
    if isinstance(context, CreationContext):
        name = contract_name_part(contract.name) if contract else UNKNOWN_CONTRACT
        return "create " + name
    if isinstance(context, CallContext):
        if contract is None:
            return "call [unknown]"
        if context.abi is None:
            method, args = FALLBACK_FUNCTION, "(" + format_hex(context.calldata) + ")"
        else:
            signature = dapp.lookup_method_signature(contract, context.abi)
            if signature is None:
                method, args = UNKNOWN_METHOD, "(" + format_hex(context.calldata) + ")"
            else:
                method = signature.split("(")[0]
                args = show_call(signature, context.calldata)
        return "call " + style.call(contract_name_part(contract.name) + "::" + method + args)
    raise TypeError(f"Unhandled frame context: {context!r}")


def render_trace(dapp: DappInfo, trace: Trace, style: Optional[PlainStyle] = None) -> str:
    """
    Render one trace node as a single line (without tree connectors).

    Raises:
        InvalidUtf8Error: If a decoded string value is not valid UTF-8
    """
    style = style or PlainStyle()
    data = trace.data

    if isinstance(data, EventTrace):
        return _show_event(dapp, data, style) + _location(dapp, trace, style)
    if isinstance(data, QueryTrace):
        query = data.query
        if isinstance(query, PleaseFetchContract):
            text = "fetch contract " + _show_address(query.address)
        elif isinstance(query, PleaseFetchSlot):
            text = (
                "fetch storage slot " + format_word_hex(query.slot)
                + " from " + _show_address(query.address)
            )
        else:
            raise TypeError(f"Unhandled query: {query!r}")
        return text + _location(dapp, trace, style)
    if isinstance(data, ErrorTrace):
        error = data.error
        if isinstance(error, Revert):
            text = style.error("error") + " Revert " + show_error(error.output)
        elif isinstance(error, EvmError):
            text = style.error("error") + " " + str(error)
        else:
            raise TypeError(f"Unhandled VM error: {error!r}")
        return text + _location(dapp, trace, style)
    if isinstance(data, ReturnTrace):
        return _show_return(dapp, data)
    if isinstance(data, EntryTrace):
        return data.label
    if isinstance(data, FrameTrace):
        return _show_frame(dapp, data, style) + _location(dapp, trace, style)
    raise TypeError(f"Unhandled trace data: {data!r}")


# ============================================================================
# Forest
# ============================================================================

def _draw(dapp: DappInfo, tree: TraceTree, style: PlainStyle) -> List[str]:
    lines = render_trace(dapp, tree.trace, style).split("\n")
    for i, child in enumerate(tree.children):
        last = i == len(tree.children) - 1
        first_prefix, rest_prefix = ("└╴", "  ") if last else ("├╴", "│ ")
        for j, line in enumerate(_draw(dapp, child, style)):
            lines.append((first_prefix if j == 0 else rest_prefix) + line)
    return lines


def render_forest(
    dapp: DappInfo,
    forest: Sequence[TraceTree],
    style: Optional[PlainStyle] = None
) -> str:
    """
    Render a trace forest as a tree, one node per line.

    Args:
        dapp: Contract metadata used to resolve names and types
        forest: Top-level trace trees, in execution order
        style: Color strategy; plain text when omitted

    Returns:
        The rendered text; every line, including the last, ends with a newline
    """
    style = style or PlainStyle()
    return "".join(
        line + "\n"
        for tree in forest
        for line in _draw(dapp, tree, style)
    )
