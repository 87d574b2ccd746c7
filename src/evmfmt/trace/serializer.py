"""
JSON loading of trace forests.

A trace document is a JSON list of nodes (or an object with a ``forest`` list).
Each node has a ``type`` plus the fields of its variant, optional location
fields ``op_index``, ``code_hash`` and ``is_creation``, and an optional
``children`` list::

    {"type": "call", "code_hash": "0xab..", "calldata": "0xa9059cbb..",
     "children": [
        {"type": "event", "data": "0x..", "topics": ["0xddf2.."]},
        {"type": "return", "output": "0x..01",
         "context": {"type": "call", "code_hash": "0xab..", "calldata": "0xa9059cbb.."}}
     ]}

Byte fields are ``0x`` hex strings; word fields (hashes, addresses, topics,
slots) are hex strings or integers.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from hexbytes import HexBytes

from evmfmt.format.scalars import UINT256_MAX
from evmfmt.utils.exceptions import TraceFormatError

from .nodes import (
    CallContext,
    CreationContext,
    EntryTrace,
    ErrorKind,
    ErrorTrace,
    EventTrace,
    EvmError,
    FrameContext,
    FrameTrace,
    PleaseFetchContract,
    PleaseFetchSlot,
    QueryTrace,
    ReturnTrace,
    Revert,
    Trace,
    TraceData,
    TraceTree,
)


def _bytes(value: Any) -> bytes:
    if value is None:
        return b""
    try:
        return bytes(HexBytes(value))
    except (ValueError, TypeError) as e:
        raise TraceFormatError(f"Invalid hex data {value!r}: {e}")


def _word(value: Any) -> int:
    word = None
    if isinstance(value, int) and not isinstance(value, bool):
        word = value
    elif isinstance(value, str):
        try:
            word = int(value, 16) if value.startswith(('0x', '0X')) else int(value)
        except ValueError:
            pass
    if word is None or not 0 <= word <= UINT256_MAX:
        raise TraceFormatError(f"Invalid word {value!r}")
    return word


def _optional_word(value: Any) -> Optional[int]:
    return None if value is None else _word(value)


def _address(value: Any) -> int:
    address = _word(value)
    if address >> 160:
        raise TraceFormatError(f"Address {value!r} does not fit in 20 bytes")
    return address


def _optional_address(value: Any) -> Optional[int]:
    return None if value is None else _address(value)


def _selector(calldata: bytes) -> Optional[int]:
    if len(calldata) < 4:
        return None
    return int.from_bytes(calldata[:4], 'big')


def context_from_dict(node: Dict[str, Any]) -> FrameContext:
    """Build a call or creation context from its JSON object."""
    if not isinstance(node, dict):
        raise TraceFormatError(f"Frame context must be an object, got {type(node).__name__}")
    kind = node.get('type')
    if kind == 'call':
        calldata = _bytes(node.get('calldata'))
        return CallContext(
            code_hash=_word(node['code_hash']),
            abi=_selector(calldata),
            calldata=calldata,
            target=_optional_address(node.get('target')),
            depth=int(node.get('depth', 0)),
        )
    if kind == 'create':
        return CreationContext(
            code_hash=_word(node['code_hash']),
            address=_optional_address(node.get('address')),
            depth=int(node.get('depth', 0)),
        )
    raise TraceFormatError(f"Unknown frame context type {kind!r}")


def _error_kind(name: str) -> ErrorKind:
    try:
        return ErrorKind(name)
    except ValueError:
        raise TraceFormatError(f"Unknown error kind {name!r}")


def _data_from_dict(node: Dict[str, Any]) -> TraceData:
    kind = node.get('type')
    if kind == 'entry':
        return EntryTrace(str(node.get('label', '')))
    if kind in ('call', 'create'):
        return FrameTrace(context_from_dict(node))
    if kind == 'event':
        return EventTrace(
            data=_bytes(node.get('data')),
            topics=tuple(_word(t) for t in node.get('topics', [])),
            address=_optional_address(node.get('address')),
        )
    if kind == 'fetch_contract':
        return QueryTrace(PleaseFetchContract(_address(node['address'])))
    if kind == 'fetch_slot':
        return QueryTrace(PleaseFetchSlot(_address(node['address']), _word(node['slot'])))
    if kind == 'return':
        return ReturnTrace(_bytes(node.get('output')), context_from_dict(node['context']))
    if kind == 'revert':
        return ErrorTrace(Revert(_bytes(node.get('output'))))
    if kind == 'error':
        details = tuple(_word(d) for d in node.get('details', []))
        return ErrorTrace(EvmError(_error_kind(node['kind']), details))
    raise TraceFormatError(f"Unknown trace node type {kind!r}")


def tree_from_dict(node: Dict[str, Any]) -> TraceTree:
    """
    Build one trace tree from its JSON object.

    Raises:
        TraceFormatError: If a node is malformed
    """
    if not isinstance(node, dict):
        raise TraceFormatError(f"Trace node must be an object, got {type(node).__name__}")
    try:
        trace = Trace(
            data=_data_from_dict(node),
            op_index=int(node.get('op_index', 0)),
            code_hash=_optional_word(node.get('code_hash')),
            is_creation=bool(node.get('is_creation', False)),
        )
        children = tuple(tree_from_dict(child) for child in node.get('children', []))
    except KeyError as e:
        raise TraceFormatError(f"Trace node of type {node.get('type')!r} is missing {e}")
    except (ValueError, TypeError, AttributeError) as e:
        raise TraceFormatError(f"Malformed trace node of type {node.get('type')!r}: {e}")
    return TraceTree(trace, children)


def forest_from_json(data: Union[List[Any], Dict[str, Any]]) -> List[TraceTree]:
    """Build a trace forest from a parsed JSON document."""
    if isinstance(data, dict):
        data = data.get('forest')
    if not isinstance(data, list):
        raise TraceFormatError("Trace document must be a list of nodes or {\"forest\": [...]}")
    return [tree_from_dict(node) for node in data]


def load_forest(path: Union[str, Path]) -> List[TraceTree]:
    """
    Load a trace forest from a JSON file.

    Raises:
        TraceFormatError: If the file cannot be read or is malformed
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise TraceFormatError(f"Cannot load trace file: {e}", source=str(path))
    return forest_from_json(data)
