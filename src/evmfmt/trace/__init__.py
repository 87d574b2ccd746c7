"""
Trace module for evmfmt.

- nodes: the trace forest data model
- renderer: text rendering of trace forests
- serializer: loading trace forests from JSON
"""

from .nodes import (
    CallContext,
    CreationContext,
    EntryTrace,
    ErrorKind,
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
from .renderer import render_forest, render_trace
from .serializer import forest_from_json, load_forest

__all__ = [
    'CallContext',
    'CreationContext',
    'EntryTrace',
    'ErrorKind',
    'ErrorTrace',
    'EventTrace',
    'EvmError',
    'FrameTrace',
    'PleaseFetchContract',
    'PleaseFetchSlot',
    'QueryTrace',
    'ReturnTrace',
    'Revert',
    'Trace',
    'TraceTree',
    'render_forest',
    'render_trace',
    'forest_from_json',
    'load_forest',
]
