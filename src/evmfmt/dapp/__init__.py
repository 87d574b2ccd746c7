"""
Contract metadata module for evmfmt.

- info: DappInfo lookups (contracts, methods, events, source locations)
- source_map: solc compressed source map decoding
"""

from .info import (
    DappInfo,
    Event,
    Method,
    SolcContract,
    TraceLocation,
    contract_name_part,
    contract_path_part,
    format_abi_type,
    load_combined_json,
)
from .source_map import SourceFile, SourceMapEntry, parse_source_map

__all__ = [
    'DappInfo',
    'Event',
    'Method',
    'SolcContract',
    'TraceLocation',
    'contract_name_part',
    'contract_path_part',
    'format_abi_type',
    'load_combined_json',
    'SourceFile',
    'SourceMapEntry',
    'parse_source_map',
]
