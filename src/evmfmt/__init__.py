"""
evmfmt - EVM trace and ABI value formatter
"""

__version__ = "0.1.0"

# ABI decoding
from .abi import (
    AbiType,
    AbiValue,
    abi_type_solidity,
    decode_value,
    decode_values,
    parse_type_name,
)

# Formatting
from .format import (
    Signedness,
    format_bytes,
    format_decimal,
    format_hex,
    format_string,
    humanize_integer,
    is_printable,
    print_array,
    print_value,
    print_values,
)

# Metadata
from .dapp import DappInfo, load_combined_json

# Traces
from .trace import (
    Trace,
    TraceTree,
    render_forest,
    render_trace,
    load_forest,
)

# Utilities
from .utils import (
    EvmFmtError,
    DecodeError,
    TypeParseError,
    InvalidUtf8Error,
    PlainStyle,
    AnsiStyle,
)

# Main entry point
from .cli.main import main

__all__ = [
    # Version
    '__version__',
    # Main
    'main',
    # ABI
    'AbiType',
    'AbiValue',
    'abi_type_solidity',
    'decode_value',
    'decode_values',
    'parse_type_name',
    # Formatting
    'Signedness',
    'format_bytes',
    'format_decimal',
    'format_hex',
    'format_string',
    'humanize_integer',
    'is_printable',
    'print_array',
    'print_value',
    'print_values',
    # Metadata
    'DappInfo',
    'load_combined_json',
    # Traces
    'Trace',
    'TraceTree',
    'render_forest',
    'render_trace',
    'load_forest',
    # Utils
    'EvmFmtError',
    'DecodeError',
    'TypeParseError',
    'InvalidUtf8Error',
    'PlainStyle',
    'AnsiStyle',
]
