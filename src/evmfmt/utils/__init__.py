"""
Utilities module for evmfmt.

Provides exception handling, logging and color support.
"""

from .exceptions import (
    EvmFmtError,
    DecodeError,
    TypeParseError,
    InvalidUtf8Error,
    TraceFormatError,
    MetadataError,
    format_error,
)
from .logging import setup_logging, get_logger, logger
from .colors import (
    Colors,
    SUPPORTS_COLOR,
    PlainStyle,
    AnsiStyle,
    default_style,
    colorize,
    error,
)

__all__ = [
    # Exceptions
    'EvmFmtError',
    'DecodeError',
    'TypeParseError',
    'InvalidUtf8Error',
    'TraceFormatError',
    'MetadataError',
    'format_error',
    # Logging
    'setup_logging',
    'get_logger',
    'logger',
    # Colors
    'Colors',
    'SUPPORTS_COLOR',
    'PlainStyle',
    'AnsiStyle',
    'default_style',
    'colorize',
    'error',
]
