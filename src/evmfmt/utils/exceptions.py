"""
Custom exceptions for evmfmt.

This module provides a hierarchy of exceptions for the decoding and rendering
layers, along with utilities for formatting errors consistently.
"""

import json
from typing import Any, Dict, Optional


class EvmFmtError(Exception):
    """
    Base exception for all evmfmt errors.

    Attributes:
        message: Human-readable error message
        details: Additional context as key-value pairs
        error_code: Optional error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error": True,
            "type": self.error_code,
            "message": self.message,
            **self.details
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


# ============================================================================
# Decoding Errors
# ============================================================================

class DecodeError(EvmFmtError):
    """Raised when ABI data is malformed or truncated."""

    def __init__(self, message: str, offset: Optional[int] = None, **kwargs):
        details = {"offset": offset} if offset is not None else {}
        details.update(kwargs)
        super().__init__(message, details, "DecodeError")


class TypeParseError(DecodeError):
    """Raised when a Solidity type name cannot be parsed."""

    def __init__(self, type_name: str, reason: Optional[str] = None, **kwargs):
        message = f"Cannot parse ABI type '{type_name}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, type_name=type_name, **kwargs)
        self.error_code = "TypeParseError"


class InvalidUtf8Error(EvmFmtError):
    """Raised when a string-typed value does not hold valid UTF-8."""

    def __init__(self, data: bytes, reason: Optional[str] = None):
        message = "String value is not valid UTF-8"
        if reason:
            message += f": {reason}"
        super().__init__(message, {"data": "0x" + data.hex()}, "InvalidUtf8")


# ============================================================================
# Input Errors
# ============================================================================

class TraceFormatError(EvmFmtError):
    """Raised when a trace document cannot be loaded."""

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        details = {"source": source} if source else {}
        details.update(kwargs)
        super().__init__(message, details, "TraceFormatError")


class MetadataError(EvmFmtError):
    """Raised when contract metadata (ABI, combined.json) is malformed."""

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        details = {"source": source} if source else {}
        details.update(kwargs)
        super().__init__(message, details, "MetadataError")


# ============================================================================
# Error Formatting Utilities
# ============================================================================

def format_error(e: Exception, json_mode: bool = False) -> str:
    """
    Format an exception for display.

    Args:
        e: The exception to format
        json_mode: If True, output as JSON; otherwise use colored text

    Returns:
        Formatted error string
    """
    from evmfmt.utils.colors import error

    if isinstance(e, EvmFmtError):
        if json_mode:
            return e.to_json()
        return error(e.message)
    if json_mode:
        return json.dumps({
            "error": True,
            "type": type(e).__name__,
            "message": str(e)
        }, indent=2)
    return error(str(e))
