"""
Common utilities for CLI commands.

This module provides shared functionality used across CLI commands.
"""

import json
from pathlib import Path
from typing import Any, List, Optional

from eth_utils import decode_hex

from evmfmt.dapp.info import DappInfo, load_combined_json
from evmfmt.utils.colors import default_style
from evmfmt.utils.exceptions import EvmFmtError, MetadataError
from evmfmt.utils.logging import logger, setup_logging


def configure_from_args(args: Any):
    """
    Apply the global logging and color flags.

    Returns:
        The rendering style selected for stdout
    """
    use_colors = not getattr(args, 'no_color', False)
    setup_logging(
        quiet=getattr(args, 'quiet', False),
        debug=getattr(args, 'debug', False),
        verbose=getattr(args, 'verbose', False),
        log_file=getattr(args, 'log_file', None),
        use_colors=use_colors,
    )
    return default_style(use_colors)


def parse_hex_data(text: str) -> bytes:
    """
    Decode a hex string with or without ``0x`` prefix.

    Raises:
        EvmFmtError: If the text is not valid hex
    """
    try:
        return decode_hex(text.strip())
    except (ValueError, TypeError) as e:
        raise EvmFmtError(f"Invalid hex data: {e}", error_code="InvalidHexData")


def load_dapp(
    combined_json: Optional[str] = None,
    source_dir: Optional[str] = None,
    abi_entries: Optional[List[str]] = None
) -> DappInfo:
    """
    Build contract metadata from command arguments.

    Args:
        combined_json: Path to solc combined.json output
        source_dir: Directory the combined.json sourceList is relative to
        abi_entries: ``NAME:CODEHASH:PATH`` entries for contracts known by ABI only

    Raises:
        MetadataError: If a file or --abi entry is invalid
    """
    if combined_json:
        logger.debug(f"Loading contract metadata from {combined_json}")
        dapp = load_combined_json(combined_json, source_dir)
    else:
        dapp = DappInfo()

    for entry in abi_entries or []:
        parts = entry.split(":")
        if len(parts) < 3:
            raise MetadataError(f"Invalid --abi entry '{entry}', expected NAME:CODEHASH:PATH")
        name, code_hash, path = parts[0], parts[1], ":".join(parts[2:])
        try:
            with open(Path(path)) as f:
                abi = json.load(f)
            hash_value = int(code_hash, 16)
        except (OSError, ValueError) as e:
            raise MetadataError(f"Cannot load --abi entry '{entry}': {e}", source=path)
        if isinstance(abi, dict):
            abi = abi.get('abi', [])
        dapp.register_contract(name, hash_value, abi)
        logger.debug(f"Registered {name} from {path}")

    return dapp
