"""
Decode and selector command implementations.
"""

import sys

from eth_utils import event_signature_to_log_topic, function_signature_to_4byte_selector

from evmfmt.abi.decoder import decode_values
from evmfmt.format.scalars import format_hex
from evmfmt.format.values import print_values
from evmfmt.abi.types import parse_type_name
from evmfmt.utils.exceptions import EvmFmtError, format_error
from evmfmt.cli.common import configure_from_args, parse_hex_data


def decode_command(args) -> int:
    """
    Decode hex data against a comma-separated type list.

    With ``--selector`` the first four bytes are skipped, as for calldata.
    """
    configure_from_args(args)
    try:
        types = parse_type_name(f"({args.types})").components
        data = parse_hex_data(args.data)
        if args.selector:
            data = data[4:]
        print(print_values(decode_values(types, data)))
    except EvmFmtError as e:
        print(format_error(e, getattr(args, 'json', False)), file=sys.stderr)
        return 1
    return 0


def selector_command(args) -> int:
    """Print the method selector and event topic of a signature."""
    configure_from_args(args)
    signature = args.signature.replace(" ", "")
    print(f"selector: {format_hex(function_signature_to_4byte_selector(signature))}")
    print(f"topic:    {format_hex(event_signature_to_log_topic(signature))}")
    return 0
