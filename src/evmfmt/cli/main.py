#!/usr/bin/env python3
"""
Main entry point for evmfmt

This module serves as the CLI entry point, handling argument parsing
and routing to the command implementations in the cli/ module.
"""

import sys
import argparse

from evmfmt import __version__
from .render import render_command
from .decode import decode_command, selector_command


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--no-color', action='store_true', help='Disable ANSI colors (also honours NO_COLOR)')
    parser.add_argument('--json', action='store_true', help='Report errors as JSON')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--verbose', action='store_true', help='Enable trace-level logging')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress log output')
    parser.add_argument('--log-file', default=None, help='Also write logs to this file')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='evmfmt - EVM trace and ABI value formatter')
    parser.add_argument('--version', '-v', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')
    subparsers.required = True

    # render command
    render_parser = subparsers.add_parser('render', help='Render a trace forest from a JSON file')
    render_parser.add_argument('trace_file', help='JSON file holding the trace forest')
    render_parser.add_argument('--combined-json', '-c', default=None, help='solc combined.json with abi, bin, bin-runtime, srcmap and srcmap-runtime')
    render_parser.add_argument('--source-dir', '-s', default=None, help='Directory the combined.json sourceList is relative to (default: its directory)')
    render_parser.add_argument('--abi', action='append', default=[], help='Contract known by ABI only, as NAME:CODEHASH:PATH. Can be specified multiple times')
    _add_common_arguments(render_parser)

    # decode command
    decode_parser = subparsers.add_parser('decode', help='Decode ABI-encoded data')
    decode_parser.add_argument('types', help='Comma-separated types, e.g. "uint256,string"')
    decode_parser.add_argument('data', help='Hex data (0x...)')
    decode_parser.add_argument('--selector', action='store_true', help='Data starts with a 4-byte selector to skip')
    _add_common_arguments(decode_parser)

    # selector command
    selector_parser = subparsers.add_parser('selector', help='Compute the selector and topic of a signature')
    selector_parser.add_argument('signature', help='Signature, e.g. "transfer(address,uint256)"')
    _add_common_arguments(selector_parser)

    return parser


def main(argv=None) -> int:
    """Main entry point for evmfmt CLI."""
    args = build_parser().parse_args(argv)

    if args.command == 'render':
        return render_command(args)
    elif args.command == 'decode':
        return decode_command(args)
    elif args.command == 'selector':
        return selector_command(args)

    return 0


if __name__ == '__main__':
    sys.exit(main())
