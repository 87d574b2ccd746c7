"""
Render command implementation.

Prints a trace forest loaded from JSON as an annotated call tree.
"""

import sys

from evmfmt.trace.renderer import render_forest
from evmfmt.trace.serializer import load_forest
from evmfmt.utils.exceptions import EvmFmtError, format_error
from evmfmt.utils.logging import logger
from evmfmt.cli.common import configure_from_args, load_dapp


def render_command(args) -> int:
    """
    Execute the render command.

    Args:
        args: Parsed command arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    style = configure_from_args(args)
    try:
        dapp = load_dapp(args.combined_json, args.source_dir, args.abi)
        forest = load_forest(args.trace_file)
        logger.debug(f"Rendering {len(forest)} top-level trace trees")
        sys.stdout.write(render_forest(dapp, forest, style))
    except EvmFmtError as e:
        print(format_error(e, getattr(args, 'json', False)), file=sys.stderr)
        return 1
    return 0
