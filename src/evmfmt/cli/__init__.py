"""
CLI module for evmfmt.

Commands:
- render: render a trace forest from JSON
- decode: decode ABI-encoded data
- selector: compute method selectors and event topics
"""

from .main import main
from .render import render_command
from .decode import decode_command, selector_command

__all__ = [
    'main',
    'render_command',
    'decode_command',
    'selector_command',
]
