"""
ANSI color support for evmfmt.

Two layers live here:

- ``Colors`` constants and the ``colorize``/``error`` helpers used by the command
  line for its own messages. They honour ``SUPPORTS_COLOR``.
- ``Style`` strategies handed to the trace renderer. ``PlainStyle`` leaves text
  untouched, ``AnsiStyle`` wraps it in escape sequences. The renderer never
  writes escape codes itself.
"""

import os
import sys


class Colors:
    """ANSI escape sequences."""
    RESET = '\x1b[0m'
    BOLD = '\x1b[1m'
    DIM = '\x1b[2m'
    CYAN = '\x1b[36m'
    GRAY = '\x1b[90m'
    BRIGHT_RED = '\x1b[91m'
    BRIGHT_YELLOW = '\x1b[93m'
    BRIGHT_CYAN = '\x1b[96m'


def _detect_color_support(stream=None) -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    stream = stream or sys.stdout
    return hasattr(stream, 'isatty') and stream.isatty()


SUPPORTS_COLOR = _detect_color_support()


def colorize(text: str, color: str) -> str:
    """Wrap text in a color code when the terminal supports it."""
    if not SUPPORTS_COLOR:
        return text
    return f"{color}{text}{Colors.RESET}"


def error(text: str) -> str:
    return colorize(text, Colors.BRIGHT_RED)


class PlainStyle:
    """Rendering style that emits no escape codes."""

    def event(self, text: str) -> str:
        return text

    def call(self, text: str) -> str:
        return text

    def location(self, text: str) -> str:
        return text

    def error(self, text: str) -> str:
        return text


class AnsiStyle(PlainStyle):
    """Rendering style using the terminal palette of hevm trace output."""

    def _wrap(self, text: str, color: str) -> str:
        return f"{color}{text}{Colors.RESET}"

    def event(self, text: str) -> str:
        return self._wrap(text, Colors.CYAN)

    def call(self, text: str) -> str:
        return self._wrap(text, Colors.BOLD)

    def location(self, text: str) -> str:
        return self._wrap(text, Colors.GRAY)

    def error(self, text: str) -> str:
        return self._wrap(text, Colors.BRIGHT_RED)


def default_style(use_colors: bool = True) -> PlainStyle:
    """
    Pick a rendering style for the current environment.

    Args:
        use_colors: Set to False to force plain output (``--no-color``)

    Returns:
        AnsiStyle when colors are wanted and supported, PlainStyle otherwise
    """
    if use_colors and SUPPORTS_COLOR:
        return AnsiStyle()
    return PlainStyle()
