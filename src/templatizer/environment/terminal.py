"""ANSI styling for template diagnostics.

Error messages and ``format_compact()`` output are styled by role (error
code, location, hint, docs link). Styling is decided once at import: on
when stdout is a terminal, off otherwise, with ``FORCE_COLOR`` and
``NO_COLOR`` overriding the check in that order.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

ColorName = Literal["reset", "bold", "dim", "red", "green", "cyan", "bright_red", "bright_blue"]

_COLORS: dict[str, str] = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
    "bright_blue": "\033[94m",
}

# Diagnostic role -> styles applied to it.
_ROLES: dict[str, tuple[ColorName, ...]] = {
    "code": ("bright_red", "bold"),
    "location": ("cyan",),
    "hint": ("green",),
    "muted": ("dim",),
    "link": ("bright_blue",),
}

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    return _USE_COLORS


def colorize(text: str, *colors: ColorName) -> str:
    """Wrap ``text`` in ANSI codes when styling is on.

    Example:
        >>> colorize("T-RUN-001", "bright_red", "bold")  # styling on
        '\\x1b[91m\\x1b[1mT-RUN-001\\x1b[0m'
    """
    codes = "".join(_COLORS.get(color, "") for color in colors) if _USE_COLORS else ""
    return f"{codes}{text}{_COLORS['reset']}" if codes else text


def strip_colors(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


def _styled(role: str, text: str) -> str:
    return colorize(text, *_ROLES[role])


def error_code(text: str) -> str:
    return _styled("code", text)


def location(text: str) -> str:
    """Style a ``template:line (node ip)`` location."""
    return _styled("location", text)


def hint(text: str) -> str:
    return _styled("hint", text)


def dim_text(text: str) -> str:
    return _styled("muted", text)


def docs_url(text: str) -> str:
    return _styled("link", text)


def format_error_header(code: str | None, message: str) -> str:
    """``T-XXX-NNN: message``, or just the message when there is no code."""
    return f"{error_code(code)}: {message}" if code else message
