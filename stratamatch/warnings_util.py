"""Utilities for surfacing non-fatal stratification warnings."""

import sys
import warnings

from .errors import ContinuityWarning

# ANSI color codes - yellow for warnings
_YELLOW = "\033[93m"
_BOLD = "\033[1m"
_RESET = "\033[0m"


def format_warning(message: str) -> str:
    """Format a warning message for a color terminal."""
    return f"{_YELLOW}{_BOLD}WARNING:{_RESET} {_YELLOW}{message}{_RESET}"


def warn(message: str, category=ContinuityWarning, stacklevel: int = 2) -> str:
    """
    Issue a warning and echo it in color when stderr is a terminal.

    Parameters
    ----------
    message : str
        Warning message to display
    category : Warning
        Warning category (default: ContinuityWarning)
    stacklevel : int
        Stack level for warning origin (default: 2)

    Returns
    -------
    str
        The message, so callers can record it alongside their result
    """
    # Standard warning, for logging, filtering and pytest.warns
    warnings.warn(message, category, stacklevel=stacklevel + 1)

    if sys.stderr.isatty():
        print(format_warning(message), file=sys.stderr)

    return message
