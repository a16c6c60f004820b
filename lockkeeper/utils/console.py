"""
Console output utilities for lockkeeper using Rich.

User-facing output for CLI commands goes through here; diagnostics go
through :mod:`lockkeeper.utils.logger`.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, List, Optional

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

# ---------------------------------------------------------------------------
# Theme configuration
# ---------------------------------------------------------------------------

LOCKKEEPER_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "highlight": "bold magenta",
    }
)

# ---------------------------------------------------------------------------
# Console lifecycle management
# ---------------------------------------------------------------------------

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return a singleton Rich Console instance."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=LOCKKEEPER_THEME,
                    no_color=not use_color,
                    highlight=use_color,
                )
    return _console


def reconfigure_console() -> None:
    """Reset the global console instance.

    Useful if environment variables (e.g. NO_COLOR) change at runtime.
    """
    global _console
    with _console_lock:
        _console = None


# ---------------------------------------------------------------------------
# Status message helpers
# ---------------------------------------------------------------------------


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    """Print a success message."""
    _get_console().print(f"{prefix} {message}", style="success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print an error message."""
    _get_console().print(f"{prefix} {message}", style="error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    """Print a warning message."""
    _get_console().print(f"{prefix} {message}", style="warning")


# ---------------------------------------------------------------------------
# Structured output
# ---------------------------------------------------------------------------


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
    show_row_lines: bool = False,
) -> None:
    """Render row dictionaries as a Rich table.

    Args:
        data: List of row dictionaries; nothing is printed when empty.
        headers: Column order. Defaults to keys of the first row.
        title: Optional table title.
        column_styles: Per-column ``style``, ``justify`` and ``no_wrap``.
        show_row_lines: Whether to draw horizontal lines between rows.
    """
    if not data:
        return

    headers = headers or list(data[0].keys())
    column_styles = column_styles or {}

    table = Table(
        title=title,
        show_header=True,
        header_style="bold",
        show_lines=show_row_lines,
    )
    for header in headers:
        config = column_styles.get(header, {})
        table.add_column(
            header,
            style=config.get("style"),
            justify=config.get("justify", "default"),
            no_wrap=config.get("no_wrap", False),
            overflow="fold",
        )

    for row in data:
        table.add_row(*(str(row.get(h, "")) for h in headers))

    _get_console().print(table)


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


def colorize_change(kind: str) -> str:
    """Return a Rich-markup label for a lockfile change kind.

    Args:
        kind: ``added``, ``removed``, ``changed``, ``version`` or ``range``.

    Returns:
        Rich markup string; unknown kinds are returned unchanged.
    """
    color_map = {
        "added": "green",
        "removed": "red",
        "changed": "yellow",
        "version": "cyan",
        "range": "magenta",
    }

    color = color_map.get(kind.lower())
    return f"[{color}]{kind}[/{color}]" if color else kind
