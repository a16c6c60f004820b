"""
Executable module for lockkeeper.

Running:
    python -m lockkeeper

is equivalent to:
    lockkeeper
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> int:
    """Report a CLI import failure on stderr and return the exit code."""
    try:
        from lockkeeper.__version__ import __version__ as version
    except ImportError:
        version = "<unknown>"

    sys.stderr.write("lockkeeper CLI could not be started.\n")
    sys.stderr.write(f"Python version    : {sys.version}\n")
    sys.stderr.write(f"lockkeeper version: {version}\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")
    return 1


def main() -> int:
    """
    Main entrypoint when executing `python -m lockkeeper`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from lockkeeper.cli import main as cli_main
    except ImportError as exc:
        return _print_startup_error(exc)

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
