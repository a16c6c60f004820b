"""
Shared context object for lockkeeper CLI commands.

Holds the global options and the loaded configuration for one CLI
invocation so subcommands can read them through Click's context.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from lockkeeper.config import LockKeeperConfig


class LockKeeperContext:
    """Global context object for lockkeeper CLI commands.

    Attributes:
        config_path: Path to the configuration file, if one was used.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration (defaults when no file was found).
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: LockKeeperConfig = LockKeeperConfig()


#: Click decorator for injecting :class:`LockKeeperContext` into commands.
pass_context = click.make_pass_decorator(LockKeeperContext, ensure=True)
