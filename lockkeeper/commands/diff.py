"""Diff command implementation for lockkeeper.

Compares two lockfiles per ``(name, range)`` pair. The lockfiles may use
different grammars.

Typical usage::

    $ lockkeeper diff old/yarn.lock yarn.lock
    $ lockkeeper diff --format json base.lock head.lock
"""

from __future__ import annotations

import sys
import json
import asyncio
from pathlib import Path

import click

from lockkeeper.core import Lockfile
from lockkeeper.exceptions import LockKeeperError
from lockkeeper.models import DiffResult
from lockkeeper.commands.common import OUTPUT_FORMATS
from lockkeeper.utils import (
    colorize_change,
    get_logger,
    print_error,
    print_success,
    print_table,
)

logger = get_logger("commands.diff")


@click.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "-f",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="table",
    help="Output format.",
)
def diff(old: Path, new: Path, format: str) -> None:
    """Show ranges added, changed or removed between OLD and NEW.

    Exits:
        0 whether or not the lockfiles differ, 1 if an error occurred.
    """
    try:
        result = asyncio.run(_diff_async(old, new))
    except LockKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)

    if format == "json":
        print(json.dumps(result.to_json(), indent=2))
    elif result.is_empty():
        print_success("Lockfiles resolve the same packages")
    else:
        _display_table(result)


async def _diff_async(old: Path, new: Path) -> DiffResult:
    baseline, current = await asyncio.gather(Lockfile.load(old), Lockfile.load(new))
    logger.info("Comparing %s against %s", new, old)
    return current.diff(baseline)


def _display_table(result: DiffResult) -> None:
    data = [
        {"Change": colorize_change(kind), "Package": item.name, "Range": item.range}
        for kind, items in (
            ("added", result.added),
            ("changed", result.changed),
            ("removed", result.removed),
        )
        for item in items
    ]
    print_table(
        data,
        title="Lockfile Diff",
        column_styles={"Package": {"style": "bold cyan", "no_wrap": True}},
    )
