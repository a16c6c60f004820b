"""Show command implementation for lockkeeper."""

from __future__ import annotations

import sys
import json
import asyncio
from pathlib import Path
from typing import Optional

import click

from lockkeeper.core import Lockfile
from lockkeeper.exceptions import LockKeeperError
from lockkeeper.context import pass_context, LockKeeperContext
from lockkeeper.commands.common import OUTPUT_FORMATS, resolve_lockfile
from lockkeeper.utils import print_error, print_table


@click.command()
@click.argument("name")
@click.argument(
    "lockfile",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def show(
    ctx: LockKeeperContext,
    name: str,
    lockfile: Optional[Path],
    format: str,
) -> None:
    """List the ranges locked for package NAME and their versions.

    Exits with 1 when NAME is not in the lockfile.
    """
    try:
        path = resolve_lockfile(ctx, lockfile)
        records = asyncio.run(Lockfile.load(path)).get(name)
    except LockKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)

    if not records:
        print_error(f"Package not found in lockfile: {name}")
        sys.exit(1)

    if format == "json":
        print(json.dumps([record.to_json() for record in records], indent=2))
        return

    print_table(
        [
            {"Range": record.range, "Version": record.version, "Entry": record.data_key}
            for record in records
        ],
        title=name,
        column_styles={"Version": {"style": "bold green", "justify": "center"}},
    )
