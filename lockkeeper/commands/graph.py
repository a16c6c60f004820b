"""Graph command implementation for lockkeeper.

Prints the package-level dependency graph of a lockfile, or with
``--dependents`` every package that depends on a given one, directly or
through other packages.
"""

from __future__ import annotations

import sys
import json
import asyncio
from pathlib import Path
from typing import Dict, Optional, Set

import click

from lockkeeper.core import Lockfile, dependents_of
from lockkeeper.exceptions import LockKeeperError
from lockkeeper.context import pass_context, LockKeeperContext
from lockkeeper.commands.common import OUTPUT_FORMATS, resolve_lockfile
from lockkeeper.utils import get_logger, print_error, print_table, print_warning

logger = get_logger("commands.graph")


@click.command()
@click.argument(
    "lockfile",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--dependents",
    "-d",
    metavar="NAME",
    help="Only list the packages that depend on NAME.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def graph(
    ctx: LockKeeperContext,
    lockfile: Optional[Path],
    dependents: Optional[str],
    format: str,
) -> None:
    """Show which packages depend on which."""
    try:
        path = resolve_lockfile(ctx, lockfile)
        loaded = asyncio.run(Lockfile.load(path))
    except LockKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)

    dependency_graph = loaded.create_simplified_dependency_graph()
    logger.info("Graph has %d package(s)", len(dependency_graph))

    if dependents is not None:
        if dependents not in dependency_graph:
            print_error(f"Package not found in lockfile: {dependents}")
            sys.exit(1)
        found = dependents_of(dependency_graph, dependents)
        _display_dependents(dependents, found, format)
        return

    if format == "json":
        serializable = {name: sorted(edges) for name, edges in dependency_graph.items()}
        print(json.dumps(serializable, indent=2))
        return

    print_table(
        [
            {"Package": name, "Dependencies": ", ".join(sorted(edges)) or "-"}
            for name, edges in dependency_graph.items()
        ],
        title="Dependency Graph",
        column_styles={"Package": {"style": "bold cyan", "no_wrap": True}},
    )


def _display_dependents(name: str, found: Set[str], format: str) -> None:
    if format == "json":
        print(json.dumps({name: sorted(found)}, indent=2))
        return
    if not found:
        print_warning(f"Nothing depends on {name}")
        return
    print_table(
        [{"Package": parent} for parent in sorted(found)],
        title=f"Dependents of {name}",
    )
