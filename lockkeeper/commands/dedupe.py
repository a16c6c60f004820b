"""Dedupe command implementation for lockkeeper.

Finds package ranges that are locked to different versions even though
they could share one, and optionally rewrites the lockfile so they do.
Ranges that reject the shared version are only reported: moving them
needs a range bump in ``package.json``.

Workspace packages are discovered from the ``package.json`` next to the
lockfile, so ranges resolved to local sources can be compared with
registry versions of the same package.

Typical usage::

    # Report duplicates in ./yarn.lock
    $ lockkeeper dedupe

    # Apply the changes, keeping a timestamped copy of the old file
    $ lockkeeper dedupe --fix --backup

    # Machine-readable report
    $ lockkeeper dedupe --format json
"""

from __future__ import annotations

import sys
import json
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from lockkeeper.core import Lockfile, find_local_packages
from lockkeeper.exceptions import LockKeeperError
from lockkeeper.models import AnalyzeResult
from lockkeeper.context import pass_context, LockKeeperContext
from lockkeeper.commands.common import OUTPUT_FORMATS, resolve_lockfile
from lockkeeper.utils import (
    colorize_change,
    get_logger,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.dedupe")


@click.command()
@click.argument(
    "lockfile",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--fix",
    is_flag=True,
    help="Rewrite the lockfile so duplicates share one version.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what --fix would change without writing anything.",
)
@click.option(
    "--backup",
    is_flag=True,
    help="Create a timestamped backup before rewriting the lockfile.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def dedupe(
    ctx: LockKeeperContext,
    lockfile: Optional[Path],
    fix: bool,
    dry_run: bool,
    backup: bool,
    format: str,
) -> None:
    """Find duplicate resolutions in a yarn lockfile.

    LOCKFILE defaults to the configured lockfile (``yarn.lock``), searched
    for in the current directory and its parents.

    Exits:
        0 if the lockfile has no duplicates or they were fixed,
        1 if duplicates remain or an error occurred.
    """
    try:
        remaining = asyncio.run(
            _dedupe_async(
                ctx,
                lockfile,
                fix=fix and not dry_run,
                dry_run=dry_run,
                backup=backup or ctx.config.backup,
                format=format,
            )
        )
        sys.exit(1 if remaining else 0)

    except LockKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Async orchestration
# ---------------------------------------------------------------------------


async def _dedupe_async(
    ctx: LockKeeperContext,
    lockfile_arg: Optional[Path],
    *,
    fix: bool,
    dry_run: bool,
    backup: bool,
    format: str,
) -> bool:
    """Analyze the lockfile and apply the result when ``fix`` is set.

    Returns:
        ``True`` if duplicates are left in the lockfile.
    """
    path = resolve_lockfile(ctx, lockfile_arg)
    show_progress = format == "table"

    logger.info("Analyzing %s...", path)
    lockfile = await Lockfile.load(path)

    local_packages = find_local_packages(path.parent)
    config = ctx.config
    package_filter = (
        (lambda name: not config.is_ignored(name)) if config.ignore_packages else None
    )

    result = lockfile.analyze(local_packages, package_filter=package_filter)

    if format == "json":
        print(json.dumps(result.to_json(), indent=2))
    else:
        _display_table(result)

    if show_progress and result.invalid_ranges:
        print_warning(
            f"{len(result.invalid_ranges)} range(s) could not be analyzed"
        )

    if not (result.new_versions or result.new_ranges):
        if show_progress:
            print_success("No duplicate resolutions found")
        return False

    if dry_run or not fix or not result.new_versions:
        if show_progress:
            _report_pending(result, dry_run=dry_run)
        return True

    lockfile.replace_versions(result.new_versions)
    backup_path = await lockfile.save(path, backup=backup)
    if backup_path is not None:
        logger.info("Created backup: %s", backup_path)

    if show_progress:
        print_success(
            f"Deduplicated {len(result.new_versions)} range(s) in {path}"
        )
        if result.new_ranges:
            _report_range_bumps(result)

    # Range moves are left to a manifest change
    return bool(result.new_ranges)


def _report_pending(result: AnalyzeResult, *, dry_run: bool) -> None:
    if dry_run:
        print_warning("\nDry run mode - no changes applied")
    elif result.new_versions:
        print_warning(
            f"\n{len(result.new_versions)} range(s) can be deduplicated; "
            "run with --fix to apply"
        )
    if result.new_ranges:
        _report_range_bumps(result)


def _report_range_bumps(result: AnalyzeResult) -> None:
    print_warning(
        f"{len(result.new_ranges)} range(s) do not accept the shared version; "
        "bump them in package.json and reinstall"
    )


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def _display_table(result: AnalyzeResult) -> None:
    """Render proposed changes, one row per range."""
    data: List[Dict[str, Any]] = []

    for change in result.new_versions:
        data.append(
            {
                "Package": change.name,
                "Range": change.range,
                "Current": change.old_version,
                "New": f"[bold green]{change.new_version}[/bold green]",
                "Change": colorize_change("version"),
            }
        )

    for change in result.new_ranges:
        data.append(
            {
                "Package": change.name,
                "Range": f"{change.old_range} -> {change.new_range}",
                "Current": change.old_version,
                "New": f"[bold green]{change.new_version}[/bold green]",
                "Change": colorize_change("range"),
            }
        )

    column_styles = {
        "Package": {"style": "bold cyan", "no_wrap": True},
        "Range": {"justify": "left"},
        "Current": {"justify": "center", "style": "dim"},
        "New": {"justify": "center"},
        "Change": {"justify": "center"},
    }

    print_table(data, title="Duplicate Resolutions", column_styles=column_styles)
