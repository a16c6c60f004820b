"""Subcommands of the ``lockkeeper`` CLI."""
