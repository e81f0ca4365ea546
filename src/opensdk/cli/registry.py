"""Command registry for the opensdk CLI.

Centralizes access to the per-invocation CLI context and the list of
subcommands attached to the root command.
"""

from typing import List

import click

from opensdk.cli.config import CLIContext, create_context


def get_context(ctx: click.Context) -> CLIContext:
    """Get the CLI context stored on the Click context.

    A fresh context is created from ``os.environ`` when the command tree
    was invoked without one (e.g. ``CliRunner().invoke(cli, ...)``).
    """
    obj = ctx.find_root().ensure_object(dict)
    if "cli_context" not in obj:
        obj["cli_context"] = create_context()
    return obj["cli_context"]


def default_commands() -> List[click.Command]:
    """Subcommands of the root ``opensdk`` command.

    Command modules are imported lazily to avoid circular imports.
    """
    from opensdk.cli.commands import bar, cfg, foo, version

    return [foo, bar, cfg, version]
