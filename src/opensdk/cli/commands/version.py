"""Version command for the opensdk CLI."""

import click

from opensdk import __version__
from opensdk.cli.logging import cli_command
from opensdk.cli.registry import get_context
from opensdk.config import APP_NAME


@click.command("version")
@click.pass_context
@cli_command("version")
def version(ctx: click.Context) -> None:
    """Show CLI version information."""
    cli_ctx = get_context(ctx)
    cli_ctx.emit({"name": APP_NAME, "version": __version__})
