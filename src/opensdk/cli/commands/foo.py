"""Foo resource commands for the opensdk CLI."""

import click

from opensdk.cli.commands.api import list_params, request_preview
from opensdk.cli.logging import cli_command
from opensdk.cli.registry import get_context


@click.group("foo")
def foo() -> None:
    """Foo resources."""
    pass


@foo.command("list")
@click.pass_context
@cli_command("foo-list")
def foo_list_cmd(ctx: click.Context) -> None:
    """List foos for the account.

    Uses --page, --per-page, --query and --domain.
    """
    cli_ctx = get_context(ctx)
    cli_ctx.emit(request_preview(cli_ctx, "GET", "foos", params=list_params(cli_ctx)))


@foo.command("get")
@click.pass_context
@cli_command("foo-get")
def foo_get_cmd(ctx: click.Context) -> None:
    """Show a single foo selected with --record-id."""
    cli_ctx = get_context(ctx)
    record_id = cli_ctx.require("record-id")
    cli_ctx.emit(request_preview(cli_ctx, "GET", f"foos/{record_id}"))
