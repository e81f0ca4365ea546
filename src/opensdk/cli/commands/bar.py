"""Bar resource commands for the opensdk CLI.

Bars have collaborators; ``bar collaborator`` addresses one with
--record-id and --collaborator-id.
"""

import click

from opensdk.cli.commands.api import list_params, load_payload, request_preview
from opensdk.cli.logging import cli_command
from opensdk.cli.registry import get_context


@click.group("bar")
def bar() -> None:
    """Bar resources."""
    pass


@bar.command("list")
@click.pass_context
@cli_command("bar-list")
def bar_list_cmd(ctx: click.Context) -> None:
    """List bars for the account."""
    cli_ctx = get_context(ctx)
    cli_ctx.emit(request_preview(cli_ctx, "GET", "bars", params=list_params(cli_ctx)))


@bar.command("get")
@click.pass_context
@cli_command("bar-get")
def bar_get_cmd(ctx: click.Context) -> None:
    """Show a single bar selected with --record-id."""
    cli_ctx = get_context(ctx)
    record_id = cli_ctx.require("record-id")
    cli_ctx.emit(request_preview(cli_ctx, "GET", f"bars/{record_id}"))


@bar.command("create")
@click.pass_context
@cli_command("bar-create")
def bar_create_cmd(ctx: click.Context) -> None:
    """Create a bar from the payload given with --from-file."""
    cli_ctx = get_context(ctx)
    body = load_payload(cli_ctx.require("from-file"))
    cli_ctx.emit(request_preview(cli_ctx, "POST", "bars", body=body))


@bar.command("collaborator")
@click.pass_context
@cli_command("bar-collaborator")
def bar_collaborator_cmd(ctx: click.Context) -> None:
    """Show one collaborator of a bar."""
    cli_ctx = get_context(ctx)
    record_id = cli_ctx.require("record-id")
    collaborator_id = cli_ctx.require("collaborator-id")
    cli_ctx.emit(
        request_preview(
            cli_ctx,
            "GET",
            f"bars/{record_id}/collaborators/{collaborator_id}",
        )
    )
