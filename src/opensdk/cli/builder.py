"""Declarative construction of the opensdk command tree.

The root command is assembled from an ordered list of attachment
functions, each mutating the Click group it is given::

    init_command(
        group,
        with_command(foo),
        with_command(cfg),
        with_global_flags(),
    )

Before any subcommand runs, the root callback loads the config file and
re-binds every root option into the configuration store, so flags given
on the command line always win over file and environment values.
"""

from typing import Callable, List, Sequence

import click
from click.core import ParameterSource

from opensdk.cli.output import OUTPUT_FORMATS, OUTPUT_JSON
from opensdk.cli.registry import default_commands, get_context
from opensdk.cli.validation import cmd_pre_run, flag_contains
from opensdk.config import APP_NAME, ConfigStore
from opensdk.logging_config import LOG_FORMATS, setup_logging

CMD_NAME = APP_NAME

OPT_ACCESS_TOKEN = "access-token"
OPT_ACCOUNT = "account"
OPT_BASE_URL = "base-url"
OPT_COLLABORATOR_ID = "collaborator-id"
OPT_CONFIG_FILE = "config-file"
OPT_CONFIRM = "confirm"
OPT_DOMAIN = "domain"
OPT_FORMAT = "format"
OPT_FROM_FILE = "from-file"
OPT_LOG_FORMAT = "log-format"
OPT_NO_INTERACTIVE = "no-interactive"
OPT_OUTPUT = "output"
OPT_PAGE = "page"
OPT_PER_PAGE = "per-page"
OPT_PROFILE = "profile"
OPT_QUERY = "query"
OPT_RECORD_ID = "record-id"
OPT_SANDBOX = "sandbox"

CommandOption = Callable[[click.Group], None]


def init_command(cmd: click.Group, *options: CommandOption) -> click.Group:
    """Apply attachment functions to ``cmd`` in order and return it."""
    for option in options:
        option(cmd)
    return cmd


def with_command(sub: click.Command) -> CommandOption:
    """Attachment adding ``sub`` as a subcommand."""

    def attach(cmd: click.Group) -> None:
        cmd.add_command(sub)

    return attach


def global_options() -> List[click.Option]:
    """Options declared on the root command and shared by every subcommand."""
    return [
        click.Option(
            [f"--{OPT_CONFIG_FILE}"],
            metavar="PATH",
            help="Config file to use (overrides OPENSDK_CONFIG_FILE).",
        ),
        click.Option(
            [f"--{OPT_PROFILE}"],
            help="Profile name; selects <profile>.<ext> in the config directory.",
        ),
        click.Option(
            [f"--{OPT_FORMAT}"],
            default=OUTPUT_JSON,
            show_default=True,
            metavar="[" + "|".join(OUTPUT_FORMATS) + "]",
            help="Output format.",
        ),
        click.Option([f"--{OPT_SANDBOX}"], is_flag=True, help="Use the sandbox API."),
        click.Option(
            [f"--{OPT_NO_INTERACTIVE}"],
            is_flag=True,
            help="Never prompt; fail instead.",
        ),
        click.Option(
            [f"--{OPT_CONFIRM}"],
            is_flag=True,
            help="Assume yes for confirmation prompts.",
        ),
        click.Option([f"--{OPT_ACCESS_TOKEN}"], help="API access token."),
        click.Option([f"--{OPT_ACCOUNT}"], help="Account identifier."),
        click.Option([f"--{OPT_BASE_URL}"], help="API base URL."),
        click.Option([f"--{OPT_COLLABORATOR_ID}"], help="Collaborator identifier."),
        click.Option([f"--{OPT_DOMAIN}"], help="Domain name."),
        click.Option(
            [f"--{OPT_FROM_FILE}"],
            metavar="PATH",
            help="Read the request payload from a JSON or YAML file.",
        ),
        click.Option(
            [f"--{OPT_OUTPUT}"],
            metavar="PATH",
            help="Write command output to a file instead of stdout.",
        ),
        click.Option([f"--{OPT_PAGE}"], type=int, default=1, show_default=True, help="Page number."),
        click.Option(
            [f"--{OPT_PER_PAGE}"],
            type=int,
            default=30,
            show_default=True,
            help="Items per page.",
        ),
        click.Option([f"--{OPT_QUERY}"], help="Search query."),
        click.Option([f"--{OPT_RECORD_ID}"], help="Record identifier."),
    ]


def with_global_flags() -> CommandOption:
    """Attachment adding :func:`global_options` to the root command."""

    def attach(cmd: click.Group) -> None:
        cmd.params.extend(global_options())

    return attach


def flag_name(param: click.Parameter) -> str:
    """Kebab-case flag name of a Click parameter (``--per-page`` -> ``per-page``)."""
    long_opts = [opt for opt in param.opts if opt.startswith("--")]
    if long_opts:
        return long_opts[0][2:]
    return (param.name or "").replace("_", "-")


def bind_flags(ctx: click.Context, store: ConfigStore) -> None:
    """Re-bind every parameter of ``ctx.command`` into ``store``.

    Values supplied on the command line become flag-layer values; the
    defaults of untouched options become store defaults, which rank
    below file and environment values.
    """
    for param in ctx.command.params:
        if not param.expose_value or param.name not in ctx.params:
            continue
        value = ctx.params[param.name]
        name = flag_name(param)
        if ctx.get_parameter_source(param.name) == ParameterSource.COMMANDLINE:
            store.set_flag(name, value)
        elif value is not None:
            store.set_default(name, value)


@click.pass_context
def _root_callback(ctx: click.Context, **params: object) -> None:
    """opensdk - command-line client for the OpenSDK API.

    Configuration is read from flags, OPENSDK_* environment variables
    and the profile's config file, in that order of priority.
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)

    cli_context = get_context(ctx)

    cli_context.load_config_file(
        config_file=ctx.params.get("config_file"),
        profile=ctx.params.get("profile"),
    )
    if cli_context.load_error is not None:
        click.echo(f"Warning: {cli_context.load_error}", err=True)

    bind_flags(ctx, cli_context.store)
    config = cli_context.finalize()
    setup_logging(
        config.get_string("log-level", "WARNING"),
        config.get_string(OPT_LOG_FORMAT),
    )

    cmd_pre_run(
        lambda: flag_contains(config, OPT_FORMAT, OUTPUT_FORMATS),
        lambda: flag_contains(config, OPT_LOG_FORMAT, LOG_FORMATS),
    )


def cmd_root(commands: Sequence[click.Command] = ()) -> click.Group:
    """Build the root ``opensdk`` command.

    Args:
        commands: Subcommands to attach; defaults to foo, bar, cfg and
            version.
    """
    cmd = click.Group(
        name=CMD_NAME,
        callback=_root_callback,
        invoke_without_command=True,
        help=_root_callback.__doc__,
        context_settings={"help_option_names": ["-h", "--help"]},
    )

    attachments = [with_command(sub) for sub in (commands or default_commands())]
    return init_command(cmd, *attachments, with_global_flags())
